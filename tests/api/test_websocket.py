"""Tests for the room WebSocket."""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from api.main import app


@pytest.fixture
def client():
    """Synchronous client that can open WebSockets."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def room_path():
    """Socket path for a room no other test uses."""
    return f"/ws/rooms/ws-{uuid4().hex[:8]}"


def receive_until_state(ws):
    """Collect messages up to and including the next room_state."""
    messages = []
    while True:
        message = ws.receive_json()
        messages.append(message)
        if message["type"] == "room_state":
            return messages


def join(ws, name="Ann", balance=100):
    ws.send_json({"type": "join", "name": name, "balance": balance})
    joined = ws.receive_json()
    assert joined["type"] == "joined"
    return joined["player_id"], receive_until_state(ws)


def test_connect_sends_room_state(client, room_path):
    with client.websocket_connect(room_path) as ws:
        message = ws.receive_json()
        assert message["type"] == "room_state"
        assert message["room"]["players"] == []
        assert message["room"]["game_state"] is None


def test_join_broadcasts_event_and_state(client, room_path):
    with client.websocket_connect(room_path) as ws:
        ws.receive_json()
        player_id, messages = join(ws)

        event, state = messages
        assert event["type"] == "game_message"
        assert event["event_type"] == "PLAYER_JOINED"
        assert event["data"]["player_id"] == player_id
        assert state["room"]["players"][0]["id"] == player_id


def test_other_connections_see_updates(client, room_path):
    with client.websocket_connect(room_path) as first, client.websocket_connect(room_path) as second:
        first.receive_json()
        second.receive_json()

        player_id, _ = join(first)
        messages = receive_until_state(second)

        assert messages[0]["event_type"] == "PLAYER_JOINED"
        assert messages[-1]["room"]["players"][0]["id"] == player_id


def test_round_over_websocket(client, room_path):
    with client.websocket_connect(room_path) as ws:
        ws.receive_json()
        player_id, _ = join(ws, balance=100)

        ws.send_json({"type": "place_bet", "amount": 10})
        messages = receive_until_state(ws)
        assert messages[0]["event_type"] == "BET_PLACED"
        assert messages[-1]["room"]["players"][0]["balance"] == 90

        ws.send_json({"type": "start_round"})
        messages = receive_until_state(ws)
        event_types = [m["event_type"] for m in messages[:-1]]
        assert event_types.count("CARD_DEALT") == 4
        assert "ROUND_STARTED" in event_types
        assert messages[-1]["room"]["game_state"]["current_player_id"] == player_id

        ws.send_json({"type": "player_action", "action": "stand"})
        messages = receive_until_state(ws)
        event_types = [m["event_type"] for m in messages[:-1]]
        assert event_types[0] == "PLAYER_STAND"
        assert event_types[-1] == "ROUND_ENDED"
        assert messages[-1]["room"]["game_state"]["state"] == "GAME_END"


def test_action_before_join_is_error(client, room_path):
    with client.websocket_connect(room_path) as ws:
        ws.receive_json()
        ws.send_json({"type": "player_action", "action": "hit"})
        assert ws.receive_json() == {"type": "error", "message": "Join the room first"}


def test_engine_errors_go_to_sender(client, room_path):
    with client.websocket_connect(room_path) as ws:
        ws.receive_json()
        join(ws)
        ws.send_json({"type": "player_action", "action": "hit"})
        assert ws.receive_json() == {"type": "error", "message": "No round in progress"}


def test_start_without_players_is_error(client, room_path):
    with client.websocket_connect(room_path) as ws:
        ws.receive_json()
        ws.send_json({"type": "start_round"})
        assert ws.receive_json() == {"type": "error", "message": "No players in the game"}


def test_bad_messages(client, room_path):
    with client.websocket_connect(room_path) as ws:
        ws.receive_json()

        ws.send_text("not json")
        assert ws.receive_json()["message"] == "Invalid JSON"

        ws.send_json(["a", "list"])
        assert ws.receive_json()["message"] == "Expected a JSON object"

        join(ws)
        ws.send_json({"type": "dance"})
        assert ws.receive_json()["message"] == "Unknown message type: dance"

        ws.send_json({"type": "place_bet", "amount": "ten"})
        assert ws.receive_json()["message"] == "Bet amount must be an integer"


def test_leave_frees_seat(client, room_path):
    with client.websocket_connect(room_path) as ws:
        ws.receive_json()
        join(ws)

        ws.send_json({"type": "leave"})
        messages = receive_until_state(ws)
        assert messages[0]["event_type"] == "PLAYER_LEFT"
        assert messages[-1]["room"]["players"] == []

        ws.send_json({"type": "get_state"})
        assert ws.receive_json()["type"] == "room_state"


def test_boolean_amounts_are_rejected(client, room_path):
    with client.websocket_connect(room_path) as ws:
        ws.receive_json()

        ws.send_json({"type": "join", "name": "Ann", "balance": True})
        assert ws.receive_json()["message"] == "Balance must be an integer"

        join(ws)
        ws.send_json({"type": "place_bet", "amount": True})
        assert ws.receive_json()["message"] == "Bet amount must be an integer"

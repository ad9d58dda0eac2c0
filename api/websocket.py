"""WebSocket endpoint: live room updates and player commands."""

import json
import logging
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from api.rooms import GameRoom, rooms
from core.game import GameError

logger = logging.getLogger(__name__)

router = APIRouter()


class CommandError(Exception):
    """A client message the room cannot act on."""


async def _handle_message(
    room: GameRoom,
    websocket: WebSocket,
    player_id: str | None,
    message: dict[str, Any],
) -> str | None:
    """
    Apply one client message to the room.

    Returns:
        The connection's player id after the message
    """
    msg_type = message.get("type")

    if msg_type == "get_state":
        await room.send(websocket, room.room_state_message())
        return player_id

    if msg_type == "join":
        if player_id is not None:
            raise CommandError("Already seated")
        balance = message.get("balance")
        if balance is not None and (isinstance(balance, bool) or not isinstance(balance, int)):
            raise CommandError("Balance must be an integer")
        player_id = room.join(str(message.get("name", "")).strip() or "Player", balance)
        if player_id is None:
            raise CommandError("Room is full")
        await room.send(websocket, {"type": "joined", "player_id": player_id})
        return player_id

    if msg_type == "start_round":
        room.game.start_new_round()
        return player_id

    if player_id is None:
        raise CommandError("Join the room first")

    if msg_type == "leave":
        room.leave(player_id)
        return None

    if msg_type == "place_bet":
        amount = message.get("amount")
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise CommandError("Bet amount must be an integer")
        room.game.place_bet(player_id, amount)
        return player_id

    if msg_type == "player_action":
        room.game.player_action(player_id, str(message.get("action", "")))
        return player_id

    raise CommandError(f"Unknown message type: {msg_type}")


@router.websocket("/rooms/{room_id}")
async def room_websocket(websocket: WebSocket, room_id: str) -> None:
    """
    WebSocket endpoint for one room.

    Messages from client:
    - {"type": "join", "name": "Ann", "balance": 1000}
    - {"type": "leave"}
    - {"type": "place_bet", "amount": 10}
    - {"type": "start_round"}
    - {"type": "player_action", "action": "hit"|"stand"|"double_down"}
    - {"type": "get_state"}

    Messages to client:
    - {"type": "joined", "player_id": "..."} (sender only)
    - {"type": "game_message", "event_type": "...", "data": {...}} (everyone)
    - {"type": "room_state", "room": {...}} (everyone, after each command)
    - {"type": "error", "message": "..."} (sender only)
    """
    await websocket.accept()
    room = rooms.get_or_create(room_id)
    room.connect(websocket)
    player_id: str | None = None

    await room.send(websocket, room.room_state_message())

    try:
        while True:
            data = await websocket.receive_text()
            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                await room.send(websocket, {"type": "error", "message": "Invalid JSON"})
                continue
            if not isinstance(message, dict):
                await room.send(websocket, {"type": "error", "message": "Expected a JSON object"})
                continue

            async with room.lock:
                try:
                    player_id = await _handle_message(room, websocket, player_id, message)
                except (GameError, CommandError) as exc:
                    await room.send(websocket, {"type": "error", "message": str(exc)})
                    continue
                if message.get("type") != "get_state":
                    await room.flush()

    except WebSocketDisconnect:
        logger.debug("room %s: websocket closed", room_id)
    finally:
        room.disconnect(websocket)
        if player_id is not None:
            async with room.lock:
                room.leave(player_id)
                await room.flush()
        rooms.discard_if_empty(room_id)

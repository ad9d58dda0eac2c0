"""Game rooms: one blackjack table per room, shared by its connections."""

import asyncio
import logging
from typing import Any
from uuid import uuid4

from fastapi import WebSocket, WebSocketDisconnect

from api.schemas import GameStateResponse, RoomStateResponse
from config import TableConfig, config
from core.game import BlackjackGame, EventType, GameEvent, GameState
from core.game.events import EventEmitter

logger = logging.getLogger(__name__)

# Events the caller already learns about from the raised error
_PRIVATE_EVENTS = {EventType.INVALID_ACTION}

# Events worth an info line in the server log
_LOGGED_EVENTS = {
    EventType.PLAYER_JOINED,
    EventType.PLAYER_LEFT,
    EventType.ROUND_STARTED,
    EventType.DECK_SHUFFLED,
    EventType.ROUND_ENDED,
}


class GameRoom:
    """
    A room wraps one ``BlackjackGame`` and the WebSockets watching it.

    Engine events are queued as they happen and pushed to every connection
    by ``flush`` once the command that caused them has finished.
    """

    def __init__(self, room_id: str, table: TableConfig | None = None) -> None:
        self.room_id = room_id
        # Events are queued in _pending, so the engine keeps no history
        self.game = BlackjackGame(
            table=table or config.table,
            events=EventEmitter(keep_history=False),
        )
        self.lock = asyncio.Lock()
        self._connections: set[WebSocket] = set()
        self._pending: list[GameEvent] = []
        self.game.subscribe(self._on_event)

    def _on_event(self, event: GameEvent) -> None:
        """Log and queue an engine event."""
        if event.event_type in _LOGGED_EVENTS:
            logger.info("room %s: %s", self.room_id, event)
        else:
            logger.debug("room %s: %s", self.room_id, event)

        if event.event_type not in _PRIVATE_EVENTS:
            self._pending.append(event)

    # Seats

    def join(self, name: str, balance: int | None = None) -> str | None:
        """
        Seat a new player.

        Returns:
            The new player's id, or None if the room is full
        """
        player_id = uuid4().hex
        if not self.game.add_player(player_id, name, balance):
            return None
        return player_id

    def leave(self, player_id: str) -> bool:
        """Remove a player; False if they were not seated."""
        return self.game.remove_player(player_id)

    @property
    def player_count(self) -> int:
        """Return the number of seated players."""
        return len(self.game.players)

    @property
    def is_game_active(self) -> bool:
        """Check if players are taking turns."""
        return self.game.state is GameState.PLAYER_TURN

    @property
    def is_empty(self) -> bool:
        """Check if nobody is seated or watching."""
        return self.player_count == 0 and not self._connections

    # Client views

    def game_state_response(self) -> GameStateResponse | None:
        """Render the table without the deck contents."""
        if self.game.state is GameState.WAITING_FOR_PLAYERS:
            return None

        snapshot = self.game.get_game_state()
        return GameStateResponse.model_validate({
            "dealer_hand": snapshot["dealer_hand"],
            "players": snapshot["players"],
            "current_player_index": snapshot["current_player_index"],
            "current_player_id": self.game.get_current_player_id(),
            "state": snapshot["state"],
            "cards_remaining": len(snapshot["deck"]["cards"]),
            "results": {pid: o.value for pid, o in self.game.last_results.items()},
        })

    def to_client_state(self) -> RoomStateResponse:
        """Render the room for clients."""
        snapshot = self.game.get_game_state()
        return RoomStateResponse.model_validate({
            "room_id": self.room_id,
            "players": snapshot["players"],
            "game_state": self.game_state_response(),
            "is_game_active": self.is_game_active,
            "connections": self.connection_count,
        })

    # Connections

    def connect(self, websocket: WebSocket) -> None:
        """Register an accepted WebSocket."""
        self._connections.add(websocket)

    def disconnect(self, websocket: WebSocket) -> None:
        """Forget a WebSocket."""
        self._connections.discard(websocket)

    @property
    def connection_count(self) -> int:
        """Return number of open connections."""
        return len(self._connections)

    async def send(self, websocket: WebSocket, message: dict[str, Any]) -> None:
        """Send a message to one connection, dropping it if it has gone away."""
        try:
            await websocket.send_json(message)
        except (WebSocketDisconnect, RuntimeError) as exc:
            logger.warning("room %s: dropping connection: %s", self.room_id, exc)
            self.disconnect(websocket)

    async def broadcast(self, message: dict[str, Any]) -> None:
        """Send a message to every connection in the room."""
        for websocket in list(self._connections):
            await self.send(websocket, message)

    def room_state_message(self) -> dict[str, Any]:
        """Build the full room state message."""
        return {
            "type": "room_state",
            "room": self.to_client_state().model_dump(mode="json"),
        }

    async def flush(self) -> None:
        """Push queued engine events, then the new room state, to everyone."""
        events, self._pending = self._pending, []
        for event in events:
            await self.broadcast(event_to_message(event))
        await self.broadcast(self.room_state_message())


def event_to_message(event: GameEvent) -> dict[str, Any]:
    """Convert a game event to a WebSocket message."""
    return {
        "type": "game_message",
        "event_type": event.event_type.name,
        "data": event.data,
        "timestamp": event.timestamp.isoformat(),
    }


class RoomManager:
    """Create rooms on demand and drop them once they are empty."""

    def __init__(self, table: TableConfig | None = None) -> None:
        self._table = table
        self._rooms: dict[str, GameRoom] = {}

    def get(self, room_id: str) -> GameRoom | None:
        """Return an existing room."""
        return self._rooms.get(room_id)

    def get_or_create(self, room_id: str) -> GameRoom:
        """Return a room, creating it on first use."""
        room = self._rooms.get(room_id)
        if room is None:
            room = GameRoom(room_id, table=self._table)
            self._rooms[room_id] = room
            logger.info("room %s: created", room_id)
        return room

    def discard_if_empty(self, room_id: str) -> bool:
        """Delete a room nobody is using; True if it was deleted."""
        room = self._rooms.get(room_id)
        if room is None or not room.is_empty:
            return False
        del self._rooms[room_id]
        logger.info("room %s: closed", room_id)
        return True

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, room_id: object) -> bool:
        return room_id in self._rooms


# Global room registry
rooms = RoomManager()

"""Game engine and state management."""

from core.game.actions import PlayerAction
from core.game.errors import GameError
from core.game.events import GameEvent, EventType
from core.game.state import GameState
from core.game.engine import BlackjackGame

__all__ = [
    "PlayerAction",
    "GameError",
    "GameEvent",
    "EventType",
    "GameState",
    "BlackjackGame",
]

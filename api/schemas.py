"""Pydantic schemas for API requests and responses."""

from datetime import datetime
from pydantic import BaseModel, Field
from typing import Literal


# Request schemas
class JoinRequest(BaseModel):
    """Request to take a seat in a room."""

    name: str = Field(..., min_length=1, max_length=32, description="Display name")
    balance: int | None = Field(default=None, ge=0, description="Starting balance")


class PlayerRequest(BaseModel):
    """Request that only identifies the player."""

    player_id: str


class BetRequest(BaseModel):
    """Request to place a bet for the next round."""

    player_id: str
    amount: int = Field(..., ge=1, description="Bet amount")


class ActionRequest(BaseModel):
    """Request for player action."""

    player_id: str
    action: Literal["hit", "stand", "double_down"]


# Response schemas
class CardResponse(BaseModel):
    """Card representation."""

    suit: str
    rank: str


class HandResponse(BaseModel):
    """Hand representation."""

    cards: list[CardResponse]
    score: int
    is_soft: bool
    is_blackjack: bool
    is_busted: bool


class PlayerResponse(BaseModel):
    """Seated player."""

    id: str
    name: str
    hand: HandResponse
    bet: int
    balance: int
    is_active: bool


class GameStateResponse(BaseModel):
    """Table state as shown to clients; the deck itself stays hidden."""

    dealer_hand: HandResponse
    players: list[PlayerResponse]
    current_player_index: int
    current_player_id: str | None
    state: str
    cards_remaining: int
    results: dict[str, str]


class RoomStateResponse(BaseModel):
    """Room with its players and table."""

    room_id: str
    players: list[PlayerResponse]
    game_state: GameStateResponse | None
    is_game_active: bool
    connections: int = 0


class JoinResponse(BaseModel):
    """Seat assignment."""

    player_id: str
    room: RoomStateResponse


class HealthResponse(BaseModel):
    """Health check payload."""

    status: Literal["OK"]
    rooms: int
    timestamp: datetime

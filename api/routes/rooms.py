"""Room API endpoints."""

from fastapi import APIRouter, HTTPException

from api.rooms import GameRoom, rooms
from api.schemas import (
    ActionRequest,
    BetRequest,
    JoinRequest,
    JoinResponse,
    PlayerRequest,
    RoomStateResponse,
)

router = APIRouter()


def _get_room(room_id: str) -> GameRoom:
    """Look up a room or answer 404."""
    room = rooms.get(room_id)
    if room is None:
        raise HTTPException(status_code=404, detail=f"Room not found: {room_id}")
    return room


@router.get("/{room_id}")
async def get_room(room_id: str) -> RoomStateResponse:
    """Get current room and table state."""
    return _get_room(room_id).to_client_state()


@router.post("/{room_id}/join")
async def join_room(room_id: str, request: JoinRequest) -> JoinResponse:
    """Take a seat, creating the room if needed."""
    room = rooms.get_or_create(room_id)

    async with room.lock:
        player_id = room.join(request.name, request.balance)
        if player_id is None:
            raise HTTPException(status_code=409, detail="Room is full")
        await room.flush()

    return JoinResponse(player_id=player_id, room=room.to_client_state())


@router.post("/{room_id}/leave")
async def leave_room(room_id: str, request: PlayerRequest) -> dict[str, bool]:
    """Give up a seat; the room closes when nobody is left."""
    room = _get_room(room_id)

    async with room.lock:
        if not room.leave(request.player_id):
            raise HTTPException(status_code=404, detail="Player not found")
        await room.flush()

    closed = rooms.discard_if_empty(room_id)
    return {"left": True, "room_closed": closed}


@router.post("/{room_id}/bet")
async def place_bet(room_id: str, request: BetRequest) -> RoomStateResponse:
    """Place a bet for the next round."""
    room = _get_room(room_id)

    async with room.lock:
        room.game.place_bet(request.player_id, request.amount)
        await room.flush()

    return room.to_client_state()


@router.post("/{room_id}/start")
async def start_round(room_id: str) -> RoomStateResponse:
    """Deal a new round."""
    room = _get_room(room_id)

    async with room.lock:
        room.game.start_new_round()
        await room.flush()

    return room.to_client_state()


@router.post("/{room_id}/action")
async def player_action(room_id: str, request: ActionRequest) -> RoomStateResponse:
    """Execute a player action."""
    room = _get_room(room_id)

    async with room.lock:
        room.game.player_action(request.player_id, request.action)
        await room.flush()

    return room.to_client_state()

"""Recoverable errors raised by the game engine.

Every error is raised before any state is touched, so a rejected command
leaves the table exactly as it was.
"""


class GameError(ValueError):
    """Base class for rejected game commands."""

    message = "Invalid game command"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class NoPlayersError(GameError):
    message = "No players in the game"


class PlayerNotFoundError(GameError):
    message = "Player not found"


class NotPlayersTurnError(GameError):
    message = "Not this player's turn"


class RoundNotInProgressError(GameError):
    message = "No round in progress"


class RoundInProgressError(GameError):
    message = "Cannot do that while a round is in progress"


class CannotDoubleDownError(GameError):
    message = "Cannot double down"


class InvalidActionError(GameError):
    message = "Invalid action"


class InvalidBetError(GameError):
    message = "Invalid bet"

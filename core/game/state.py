"""Game state enumeration."""

from enum import Enum, auto


class GameState(Enum):
    """
    Game state machine states.

    Flow: WAITING_FOR_PLAYERS → PLAYER_TURN → DEALER_TURN → GAME_END,
    then back to PLAYER_TURN when the next round starts.
    """

    # Table open, no round dealt yet
    WAITING_FOR_PLAYERS = auto()

    # Players act in seat order
    PLAYER_TURN = auto()

    # Dealer draws to 17
    DEALER_TURN = auto()

    # Round settled, ready for the next one
    GAME_END = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


# States in which no round is being played
BETWEEN_ROUNDS: frozenset[GameState] = frozenset(
    {GameState.WAITING_FOR_PLAYERS, GameState.GAME_END}
)

"""Player seated at a blackjack table."""

from dataclasses import dataclass, field

from core.hand import Hand


@dataclass
class Player:
    """
    A player's identity, hand and money.

    The game engine is the only mutator. ``bet`` is the stake currently on
    the table; it has already been taken out of ``balance``.
    """

    id: str
    name: str
    balance: int = 0
    hand: Hand = field(default_factory=Hand)
    bet: int = 0
    is_active: bool = True

    def reset_for_round(self) -> None:
        """Give the player a fresh hand and let them act again."""
        self.hand = Hand()
        self.is_active = True

    @property
    def can_double_down(self) -> bool:
        """Check if the player may double their stake on this hand."""
        return len(self.hand) == 2 and self.balance >= self.bet

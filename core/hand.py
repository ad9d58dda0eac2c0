"""Hand evaluation and settlement outcomes for blackjack."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from core.cards import Card

BLACKJACK = 21


@dataclass
class Hand:
    """A blackjack hand with score calculation."""

    cards: list[Card] = field(default_factory=list)

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    def clear(self) -> None:
        """Remove all cards from the hand."""
        self.cards.clear()

    def calculate_score(self) -> int:
        """
        Calculate the best hand score.

        Every Ace starts at 1; each one is then promoted to 11 while that
        keeps the total at or under 21. Returns the highest total that
        doesn't bust, or the lowest bust total.
        """
        total = 0
        aces = 0

        for card in self.cards:
            if card.is_ace:
                aces += 1
            total += card.value

        for _ in range(aces):
            if total + 10 <= BLACKJACK:
                total += 10

        return total

    @property
    def score(self) -> int:
        """Return the best hand score."""
        return self.calculate_score()

    @property
    def is_soft(self) -> bool:
        """Check if the hand counts an Ace as 11."""
        hard_total = sum(card.value for card in self.cards)
        return self.calculate_score() != hard_total

    @property
    def is_blackjack(self) -> bool:
        """Check if the hand is a natural blackjack (21 with 2 cards)."""
        return len(self.cards) == 2 and self.calculate_score() == BLACKJACK

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (score > 21)."""
        return self.calculate_score() > BLACKJACK

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        score_str = f"({self.score})"
        if self.is_soft:
            score_str = f"(soft {self.score})"
        if self.is_blackjack:
            score_str = "(BLACKJACK)"
        if self.is_busted:
            score_str = "(BUST)"
        return f"{cards_str} {score_str}"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, score={self.score})"


class Outcome(Enum):
    """Result of one player hand against the dealer."""

    BUST = "bust"
    BLACKJACK = "blackjack"
    LOSE = "lose"
    PUSH = "push"
    WIN = "win"


def evaluate_hands(player_hand: Hand, dealer_hand: Hand) -> Outcome:
    """
    Compare a player hand with the dealer's final hand.

    Bust and blackjack conditions are checked before the numeric comparison,
    in this order: player bust, player-only blackjack, dealer-only blackjack,
    double blackjack, dealer bust or higher player score, equal scores.
    """
    if player_hand.is_busted:
        return Outcome.BUST

    player_bj = player_hand.is_blackjack
    dealer_bj = dealer_hand.is_blackjack

    if player_bj and not dealer_bj:
        return Outcome.BLACKJACK
    if dealer_bj and not player_bj:
        return Outcome.LOSE
    if player_bj and dealer_bj:
        return Outcome.PUSH

    player_score = player_hand.score
    dealer_score = dealer_hand.score

    if dealer_hand.is_busted or player_score > dealer_score:
        return Outcome.WIN
    if player_score == dealer_score:
        return Outcome.PUSH
    return Outcome.LOSE


def payout_for(outcome: Outcome, bet: int, blackjack_ratio: tuple[int, int] = (3, 2)) -> int:
    """
    Return the amount credited back to the player's balance.

    The stake was already taken from the balance, so a push returns ``bet``
    and a plain win returns ``2 * bet``. A blackjack returns the stake plus
    the floored ratio winnings (3:2 by default).
    """
    numerator, denominator = blackjack_ratio
    if outcome is Outcome.BLACKJACK:
        return bet + bet * numerator // denominator
    if outcome is Outcome.WIN:
        return bet * 2
    if outcome is Outcome.PUSH:
        return bet
    return 0

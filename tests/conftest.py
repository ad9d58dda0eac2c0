"""Pytest fixtures for blackjack table tests."""

import pytest
from random import Random

from hypothesis import strategies as st

from config import TableConfig
from core.cards import Card, Deck, Rank, Suit
from core.hand import Hand
from core.game import BlackjackGame


def make_hand(*cards: str) -> Hand:
    """Build a hand from card strings such as 'AS', '10H'."""
    hand = Hand()
    for card in cards:
        hand.add_card(Card.from_string(card))
    return hand


def stack_deck(game: BlackjackGame, *cards: str) -> None:
    """Make the game's deck deal ``cards`` in the given order."""
    game.deck._cards = [Card.from_string(c) for c in reversed(cards)]


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def deck(rng):
    """A shuffled deck."""
    d = Deck(rng=rng)
    d.shuffle()
    return d


@pytest.fixture
def empty_hand():
    """An empty hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return make_hand("AS", "KH")


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return make_hand("AS", "6H")


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return make_hand("10S", "6H")


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return make_hand("10S", "6H", "KC")


@pytest.fixture
def table():
    """Default table rules, independent of the environment."""
    return TableConfig(max_players=6, default_balance=1000)


@pytest.fixture
def game(rng, table):
    """A new game instance with no players."""
    return BlackjackGame(table=table, rng=rng)


@pytest.fixture
def three_player_game(game):
    """A game with three seated players who have each bet 10."""
    for pid, name in (("p1", "Ann"), ("p2", "Bob"), ("p3", "Cid")):
        game.add_player(pid, name, 100)
        game.place_bet(pid, 10)
    return game


# Hypothesis strategies for property-based testing
@st.composite
def card_strategy(draw):
    """Generate a random card."""
    rank = draw(st.sampled_from(list(Rank)))
    suit = draw(st.sampled_from(list(Suit)))
    return Card(suit, rank)


@st.composite
def hand_strategy(draw, min_cards=1, max_cards=11):
    """Generate a random hand."""
    cards = draw(st.lists(card_strategy(), min_size=min_cards, max_size=max_cards))
    return Hand(cards=cards)

"""Plain-dict snapshots of engine objects for the presentation layer."""

from typing import TYPE_CHECKING, Any

from core.cards import Card, Deck
from core.hand import Hand
from core.player import Player

if TYPE_CHECKING:
    from core.game.engine import BlackjackGame


def card_to_dict(card: Card) -> dict[str, str]:
    """Serialize a card to a dict."""
    return {"suit": card.suit.value, "rank": card.rank.value}


def hand_to_dict(hand: Hand) -> dict[str, Any]:
    """Serialize a hand with its derived scores."""
    return {
        "cards": [card_to_dict(c) for c in hand.cards],
        "score": hand.score,
        "is_soft": hand.is_soft,
        "is_blackjack": hand.is_blackjack,
        "is_busted": hand.is_busted,
    }


def deck_to_dict(deck: Deck) -> dict[str, Any]:
    """Serialize the remaining deck, bottom card first."""
    return {"cards": [card_to_dict(c) for c in deck]}


def player_to_dict(player: Player) -> dict[str, Any]:
    """Serialize a player."""
    return {
        "id": player.id,
        "name": player.name,
        "hand": hand_to_dict(player.hand),
        "bet": player.bet,
        "balance": player.balance,
        "is_active": player.is_active,
    }


def game_to_dict(game: "BlackjackGame") -> dict[str, Any]:
    """
    Serialize the full engine state.

    The remaining deck is included, so this snapshot must only be handed to
    trusted, co-located consumers.
    """
    return {
        "deck": deck_to_dict(game.deck),
        "dealer_hand": hand_to_dict(game.dealer_hand),
        "players": [player_to_dict(p) for p in game.players],
        "current_player_index": game.current_player_index,
        "state": game.state.name,
    }

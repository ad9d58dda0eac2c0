"""Multiplayer blackjack game engine with state machine."""

from random import Random
from typing import Any, Callable

from transitions import Machine

from config import TableConfig
from core.cards import Card, Deck
from core.hand import Hand, Outcome, evaluate_hands, payout_for
from core.player import Player
from core.game.actions import PlayerAction
from core.game.errors import (
    CannotDoubleDownError,
    GameError,
    InvalidActionError,
    InvalidBetError,
    NoPlayersError,
    NotPlayersTurnError,
    PlayerNotFoundError,
    RoundInProgressError,
    RoundNotInProgressError,
)
from core.game.events import EventEmitter, EventType, GameEvent
from core.game.snapshot import game_to_dict
from core.game.state import BETWEEN_ROUNDS, GameState

DEALER = "dealer"

_OUTCOME_EVENTS: dict[Outcome, EventType] = {
    Outcome.BUST: EventType.PLAYER_LOSES,
    Outcome.BLACKJACK: EventType.PLAYER_WINS,
    Outcome.LOSE: EventType.PLAYER_LOSES,
    Outcome.PUSH: EventType.PUSH,
    Outcome.WIN: EventType.PLAYER_WINS,
}


class BlackjackGame:
    """
    Multiplayer blackjack table using a state machine.

    This is the core game logic, completely UI-agnostic.
    Communication happens through events, return values and raised
    ``GameError`` subclasses only. Once the last player finishes, the dealer
    plays and the round is settled within the same call.
    """

    # State machine states
    STATES = [s.name.lower() for s in GameState]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "deal", "source": "*", "dest": "player_turn"},
        {"trigger": "next_turn", "source": "player_turn", "dest": "player_turn"},
        {"trigger": "players_done", "source": "player_turn", "dest": "dealer_turn"},
        {"trigger": "dealer_done", "source": "dealer_turn", "dest": "game_end"},
    ]

    def __init__(
        self,
        table: TableConfig | None = None,
        rng: Random | None = None,
        events: EventEmitter | None = None,
    ) -> None:
        """
        Initialize a new table with a shuffled deck and no players.

        Args:
            table: Table rules (uses defaults if not provided)
            rng: Random number generator for reproducible games
            events: Event emitter to report through (a new one if not provided)
        """
        self.table = table or TableConfig()
        self._rng = rng
        self.deck = Deck(rng=rng)
        self.deck.shuffle()

        self.dealer_hand = Hand()
        self.players: list[Player] = []
        self.current_player_index = 0
        self.last_results: dict[str, Outcome] = {}
        self._unplayed_bets: set[str] = set()
        self.events = events if events is not None else EventEmitter()

        # Initialize state machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="waiting_for_players",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def state(self) -> GameState:
        """Get current game state as enum."""
        return GameState[self._machine_state.upper()]  # type: ignore

    @property
    def current_player(self) -> Player | None:
        """Get the player whose turn it is."""
        if 0 <= self.current_player_index < len(self.players):
            return self.players[self.current_player_index]
        return None

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    # -- Roster ---------------------------------------------------------------

    def add_player(self, player_id: str, name: str, balance: int | None = None) -> bool:
        """
        Seat a new player at the end of the turn order.

        Args:
            player_id: Unique player id
            name: Display name
            balance: Starting balance (table default if not provided)

        Returns:
            False if the table is full or the id is already seated
        """
        if balance is None:
            balance = self.table.default_balance
        if balance < 0:
            raise self._reject(GameError("Balance must not be negative"))

        if len(self.players) >= self.table.max_players:
            return False
        if self._find_index(player_id) is not None:
            return False

        self.players.append(Player(player_id, name, balance))
        self.events.emit_new(
            EventType.PLAYER_JOINED,
            player_id=player_id,
            name=name,
            balance=balance,
        )
        return True

    def remove_player(self, player_id: str) -> bool:
        """
        Remove a player from the table.

        A stake placed for a round that was never dealt is returned; a stake
        in play is forfeit. If it was the leaving player's turn, play passes
        on as if they had stood.

        Returns:
            False if no such player is seated
        """
        index = self._find_index(player_id)
        if index is None:
            return False

        player = self.players.pop(index)
        if player_id in self._unplayed_bets:
            self._unplayed_bets.discard(player_id)
            player.balance += player.bet
            player.bet = 0

        self.events.emit_new(EventType.PLAYER_LEFT, player_id=player_id, name=player.name)

        if self.state is GameState.PLAYER_TURN:
            if index < self.current_player_index:
                self.current_player_index -= 1
            elif index == self.current_player_index:
                # The next seat slid into this index; scan from it
                self.current_player_index -= 1
                self._advance_turn()
        return True

    def get_player(self, player_id: str) -> Player:
        """
        Look up a seated player.

        Raises:
            PlayerNotFoundError: If no player has this id
        """
        index = self._find_index(player_id)
        if index is None:
            raise self._reject(PlayerNotFoundError(f"Player not found: {player_id}"))
        return self.players[index]

    def _find_index(self, player_id: str) -> int | None:
        for index, player in enumerate(self.players):
            if player.id == player_id:
                return index
        return None

    # -- Betting --------------------------------------------------------------

    def place_bet(self, player_id: str, amount: int) -> None:
        """
        Stake ``amount`` from the player's balance on the next round.

        Bets are taken between rounds only. Placing a second bet before the
        round is dealt replaces the first one.

        Raises:
            PlayerNotFoundError: If no player has this id
            RoundInProgressError: If a round is being played
            InvalidBetError: If the amount is not positive or not affordable
        """
        player = self.get_player(player_id)

        if self.state not in BETWEEN_ROUNDS:
            raise self._reject(RoundInProgressError("Bets are closed while a round is in progress"))

        if amount <= 0:
            raise self._reject(InvalidBetError("Bet must be positive"))

        available = player.balance
        if player_id in self._unplayed_bets:
            available += player.bet
        if amount > available:
            raise self._reject(
                InvalidBetError(f"Bet of {amount} exceeds balance of {available}")
            )

        player.balance = available - amount
        player.bet = amount
        self._unplayed_bets.add(player_id)
        self.events.emit_new(
            EventType.BET_PLACED,
            player_id=player_id,
            amount=amount,
            balance=player.balance,
        )

    # -- Round flow -----------------------------------------------------------

    def start_new_round(self) -> None:
        """
        Reset hands and deal two cards to every player and the dealer.

        Bets are neither reset nor collected here; a player who has not
        staked since the last settlement plays the round for nothing.

        Raises:
            NoPlayersError: If nobody is seated
        """
        if not self.players:
            raise self._reject(NoPlayersError())

        self.dealer_hand = Hand()
        for player in self.players:
            player.reset_for_round()
        self.last_results = {}

        if len(self.deck) < self.table.reshuffle_threshold:
            self.deck = Deck(rng=self._rng)
            self.deck.shuffle()
            self.events.emit_new(EventType.DECK_SHUFFLED, cards_remaining=len(self.deck))

        # Deal: every player, then dealer, twice
        for _ in range(2):
            for player in self.players:
                self._deal_card_to(player.hand, player.id)
            self._deal_card_to(self.dealer_hand, DEALER)

        self._unplayed_bets.clear()
        self.current_player_index = 0
        self.deal()  # Trigger state transition

        self.events.emit_new(
            EventType.ROUND_STARTED,
            players=[p.id for p in self.players],
            cards_remaining=len(self.deck),
        )
        for player in self.players:
            if player.hand.is_blackjack:
                self.events.emit_new(EventType.PLAYER_BLACKJACK, player_id=player.id)
        self.events.emit_new(EventType.TURN_CHANGED, player_id=self.players[0].id)

    def _deal_card_to(self, hand: Hand, holder: str) -> Card | None:
        """Deal a card to a hand; an empty deck skips the deal."""
        card = self.deck.deal_card()
        if card is None:
            return None
        hand.add_card(card)
        self.events.emit_new(
            EventType.CARD_DEALT,
            card=str(card),
            holder=holder,
            score=hand.score,
        )
        return card

    def player_action(self, player_id: str, action: PlayerAction | str) -> None:
        """
        Apply an action for the player whose turn it is.

        Args:
            player_id: Acting player
            action: A ``PlayerAction`` or its name, e.g. ``"double_down"``

        Raises:
            PlayerNotFoundError: If no player has this id
            RoundNotInProgressError: If players are not taking turns
            NotPlayersTurnError: If another player is to act
            InvalidActionError: If the action is unknown or unsupported
            CannotDoubleDownError: If doubling is not allowed for this hand
        """
        index = self._find_index(player_id)
        if index is None:
            raise self._reject(PlayerNotFoundError(f"Player not found: {player_id}"))

        if self.state is not GameState.PLAYER_TURN:
            raise self._reject(RoundNotInProgressError())

        if index != self.current_player_index:
            raise self._reject(NotPlayersTurnError())

        try:
            parsed = PlayerAction.parse(action)
        except ValueError:
            raise self._reject(InvalidActionError(f"Invalid action: {action}")) from None

        handlers: dict[PlayerAction, Callable[[Player], None]] = {
            PlayerAction.HIT: self._hit,
            PlayerAction.STAND: self._stand,
            PlayerAction.DOUBLE_DOWN: self._double_down,
        }
        handler = handlers.get(parsed)
        if handler is None:
            raise self._reject(InvalidActionError(f"Action not supported: {parsed}"))

        handler(self.players[index])

    def _hit(self, player: Player) -> None:
        """Player takes another card."""
        self._deal_card_to(player.hand, player.id)
        self.events.emit_new(EventType.PLAYER_HIT, player_id=player.id, score=player.hand.score)

        if player.hand.is_busted:
            player.is_active = False
            self.events.emit_new(EventType.PLAYER_BUSTS, player_id=player.id)
            self._advance_turn()

    def _stand(self, player: Player) -> None:
        """Player keeps their hand."""
        player.is_active = False
        self.events.emit_new(EventType.PLAYER_STAND, player_id=player.id, score=player.hand.score)
        self._advance_turn()

    def _double_down(self, player: Player) -> None:
        """Player doubles their stake and takes exactly one card."""
        if not player.can_double_down:
            raise self._reject(CannotDoubleDownError())

        player.balance -= player.bet
        player.bet *= 2
        self._deal_card_to(player.hand, player.id)
        player.is_active = False

        self.events.emit_new(
            EventType.PLAYER_DOUBLE,
            player_id=player.id,
            score=player.hand.score,
            new_bet=player.bet,
        )
        if player.hand.is_busted:
            self.events.emit_new(EventType.PLAYER_BUSTS, player_id=player.id)

        self._advance_turn()

    def _advance_turn(self) -> None:
        """Move to the next active player, or let the dealer play."""
        for index in range(self.current_player_index + 1, len(self.players)):
            if self.players[index].is_active:
                self.current_player_index = index
                self.next_turn()
                self.events.emit_new(EventType.TURN_CHANGED, player_id=self.players[index].id)
                return

        self.players_done()
        self._play_dealer()

    def _play_dealer(self) -> None:
        """Dealer draws until reaching the stand score, then settles."""
        while self.dealer_hand.score < self.table.dealer_stands_on:
            if self._deal_card_to(self.dealer_hand, DEALER) is None:
                break
            self.events.emit_new(EventType.DEALER_HITS, score=self.dealer_hand.score)

        if self.dealer_hand.is_busted:
            self.events.emit_new(EventType.DEALER_BUSTS, score=self.dealer_hand.score)
        else:
            self.events.emit_new(EventType.DEALER_STANDS, score=self.dealer_hand.score)

        self.dealer_done()
        self.calculate_winners()

    def calculate_winners(self) -> dict[str, Outcome]:
        """
        Settle every player against the dealer's hand.

        Stakes were taken from balances when placed, so a loss pays nothing
        and every other outcome credits the stake back with any winnings.
        Each stake is used up by settling it: bets are zero afterwards.

        Returns:
            Outcome per player id
        """
        results: dict[str, Outcome] = {}

        for player in self.players:
            outcome = evaluate_hands(player.hand, self.dealer_hand)
            stake = player.bet
            payout = payout_for(outcome, stake, self.table.blackjack_payout)
            player.balance += payout
            player.bet = 0
            results[player.id] = outcome

            self.events.emit_new(
                _OUTCOME_EVENTS[outcome],
                player_id=player.id,
                outcome=outcome.value,
                bet=stake,
                payout=payout,
                balance=player.balance,
            )

        self.last_results = results
        self.events.emit_new(
            EventType.ROUND_ENDED,
            dealer_score=self.dealer_hand.score,
            results={pid: outcome.value for pid, outcome in results.items()},
        )
        return dict(results)

    # -- Queries --------------------------------------------------------------

    def get_current_player_id(self) -> str | None:
        """Return the id of the player whose turn it is, if any."""
        player = self.current_player
        return player.id if player is not None else None

    def get_game_state(self) -> dict[str, Any]:
        """Return a full snapshot of the table, deck included."""
        return game_to_dict(self)

    def _reject(self, error: GameError) -> GameError:
        """Report a rejected command and hand back the error to raise."""
        self.events.emit_new(EventType.INVALID_ACTION, message=str(error))
        return error

"""Round state machine: setup, dealing, passing, receiving, playing, scoring, gameOver"""

import logging
import random
from typing import List, Optional, Union

from .comparator import trick_winner
from .constants import (
    AI_MIXED, AI_NAMES, AI_TYPES, DIRECTION_NONE, DIRECTION_RIGHT, ERROR_TRICK_INCOMPLETE,
    ERROR_WRONG_PHASE, HEARTS, HUMAN_PLAYER_ID, NUM_PLAYERS, PHASE_DEALING, PHASE_GAME_OVER,
    PHASE_PASSING, PHASE_PLAYING, PHASE_RECEIVING, PHASE_SCORING, PHASE_SETUP,
)
from .exchange import pass_direction, perform_exchange, toggle_selection
from .models import Card, CompletedTrick, GameState, Player, TrickPlay
from .ranking import dealer_index, starting_player
from .rules import GameConfig
from .scoring import is_game_over, settle_round, trick_value
from .shuffle import assert_deck_integrity, create_deck, deal_hands, shuffle_deck
from .validate import (
    ValidationResult, validate_pass_execution, validate_play, validate_selection, validate_toggle,
)

logger = logging.getLogger(__name__)


class ActionResult:
    """Outcome of an intent. Rejected intents carry the unchanged state."""

    def __init__(
        self,
        success: bool,
        state: GameState,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None
    ):
        self.success = success
        self.state = state
        self.error_code = error_code
        self.error_message = error_message

    @classmethod
    def ok(cls, state: GameState) -> 'ActionResult':
        state.increment_version()
        return cls(success=True, state=state)

    @classmethod
    def rejected(cls, state: GameState, error_code: str, error_message: str) -> 'ActionResult':
        logger.debug(f"Rejected intent [{error_code}] {error_message}")
        return cls(success=False, state=state, error_code=error_code, error_message=error_message)

    @classmethod
    def from_validation(cls, state: GameState, validation: ValidationResult) -> 'ActionResult':
        return cls.rejected(state, validation.error_code, validation.error_message)


def _wrong_phase(state: GameState, expected: str) -> ActionResult:
    return ActionResult.rejected(
        state, ERROR_WRONG_PHASE,
        f"Expected phase {expected} (current: {state.game_status})"
    )


def assign_ai_types(ai_type: str, rng: Optional[random.Random] = None) -> List[str]:
    """One strategy per bot seat: the configured one for all, or a shuffled distinct set."""
    if ai_type == AI_MIXED:
        assigned = list(AI_TYPES)
        (rng or random).shuffle(assigned)
        return assigned
    return [ai_type] * (NUM_PLAYERS - 1)


def create_game(config: Optional[GameConfig] = None) -> GameState:
    """Create a game in the setup phase."""
    return GameState(config=config or GameConfig())


def initialize_game(
    state: GameState,
    config: Optional[GameConfig] = None,
    rng: Optional[random.Random] = None
) -> ActionResult:
    """
    Confirm the configuration and seat the players (setup -> dealing).

    Args:
        state: Game in setup phase
        config: Confirmed configuration (keeps the current one when omitted)
        rng: Random source for bot names, AI assignment and the dealer offset

    Returns:
        ActionResult with the state in dealing phase
    """
    if state.game_status != PHASE_SETUP:
        return _wrong_phase(state, PHASE_SETUP)

    rng = rng or random.Random()
    if config is not None:
        state.config = config

    bot_names = rng.sample(AI_NAMES, NUM_PLAYERS - 1)
    ai_types = assign_ai_types(state.config.ai_type, rng)

    state.players = [Player(id=HUMAN_PLAYER_ID, name=state.config.player_name, is_human=True)]
    for seat in range(1, NUM_PLAYERS):
        state.players.append(Player(
            id=seat,
            name=bot_names[seat - 1],
            ai_type=ai_types[seat - 1],
        ))

    state.dealer_offset = rng.randrange(NUM_PLAYERS)
    state.round_number = 1
    state.pass_direction = DIRECTION_RIGHT
    state.game_status = PHASE_DEALING
    state.game_log = [f"Game started: {', '.join(p.name for p in state.players)}"]

    logger.info(
        f"Game initialized: bots {[(p.name, p.ai_type) for p in state.players[1:]]}, "
        f"{state.config.max_rounds} rounds, max score {state.config.max_score}"
    )
    return ActionResult.ok(state)


def start_round(state: GameState, rng: Optional[random.Random] = None) -> ActionResult:
    """
    Deal a fresh shuffled deck (dealing -> passing).

    Round 1 always passes right; later rounds follow the configured cycle.
    """
    if state.game_status != PHASE_DEALING:
        return _wrong_phase(state, PHASE_DEALING)

    hands = deal_hands(shuffle_deck(create_deck(), rng))
    for player, hand in zip(state.players, hands):
        player.hand = hand
        player.points_this_round = 0
        player.tricks_won = 0
        player.selected_to_pass = []

    if state.round_number == 1:
        state.pass_direction = DIRECTION_RIGHT
    else:
        state.pass_direction = pass_direction(state.round_number, state.config.pass_sequence_name)

    state.current_trick = []
    state.trick_history = []
    state.lead_suit = None
    state.hearts_broken = False
    state.received_cards = []
    state.winning_message = None
    assert_deck_integrity(state)
    state.turn_index = starting_player(state)
    state.game_status = PHASE_PASSING

    dealer = state.players[dealer_index(state)].name
    state.log(f"Round {state.round_number}: {dealer} deals, pass {state.pass_direction}")
    logger.info(
        f"Round {state.round_number} dealt by {dealer}; pass {state.pass_direction}, "
        f"{state.players[state.turn_index].name} leads"
    )
    return ActionResult.ok(state)


def toggle_select_to_pass(
    state: GameState,
    card_id: str,
    player_id: int = HUMAN_PLAYER_ID
) -> ActionResult:
    """Select a card to pass, or deselect it. A fourth selection is rejected."""
    validation = validate_toggle(state, player_id, card_id)
    if not validation.valid:
        return ActionResult.from_validation(state, validation)

    toggle_selection(state.get_player(player_id), card_id)
    return ActionResult.ok(state)


def set_pass_selection(state: GameState, player_id: int, card_ids: List[str]) -> ActionResult:
    """Record a complete three-card selection. A seat that already selected is rejected."""
    validation = validate_selection(state, player_id, card_ids)
    if not validation.valid:
        return ActionResult.from_validation(state, validation)

    state.get_player(player_id).selected_to_pass = list(card_ids)
    return ActionResult.ok(state)


def execute_pass(state: GameState) -> ActionResult:
    """
    Exchange the selected cards (passing -> receiving).

    Only fires once all four seats hold exactly three selections. The cards
    received by the human are exposed in ``received_cards``.
    """
    validation = validate_pass_execution(state)
    if not validation.valid:
        return ActionResult.from_validation(state, validation)

    state.received_cards = perform_exchange(state)
    assert_deck_integrity(state)
    state.turn_index = starting_player(state)
    state.game_status = PHASE_RECEIVING

    state.log(f"Cards passed {state.pass_direction}")
    logger.info(f"Exchange {state.pass_direction} done; human received {[str(c) for c in state.received_cards]}")
    return ActionResult.ok(state)


def skip_pass(state: GameState) -> ActionResult:
    """Acknowledge a round without exchange (passing -> playing)."""
    if state.game_status != PHASE_PASSING or state.pass_direction != DIRECTION_NONE:
        return ActionResult.rejected(state, ERROR_WRONG_PHASE, "Only a no-pass round can skip the exchange")

    state.game_status = PHASE_PLAYING
    return ActionResult.ok(state)


def acknowledge_received(state: GameState) -> ActionResult:
    """Acknowledge the received cards (receiving -> playing)."""
    if state.game_status != PHASE_RECEIVING:
        return _wrong_phase(state, PHASE_RECEIVING)

    state.game_status = PHASE_PLAYING
    return ActionResult.ok(state)


def play_card(state: GameState, player_id: int, card: Union[Card, str]) -> ActionResult:
    """
    Play a card into the current trick.

    Accepted only on the player's turn, once per trick, and when the card
    follows the lead suit or the player is void in it. The fourth card does
    not resolve the trick; call ``resolve_trick`` for that.
    """
    card_id = card.id if isinstance(card, Card) else card
    validation = validate_play(state, player_id, card_id)
    if not validation.valid:
        return ActionResult.from_validation(state, validation)

    played = validation.card
    player = state.get_player(player_id)
    player.hand = [c for c in player.hand if c.id != played.id]

    if not state.current_trick:
        state.lead_suit = played.suit
    state.current_trick.append(TrickPlay(player_id=player_id, card=played))
    state.turn_index = (state.turn_index + 1) % NUM_PLAYERS
    if played.suit == HEARTS:
        state.hearts_broken = True

    logger.debug(f"{player.name} plays {played}")
    return ActionResult.ok(state)


def resolve_trick(state: GameState) -> ActionResult:
    """
    Commit a complete trick: the highest card of the lead suit takes it and
    its value (possibly negative) is credited to the winner.

    When the last trick of the round resolves, the round is settled and the
    game moves to scoring, or straight to gameOver when it is finished.
    """
    if state.game_status != PHASE_PLAYING:
        return _wrong_phase(state, PHASE_PLAYING)
    if len(state.current_trick) < NUM_PLAYERS:
        return ActionResult.rejected(
            state, ERROR_TRICK_INCOMPLETE,
            f"Trick has {len(state.current_trick)} of {NUM_PLAYERS} cards"
        )

    plays = list(state.current_trick)
    winner_id = trick_winner(plays, state.lead_suit)
    value = trick_value(t.card for t in plays)

    winner = state.get_player(winner_id)
    winner.points_this_round += value
    winner.tricks_won += 1

    state.trick_history.append(CompletedTrick(plays=plays, winner_id=winner_id, value=value))
    state.current_trick = []
    state.lead_suit = None
    state.turn_index = winner_id

    state.log(f"{winner.name} takes {' '.join(str(t.card) for t in plays)} ({value:+d})")
    logger.info(f"Trick {len(state.trick_history)} to {winner.name}: {value:+d}")

    if all(not p.hand for p in state.players):
        _finish_round(state)

    return ActionResult.ok(state)


def _finish_round(state: GameState):
    settle_round(state)
    summary = ', '.join(f"{p.name} {p.points_this_round:+d}" for p in state.players)
    state.log(f"Round {state.round_number} settled: {summary}")

    if is_game_over(state):
        state.game_status = PHASE_GAME_OVER
        leader = max(state.players, key=lambda p: p.score)
        state.log(f"Game over after round {state.round_number}: {leader.name} wins with {leader.score}")
        logger.info(f"Game over after round {state.round_number}; scores {[p.score for p in state.players]}")
    else:
        state.game_status = PHASE_SCORING
        logger.info(f"Round {state.round_number} settled: {summary}")


def next_round(state: GameState) -> ActionResult:
    """Move on from the score screen (scoring -> dealing)."""
    if state.game_status != PHASE_SCORING:
        return _wrong_phase(state, PHASE_SCORING)

    state.round_number += 1
    state.pass_direction = pass_direction(state.round_number, state.config.pass_sequence_name)
    for player in state.players:
        player.points_this_round = 0
        player.tricks_won = 0
        player.selected_to_pass = []
    state.current_trick = []
    state.lead_suit = None
    state.hearts_broken = False
    state.winning_message = None
    state.game_status = PHASE_DEALING
    return ActionResult.ok(state)


def reset_game(state: GameState) -> ActionResult:
    """Start over with the same configuration, back in setup."""
    return ActionResult.ok(create_game(state.config))


def advance_phase(state: GameState, rng: Optional[random.Random] = None) -> ActionResult:
    """
    Apply the acknowledgement expected by the current phase.

    dealing deals the round, a no-pass round skips the exchange, receiving
    starts play and scoring moves to the next deal. Other phases need a real
    intent and are rejected.
    """
    if state.game_status == PHASE_DEALING:
        return start_round(state, rng)
    if state.game_status == PHASE_PASSING and state.pass_direction == DIRECTION_NONE:
        return skip_pass(state)
    if state.game_status == PHASE_RECEIVING:
        return acknowledge_received(state)
    if state.game_status == PHASE_SCORING:
        return next_round(state)
    return ActionResult.rejected(
        state, ERROR_WRONG_PHASE,
        f"Nothing to acknowledge in phase {state.game_status}"
    )

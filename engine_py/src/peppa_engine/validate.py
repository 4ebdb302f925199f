"""
Move legality and intent validation.
"""

from typing import List, Optional

from .comparator import cards_of_suit
from .constants import (
    DIRECTION_NONE, ERROR_ALREADY_PLAYED, ERROR_ALREADY_SELECTED, ERROR_CARD_NOT_IN_HAND,
    ERROR_ILLEGAL_MOVE, ERROR_INVALID_SELECTION, ERROR_NOT_YOUR_TURN, ERROR_PASS_NOT_READY,
    ERROR_PLAYER_NOT_FOUND, ERROR_SELECTION_FULL, ERROR_WRONG_PHASE, NUM_PLAYERS, PASS_COUNT,
    PHASE_PASSING, PHASE_PLAYING,
)
from .models import Card, GameState, TrickPlay


class ValidationResult:
    """Result of intent validation."""

    def __init__(
        self,
        valid: bool,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None,
        card: Optional[Card] = None
    ):
        self.valid = valid
        self.error_code = error_code
        self.error_message = error_message
        self.card = card

    @classmethod
    def success(cls, card: Optional[Card] = None) -> 'ValidationResult':
        """Create a successful validation result."""
        return cls(valid=True, card=card)

    @classmethod
    def error(cls, error_code: str, error_message: str) -> 'ValidationResult':
        """Create an error validation result."""
        return cls(valid=False, error_code=error_code, error_message=error_message)


def legal_moves(hand: List[Card], trick: List[TrickPlay], lead_suit: Optional[str]) -> List[Card]:
    """
    Cards the engine accepts from this hand.

    Any card may lead. Afterwards the lead suit must be followed when held;
    a player void in it may play anything. Hearts are never restricted here.
    """
    if not trick:
        return list(hand)
    following = cards_of_suit(hand, lead_suit)
    return following if following else list(hand)


def validate_play(state: GameState, player_id: int, card_id: str) -> ValidationResult:
    """
    Validate a card play attempt.

    Args:
        state: Current game state
        player_id: Seat attempting the play
        card_id: Card being played

    Returns:
        ValidationResult carrying the Card from the player's hand on success
    """
    if state.game_status != PHASE_PLAYING:
        return ValidationResult.error(
            ERROR_WRONG_PHASE,
            f"Game is not in playing phase (current: {state.game_status})"
        )

    if state.turn_index != player_id:
        return ValidationResult.error(
            ERROR_NOT_YOUR_TURN,
            f"It's not your turn (current turn: {state.turn_index})"
        )

    if state.has_played(player_id) or len(state.current_trick) >= NUM_PLAYERS:
        return ValidationResult.error(
            ERROR_ALREADY_PLAYED,
            "Player has already played in this trick"
        )

    player = state.get_player(player_id)
    if not player:
        return ValidationResult.error(ERROR_PLAYER_NOT_FOUND, "Player not found")

    card = player.find_card(card_id)
    if card is None:
        return ValidationResult.error(
            ERROR_CARD_NOT_IN_HAND,
            f"Player does not hold {card_id}"
        )

    if card not in legal_moves(player.hand, state.current_trick, state.lead_suit):
        return ValidationResult.error(
            ERROR_ILLEGAL_MOVE,
            f"Must follow {state.lead_suit}"
        )

    return ValidationResult.success(card)


def _validate_passing_phase(state: GameState) -> Optional[ValidationResult]:
    if state.game_status != PHASE_PASSING:
        return ValidationResult.error(
            ERROR_WRONG_PHASE,
            f"Game is not in passing phase (current: {state.game_status})"
        )
    if state.pass_direction == DIRECTION_NONE:
        return ValidationResult.error(ERROR_WRONG_PHASE, "No exchange this round")
    return None


def validate_toggle(state: GameState, player_id: int, card_id: str) -> ValidationResult:
    """Validate selecting or deselecting one card to pass."""
    phase_error = _validate_passing_phase(state)
    if phase_error:
        return phase_error

    player = state.get_player(player_id)
    if not player:
        return ValidationResult.error(ERROR_PLAYER_NOT_FOUND, "Player not found")

    card = player.find_card(card_id)
    if card is None:
        return ValidationResult.error(ERROR_CARD_NOT_IN_HAND, f"Player does not hold {card_id}")

    if card_id not in player.selected_to_pass and len(player.selected_to_pass) >= PASS_COUNT:
        return ValidationResult.error(
            ERROR_SELECTION_FULL,
            f"Already selected {PASS_COUNT} cards"
        )

    return ValidationResult.success(card)


def validate_selection(state: GameState, player_id: int, card_ids: List[str]) -> ValidationResult:
    """Validate a complete selection submitted at once (bot path)."""
    phase_error = _validate_passing_phase(state)
    if phase_error:
        return phase_error

    player = state.get_player(player_id)
    if not player:
        return ValidationResult.error(ERROR_PLAYER_NOT_FOUND, "Player not found")

    if player.selected_to_pass:
        return ValidationResult.error(
            ERROR_ALREADY_SELECTED,
            "Player has already selected cards to pass"
        )

    if len(card_ids) != PASS_COUNT or len(set(card_ids)) != PASS_COUNT:
        return ValidationResult.error(
            ERROR_INVALID_SELECTION,
            f"Must select exactly {PASS_COUNT} distinct cards"
        )

    for cid in card_ids:
        if not player.has_card(cid):
            return ValidationResult.error(ERROR_CARD_NOT_IN_HAND, f"Player does not hold {cid}")

    return ValidationResult.success()


def validate_pass_execution(state: GameState) -> ValidationResult:
    """All four seats must have exactly three cards selected."""
    phase_error = _validate_passing_phase(state)
    if phase_error:
        return phase_error

    waiting = [p.id for p in state.players if len(p.selected_to_pass) != PASS_COUNT]
    if waiting:
        return ValidationResult.error(
            ERROR_PASS_NOT_READY,
            f"Waiting for selections from seats {waiting}"
        )

    return ValidationResult.success()

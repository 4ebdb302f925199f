"""
Pass-direction schedule and card exchange between rounds.
"""

import logging
from typing import Dict, List

from .constants import (
    DIRECTION_LABELS, DIRECTION_NONE, HUMAN_PLAYER_ID, NUM_PLAYERS, PASS_SEQUENCES, source_seat,
)
from .models import Card, GameState, Player
from .shuffle import sort_hand

logger = logging.getLogger(__name__)


def pass_direction(round_number: int, sequence_name: str) -> str:
    """
    Direction of the exchange for a round.

    Args:
        round_number: 1-based round index
        sequence_name: 'DSC-' (right, left, across, none) or 'DS-C' (right, left, none, across)

    Returns:
        One of 'right', 'left', 'across', 'none'
    """
    cycle = PASS_SEQUENCES[sequence_name]
    return cycle[(round_number - 1) % len(cycle)]


def direction_label(round_number: int, sequence_name: str) -> str:
    """Single-letter label for the score table: D(estra), S(inistra), C(entro), -."""
    return DIRECTION_LABELS[pass_direction(round_number, sequence_name)]


def toggle_selection(player: Player, card_id: str) -> None:
    """Add the card to the pass selection, or remove it if already there."""
    if card_id in player.selected_to_pass:
        player.selected_to_pass.remove(card_id)
    else:
        player.selected_to_pass.append(card_id)


def exchange_sources(direction: str) -> Dict[int, int]:
    """Map each seat to the seat whose selected cards it receives."""
    if direction == DIRECTION_NONE:
        return {}
    return {seat: source_seat(seat, direction) for seat in range(NUM_PLAYERS)}


def perform_exchange(state: GameState) -> List[Card]:
    """
    Move every player's selected cards to their receiver.

    Mutates the hands in place; each resulting hand is re-sorted and every
    selection cleared.

    Returns:
        The cards the human seat received
    """
    sources = exchange_sources(state.pass_direction)
    outgoing = {
        p.id: [c for c in p.hand if c.id in p.selected_to_pass]
        for p in state.players
    }

    for player in state.players:
        kept = [c for c in player.hand if c.id not in player.selected_to_pass]
        incoming = outgoing[sources[player.id]]
        player.hand = sort_hand(kept + incoming)
        player.selected_to_pass = []
        logger.debug(
            f"Seat {player.id} receives {[str(c) for c in incoming]} from seat {sources[player.id]}"
        )

    return list(outgoing[sources[HUMAN_PLAYER_ID]])

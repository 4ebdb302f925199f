# engine_py/src/peppa_engine/ranking.py

from typing import Dict, List

from .constants import NUM_PLAYERS
from .exchange import direction_label
from .models import GameState


def dealer_index(state: GameState) -> int:
    """Seat of the dealer for the current round. Informational only."""
    return (state.round_number - 1 + state.dealer_offset) % NUM_PLAYERS


def starting_player(state: GameState) -> int:
    """Seat that leads the first trick of the current round."""
    return (state.round_number + state.dealer_offset) % NUM_PLAYERS


def get_standings(state: GameState) -> Dict[int, int]:
    """
    Dense ranking by cumulative score: equal scores share a position and the
    next distinct score takes the following one.

    Args:
        state: The current GameState

    Returns:
        Mapping of player id to 1-based position
    """
    distinct = sorted({p.score for p in state.players}, reverse=True)
    return {p.id: distinct.index(p.score) + 1 for p in state.players}


def score_table(state: GameState) -> List[dict]:
    """One row per completed round: direction label and each player's points."""
    if not state.players:
        return []
    rounds_played = len(state.players[0].score_history)
    rows = []
    for i in range(rounds_played):
        rows.append({
            'round': i + 1,
            'direction': direction_label(i + 1, state.config.pass_sequence_name),
            'points': {p.id: p.score_history[i] for p in state.players},
        })
    return rows

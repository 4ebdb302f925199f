"""
State serialization and sanitization utilities.
"""

from typing import Any, Dict, List, Optional

import orjson

from .constants import HUMAN_PLAYER_ID
from .models import Card, CompletedTrick, GameState, TrickPlay
from .ranking import dealer_index, get_standings, score_table
from .rules import GameConfig
from .scoring import trick_value


def sanitize_state(state: GameState, viewer_id: Optional[int] = HUMAN_PLAYER_ID) -> Dict[str, Any]:
    """
    Snapshot of the game as seen from one seat.

    Args:
        state: Game state to sanitize
        viewer_id: Seat of the player viewing the state (to show their cards)

    Returns:
        Plain dictionary safe for JSON transmission
    """
    standings = get_standings(state) if state.players else {}

    sanitized = {
        "version": state.version,
        "phase": state.game_status,
        "round_number": state.round_number,
        "pass_direction": state.pass_direction,
        "dealer": dealer_index(state) if state.players else None,
        "turn": state.turn_index,
        "lead_suit": state.lead_suit,
        "hearts_broken": state.hearts_broken,
        "current_trick": [_serialize_play(t) for t in state.current_trick],
        "current_trick_value": trick_value(t.card for t in state.current_trick) if state.current_trick else None,
        "trick_history": [_serialize_trick(t) for t in state.trick_history],
        "players": [],
        "score_table": score_table(state),
        "winning_message": state.winning_message,
        "received_cards": [],
        "rules": _serialize_config(state.config),
        "log": state.game_log[-10:],
    }

    for player in state.players:
        sanitized_player = {
            "id": player.id,
            "name": player.name,
            "is_human": player.is_human,
            "ai_type": player.ai_type,
            "hand_count": len(player.hand),
            "score": player.score,
            "points_this_round": player.points_this_round,
            "tricks_won": player.tricks_won,
            "selected_count": len(player.selected_to_pass),
            "position": standings.get(player.id),
        }

        # Show full hand and selection only to the viewer
        if player.id == viewer_id:
            sanitized_player["hand"] = _serialize_cards(player.hand)
            sanitized_player["selected_to_pass"] = list(player.selected_to_pass)

        sanitized["players"].append(sanitized_player)

    if viewer_id == HUMAN_PLAYER_ID:
        sanitized["received_cards"] = _serialize_cards(state.received_cards)

    return sanitized


def state_to_json(state: GameState, viewer_id: Optional[int] = HUMAN_PLAYER_ID) -> bytes:
    """Encode a sanitized snapshot; integer keys (player ids) become strings."""
    return orjson.dumps(sanitize_state(state, viewer_id), option=orjson.OPT_NON_STR_KEYS)


def serialize_card(card: Card) -> Dict[str, Any]:
    return {"id": card.id, "suit": card.suit, "rank": card.rank, "value": card.value}


def _serialize_cards(cards: List[Card]) -> List[Dict[str, Any]]:
    return [serialize_card(c) for c in cards]


def _serialize_play(play: TrickPlay) -> Dict[str, Any]:
    return {"player_id": play.player_id, "card": serialize_card(play.card)}


def _serialize_trick(trick: CompletedTrick) -> Dict[str, Any]:
    return {
        "plays": [_serialize_play(t) for t in trick.plays],
        "winner_id": trick.winner_id,
        "value": trick.value,
    }


def _serialize_config(config: GameConfig) -> Dict[str, Any]:
    """Serialize game configuration."""
    return config.model_dump()

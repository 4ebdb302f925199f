"""
Tests for state snapshots and JSON encoding.
"""

import random

import orjson

from peppa_engine.engine import create_game, initialize_game, start_round
from peppa_engine.serialization import sanitize_state, state_to_json


def dealt_game():
    rng = random.Random(17)
    state = create_game()
    initialize_game(state, rng=rng)
    start_round(state, rng)
    return state


def test_sanitize_hides_other_hands():
    """Test only the viewer's hand is included."""
    state = dealt_game()
    snapshot = sanitize_state(state, viewer_id=0)

    assert snapshot["phase"] == "passing"
    assert snapshot["pass_direction"] == "right"
    assert len(snapshot["players"]) == 4
    assert len(snapshot["players"][0]["hand"]) == 13
    for player in snapshot["players"][1:]:
        assert "hand" not in player
        assert "selected_to_pass" not in player
        assert player["hand_count"] == 13


def test_sanitize_for_bot_viewer():
    """Test a bot seat sees its own hand and not the human's received cards."""
    state = dealt_game()
    state.received_cards = list(state.players[0].hand[:3])
    snapshot = sanitize_state(state, viewer_id=2)

    assert "hand" in snapshot["players"][2]
    assert "hand" not in snapshot["players"][0]
    assert snapshot["received_cards"] == []
    assert len(sanitize_state(state, viewer_id=0)["received_cards"]) == 3


def test_sanitize_setup_game():
    """Test an unseated game still serializes."""
    snapshot = sanitize_state(create_game())
    assert snapshot["phase"] == "setup"
    assert snapshot["players"] == []
    assert snapshot["dealer"] is None
    assert snapshot["rules"]["max_rounds"] == 8


def test_state_to_json():
    """Test the JSON encoding round-trips through orjson."""
    state = dealt_game()
    decoded = orjson.loads(state_to_json(state, viewer_id=0))
    assert decoded["round_number"] == 1
    assert decoded["players"][0]["name"] == state.players[0].name
    assert decoded["current_trick_value"] is None

"""
Tests for the round state machine: transitions, rejections and termination.
"""

import random

from peppa_engine.bots import create_bot
from peppa_engine.bots.hal import HalBot
from peppa_engine.constants import (
    AI_NAMES, AI_TYPES, DIRECTION_NONE, DIRECTION_RIGHT, ERROR_ALREADY_PLAYED, ERROR_ALREADY_SELECTED,
    ERROR_CARD_NOT_IN_HAND, ERROR_ILLEGAL_MOVE, ERROR_NOT_YOUR_TURN, ERROR_PASS_NOT_READY,
    ERROR_TRICK_INCOMPLETE, ERROR_WRONG_PHASE, PHASE_DEALING, PHASE_GAME_OVER, PHASE_PASSING,
    PHASE_PLAYING, PHASE_RECEIVING, PHASE_SCORING, PHASE_SETUP,
)
from peppa_engine.engine import (
    acknowledge_received, advance_phase, assign_ai_types, create_game, execute_pass,
    initialize_game, next_round, play_card, reset_game, resolve_trick, set_pass_selection,
    skip_pass, start_round,
)
from peppa_engine.models import GameState, Player
from peppa_engine.ranking import starting_player
from peppa_engine.rules import create_config
from peppa_engine.shuffle import create_deck, validate_deck_integrity

DECK = {c.id: c for c in create_deck()}


def dealt_game(seed=5, **config):
    rng = random.Random(seed)
    state = create_game(create_config(**config))
    initialize_game(state, rng=rng)
    start_round(state, rng)
    return state, rng


def passed_game(seed=5):
    """Dealt game with the round-1 exchange done and play started."""
    state, rng = dealt_game(seed)
    for player in state.players:
        set_pass_selection(state, player.id, [c.id for c in player.hand[-3:]])
    execute_pass(state)
    acknowledge_received(state)
    return state


def last_trick_state(round_number, scores, max_rounds=8, max_score=100):
    """Every seat holds one card; P2's 5C will take P1's queen of spades."""
    state = GameState(config=create_config(max_rounds=max_rounds, max_score=max_score))
    state.players = [
        Player(id=i, name=f"P{i}", is_human=(i == 0), score=scores[i]) for i in range(4)
    ]
    for player, cid in zip(state.players, ('2C', 'QS', '5C', '9D')):
        player.hand = [DECK[cid]]
    state.round_number = round_number
    state.turn_index = 0
    state.game_status = PHASE_PLAYING
    return state


def play_last_trick(state):
    for seat in range(4):
        assert play_card(state, seat, state.players[seat].hand[0]).success
    return resolve_trick(state)


def test_create_game():
    """Test a new game waits in setup."""
    state = create_game()
    assert state.game_status == PHASE_SETUP
    assert state.players == []


def test_initialize_game():
    """Test seating the human and three named bots."""
    state = create_game(create_config(player_name="Ada"))
    result = initialize_game(state, rng=random.Random(1))

    assert result.success
    assert state.game_status == PHASE_DEALING
    assert state.round_number == 1
    assert state.players[0].name == "Ada"
    assert state.players[0].is_human
    bot_names = [p.name for p in state.players[1:]]
    assert len(set(bot_names)) == 3
    assert all(name in AI_NAMES for name in bot_names)
    assert 0 <= state.dealer_offset < 4


def test_initialize_twice_rejected():
    """Test initialization outside setup is rejected."""
    state, _ = dealt_game()
    version = state.version
    result = initialize_game(state)
    assert not result.success
    assert result.error_code == ERROR_WRONG_PHASE
    assert state.version == version


def test_mixed_ai_assignment_is_distinct():
    """Test MIXED gives each bot a different strategy."""
    assert sorted(assign_ai_types('MIXED', random.Random(9))) == sorted(AI_TYPES)
    assert assign_ai_types('GEM') == ['GEM', 'GEM', 'GEM']


def test_first_round_passes_right():
    """Test round 1 passes right whatever the cycle."""
    state, _ = dealt_game(pass_sequence_name='DS-C')
    assert state.game_status == PHASE_PASSING
    assert state.pass_direction == DIRECTION_RIGHT
    assert all(len(p.hand) == 13 for p in state.players)


def test_execute_pass_needs_all_selections():
    """Test the exchange waits for every seat."""
    state, _ = dealt_game()
    for player in state.players[:3]:
        set_pass_selection(state, player.id, [c.id for c in player.hand[:3]])

    result = execute_pass(state)
    assert not result.success
    assert result.error_code == ERROR_PASS_NOT_READY
    assert state.game_status == PHASE_PASSING


def test_repeated_selection_rejected():
    """Test a second selection from the same seat is discarded."""
    state, _ = dealt_game()
    bot = state.players[2]
    assert set_pass_selection(state, 2, [c.id for c in bot.hand[:3]]).success

    result = set_pass_selection(state, 2, [c.id for c in bot.hand[3:6]])
    assert not result.success
    assert result.error_code == ERROR_ALREADY_SELECTED
    assert bot.selected_to_pass == [c.id for c in bot.hand[:3]]


def test_pass_then_receive_then_play():
    """Test passing -> receiving -> playing with the computed leader."""
    state, _ = dealt_game()
    for player in state.players:
        set_pass_selection(state, player.id, [c.id for c in player.hand[:3]])

    assert execute_pass(state).success
    assert state.game_status == PHASE_RECEIVING
    assert len(state.received_cards) == 3
    assert state.turn_index == starting_player(state)
    assert state.turn_index == (state.round_number + state.dealer_offset) % 4

    assert acknowledge_received(state).success
    assert state.game_status == PHASE_PLAYING


def test_skip_pass_only_on_no_pass_round():
    """Test the exchange can only be skipped when the direction is none."""
    state, _ = dealt_game()
    result = skip_pass(state)
    assert not result.success
    assert result.error_code == ERROR_WRONG_PHASE

    state.pass_direction = DIRECTION_NONE
    assert advance_phase(state).success
    assert state.game_status == PHASE_PLAYING


def test_play_rejections():
    """Test wrong phase, wrong turn, missing card and revoke are rejected."""
    state, _ = dealt_game()
    leader = state.turn_index
    result = play_card(state, leader, state.players[leader].hand[0])
    assert result.error_code == ERROR_WRONG_PHASE

    state = passed_game()
    leader = state.turn_index
    other = (leader + 1) % 4
    version = state.version

    result = play_card(state, other, state.players[other].hand[0])
    assert not result.success
    assert result.error_code == ERROR_NOT_YOUR_TURN

    missing = next(cid for cid in DECK if not state.players[leader].has_card(cid))
    result = play_card(state, leader, missing)
    assert result.error_code == ERROR_CARD_NOT_IN_HAND
    assert state.version == version
    assert len(state.players[leader].hand) == 13

    lead = state.players[leader].hand[0]
    assert play_card(state, leader, lead).success
    assert state.lead_suit == lead.suit
    assert state.turn_index == other

    follower = state.players[other]
    if any(c.suit == lead.suit for c in follower.hand) and any(c.suit != lead.suit for c in follower.hand):
        revoke = next(c for c in follower.hand if c.suit != lead.suit)
        result = play_card(state, other, revoke)
        assert result.error_code == ERROR_ILLEGAL_MOVE
        assert state.players[other].has_card(revoke.id)


def test_resolution_is_explicit():
    """Test the fourth card waits for resolve_trick and the leader cannot play again."""
    state = last_trick_state(1, (0, 0, 0, 0))
    for seat in range(4):
        assert play_card(state, seat, state.players[seat].hand[0]).success

    assert len(state.current_trick) == 4
    assert state.turn_index == 0
    result = play_card(state, 0, '2C')
    assert result.error_code == ERROR_ALREADY_PLAYED


def test_resolve_incomplete_trick_rejected():
    """Test resolution needs four plays."""
    state = last_trick_state(1, (0, 0, 0, 0))
    play_card(state, 0, '2C')
    result = resolve_trick(state)
    assert result.error_code == ERROR_TRICK_INCOMPLETE


def test_trick_resolution_credits_winner():
    """Test the winner takes the trick value and the lead."""
    state = last_trick_state(1, (0, 0, 0, 0))
    assert play_last_trick(state).success

    winner = state.players[2]
    assert state.trick_history[-1].winner_id == 2
    assert state.trick_history[-1].value == -16
    assert winner.score == -16
    assert winner.score_history == [-16]
    assert state.turn_index == 2
    assert state.hearts_broken is False
    assert state.game_status == PHASE_SCORING


def test_game_over_after_last_round():
    """Test the last configured round ends the game."""
    state = last_trick_state(4, (0, 0, 0, 0), max_rounds=4)
    play_last_trick(state)
    assert state.game_status == PHASE_GAME_OVER


def test_game_over_by_score_ceiling():
    """Test crossing the score ceiling ends the game early."""
    state = last_trick_state(1, (0, 0, -80, 0))
    play_last_trick(state)
    assert state.game_status == PHASE_SCORING

    state = last_trick_state(1, (0, 0, -90, 0))
    play_last_trick(state)
    assert state.players[2].score == -106
    assert state.game_status == PHASE_GAME_OVER


def test_next_round_clears_round_fields():
    """Test scoring -> dealing advances the round and the direction."""
    state = last_trick_state(1, (0, 0, 0, 0))
    play_last_trick(state)

    assert next_round(state).success
    assert state.game_status == PHASE_DEALING
    assert state.round_number == 2
    assert state.pass_direction == 'left'
    assert all(p.points_this_round == 0 for p in state.players)
    assert state.winning_message is None


def test_advance_phase_rejected_while_playing():
    """Test there is nothing to acknowledge during play."""
    state = passed_game()
    result = advance_phase(state)
    assert result.error_code == ERROR_WRONG_PHASE


def test_reset_game():
    """Test reset returns to setup with the same configuration."""
    state = last_trick_state(4, (0, 0, 0, 0), max_rounds=4)
    play_last_trick(state)

    result = reset_game(state)
    assert result.success
    assert result.state.game_status == PHASE_SETUP
    assert result.state.config == state.config
    assert result.state.players == []


def test_full_game_with_bots():
    """Test a seeded game of mixed bots reaches game over through legal moves only."""
    rng = random.Random(2024)
    state = create_game(create_config(ai_type='MIXED', max_rounds=4, max_score=100))
    initialize_game(state, rng=rng)
    bots = {p.id: create_bot(p.ai_type) if p.ai_type else HalBot() for p in state.players}

    rounds = 0
    while state.game_status != PHASE_GAME_OVER:
        assert start_round(state, rng).success
        rounds += 1
        if state.pass_direction == DIRECTION_NONE:
            assert skip_pass(state).success
        else:
            for player in state.players:
                assert set_pass_selection(state, player.id, bots[player.id].compute_pass(player.hand)).success
            assert execute_pass(state).success
            assert acknowledge_received(state).success

        while state.game_status == PHASE_PLAYING:
            if len(state.current_trick) == 4:
                assert resolve_trick(state).success
                assert validate_deck_integrity(state)
                continue
            seat = state.turn_index
            card = bots[seat].compute_move(state, seat)
            assert play_card(state, seat, card).success

        assert len(state.trick_history) == 13
        if state.game_status == PHASE_SCORING:
            assert next_round(state).success

    assert rounds <= 4
    assert all(len(p.score_history) == rounds for p in state.players)
    assert all(p.score == sum(p.score_history) for p in state.players)

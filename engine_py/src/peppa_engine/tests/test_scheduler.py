"""
Tests for the asyncio game session: autopilot games, stale actions, timers and fallbacks.
"""

import asyncio

import pytest

from peppa_engine.bots.hal import HalBot
from peppa_engine.constants import (
    ERROR_WRONG_PHASE, PHASE_GAME_OVER, PHASE_PLAYING, PHASE_RECEIVING,
)
from peppa_engine.errors import BotError
from peppa_engine.rules import HEADLESS_TIMING, create_config
from peppa_engine.scheduler import GameSession


class BrokenBot(HalBot):
    def compute_move(self, state, player_id):
        raise BotError("lost track of the table")


class BrokenPassBot(HalBot):
    def compute_pass(self, hand):
        raise BotError("lost track of the hand")


class CrashingBot(HalBot):
    def select_move(self, state, player, legal):
        raise IndexError("no card left to choose")


async def wait_until(predicate, timeout=5.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.01)


@pytest.mark.asyncio
async def test_autopilot_game_runs_to_the_end():
    """Test a headless session plays every round and stops at game over."""
    session = GameSession(create_config(ai_type='MIXED', max_rounds=4), seed=21,
                          timing=HEADLESS_TIMING, autopilot=True)
    state = await asyncio.wait_for(session.play_until_game_over(), timeout=30)

    assert state.game_status == PHASE_GAME_OVER
    rounds = len(state.players[0].score_history)
    assert 1 <= rounds <= 4
    assert all(p.score == sum(p.score_history) for p in state.players)
    assert session._tasks == {}


@pytest.mark.asyncio
async def test_seed_reproduces_game():
    """Test two sessions with the same seed end with the same scores."""
    scores = []
    for _ in range(2):
        session = GameSession(create_config(ai_type='GPT52', max_rounds=4), seed=99,
                              timing=HEADLESS_TIMING, autopilot=True)
        state = await asyncio.wait_for(session.play_until_game_over(), timeout=30)
        scores.append([p.score_history for p in state.players])
    assert scores[0] == scores[1]


@pytest.mark.asyncio
async def test_bots_are_per_session():
    """Test strategy instances, and their memory, are never shared between sessions."""
    first = GameSession(create_config(ai_type='GPT52'), seed=1, timing=HEADLESS_TIMING)
    second = GameSession(create_config(ai_type='GPT52'), seed=1, timing=HEADLESS_TIMING)
    first.start()
    second.start()

    for seat in (1, 2, 3):
        assert first.bots[seat] is not second.bots[seat]
        assert first.bots[seat].memory is not second.bots[seat].memory
    assert 0 not in first.bots


@pytest.mark.asyncio
async def test_stale_action_is_discarded():
    """Test an action scheduled for an old turn does nothing."""
    session = GameSession(seed=4, timing=HEADLESS_TIMING)
    session.start()

    called = []
    stale_key = (PHASE_PLAYING, 1, 0, 0, 0)
    await session._delayed('move', stale_key, 0, lambda: called.append(True))
    assert called == []

    await session._delayed('move', session.turn_key(), 0, lambda: called.append(True))
    assert called == [True]


@pytest.mark.asyncio
async def test_wrong_phase_intent_rejected():
    """Test a human intent in the wrong phase leaves the session untouched."""
    session = GameSession(seed=4, timing=HEADLESS_TIMING)
    session.start()
    version = session.state.version

    result = session.play_card('2C')
    assert not result.success
    assert result.error_code == ERROR_WRONG_PHASE
    assert session.state.version == version


@pytest.mark.asyncio
async def test_turn_timer_forces_human_move():
    """Test an idle human gets a baseline move once the turn timer runs out."""
    timing = HEADLESS_TIMING.model_copy(update={'human_turn_time': 0.2})
    session = GameSession(create_config(), seed=6, timing=timing)
    session.start()
    session.acknowledge()

    human = session.state.players[0]
    for card in list(human.hand[:3]):
        assert session.toggle_select_to_pass(card.id).success

    await wait_until(lambda: session.state.game_status == PHASE_RECEIVING)
    assert len(session.state.received_cards) == 3
    assert session.acknowledge().success

    await wait_until(lambda: len(human.hand) == 12)
    assert any(t.player_id == 0 for t in session.state.current_trick) or session.state.trick_history
    session.cancel_all()


@pytest.mark.asyncio
async def test_bot_failure_falls_back_to_a_legal_card():
    """Test a strategy error never stalls the round."""
    session = GameSession(create_config(max_rounds=4), seed=8, timing=HEADLESS_TIMING, autopilot=True)
    session.start()
    session.bots[2] = BrokenBot()

    state = await asyncio.wait_for(session.play_until_game_over(), timeout=30)
    assert state.game_status == PHASE_GAME_OVER
    assert all(len(t.plays) == 4 for t in state.trick_history)


@pytest.mark.asyncio
async def test_pass_failure_selects_first_cards():
    """Test a pass strategy error still gives the seat a selection of its first three cards."""
    session = GameSession(create_config(), seed=8, timing=HEADLESS_TIMING)
    session.start()
    session.bots[2] = BrokenPassBot()
    session.acknowledge()

    bot = session.state.players[2]
    first_three = [c.id for c in bot.hand[:3]]
    await wait_until(lambda: all(len(p.selected_to_pass) == 3 for p in session.state.players[1:]))
    assert bot.selected_to_pass == first_three
    session.cancel_all()


@pytest.mark.asyncio
async def test_pass_failure_does_not_stall_the_game():
    """Test an autopilot game with a failing pass strategy still finishes."""
    session = GameSession(create_config(max_rounds=4), seed=8, timing=HEADLESS_TIMING, autopilot=True)
    session.start()
    session.bots[2] = BrokenPassBot()

    state = await asyncio.wait_for(session.play_until_game_over(), timeout=30)
    assert state.game_status == PHASE_GAME_OVER


@pytest.mark.asyncio
async def test_unexpected_strategy_exception_falls_back():
    """Test an error other than BotError inside a strategy never stalls play."""
    session = GameSession(create_config(max_rounds=4), seed=8, timing=HEADLESS_TIMING, autopilot=True)
    session.start()
    session.bots[2] = CrashingBot()

    state = await asyncio.wait_for(session.play_until_game_over(), timeout=30)
    assert state.game_status == PHASE_GAME_OVER
    assert all(len(t.plays) == 4 for t in state.trick_history)


@pytest.mark.asyncio
async def test_human_plays_through_session():
    """Test a human move is accepted on the human's turn and bots carry on."""
    session = GameSession(create_config(), seed=12, timing=HEADLESS_TIMING)
    session.start()
    session.acknowledge()

    human = session.state.players[0]
    for card in list(human.hand[-3:]):
        session.toggle_select_to_pass(card.id)
    await wait_until(lambda: session.state.game_status == PHASE_RECEIVING)
    session.acknowledge()

    await wait_until(lambda: session.state.turn_index == 0 and len(session.state.current_trick) < 4)
    state = session.state
    legal = [c for c in human.hand if not state.current_trick or c.suit == state.lead_suit] or human.hand
    assert session.play_card(legal[0].id).success

    await wait_until(lambda: session.state.turn_index == 0 and len(human.hand) == 12
                     and len(session.state.current_trick) < 4)
    session.cancel_all()

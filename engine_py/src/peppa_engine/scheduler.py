"""
Cooperative scheduling of bot passes, bot moves, turn timers and trick resolution.

Every mutation still goes through the engine functions, one at a time, on the
event loop thread. A scheduled action remembers the turn key it was created
for; if the game has moved on by the time it wakes up, the action is dropped.
"""

import asyncio
import logging
import random
from typing import Callable, Dict, List, Optional, Tuple

from .bots import BaseBot, HalBot, create_bot
from .constants import (
    DIRECTION_NONE, HUMAN_PLAYER_ID, NUM_PLAYERS, PASS_COUNT, PHASE_DEALING, PHASE_GAME_OVER,
    PHASE_PASSING, PHASE_PLAYING, PHASE_RECEIVING, PHASE_SCORING,
)
from .engine import (
    ActionResult, advance_phase, create_game, execute_pass, initialize_game, play_card,
    reset_game, resolve_trick, set_pass_selection, toggle_select_to_pass,
)
from .models import Card, GameState, Player
from .rules import GameConfig, TimingConfig, default_timing
from .serialization import sanitize_state
from .validate import legal_moves

logger = logging.getLogger(__name__)

TurnKey = Tuple[str, int, int, int, int]


class GameSession:
    """
    One game with its bots and pending timers.

    Args:
        config: Confirmed game configuration
        seed: Seed for the session RNG (shuffles, names, dealer, bot delays)
        timing: Presentation delays; use ``HEADLESS_TIMING`` for tests
        autopilot: Let the baseline strategy play the human seat and
            acknowledge every phase automatically
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        timing: Optional[TimingConfig] = None,
        autopilot: bool = False
    ):
        self.rng = random.Random(seed)
        self.timing = timing or default_timing
        self.autopilot = autopilot
        self.state: GameState = create_game(config)
        self.bots: Dict[int, BaseBot] = {}
        self.fallback_bot = HalBot()
        self._tasks: Dict[str, Tuple[TurnKey, asyncio.Task]] = {}
        self._dealt_round: Optional[int] = None
        self._finished: Optional[asyncio.Event] = None

    # ---- read surface -------------------------------------------------

    def turn_key(self) -> TurnKey:
        s = self.state
        return (s.game_status, s.round_number, len(s.current_trick), s.turn_index, len(s.trick_history))

    def snapshot(self, viewer_id: int = HUMAN_PLAYER_ID) -> dict:
        return sanitize_state(self.state, viewer_id)

    def is_automated(self, player: Player) -> bool:
        return not player.is_human or self.autopilot

    # ---- write surface (human intents) --------------------------------

    def start(self) -> ActionResult:
        """Seat the players and create one strategy instance per bot seat."""
        result = initialize_game(self.state, rng=self.rng)
        if not result.success:
            return result

        self.bots = {p.id: create_bot(p.ai_type) for p in self.state.players if not p.is_human}
        if self.autopilot:
            self.bots[HUMAN_PLAYER_ID] = HalBot()
        return self._apply(result)

    def toggle_select_to_pass(self, card_id: str) -> ActionResult:
        return self._apply(toggle_select_to_pass(self.state, card_id, HUMAN_PLAYER_ID))

    def execute_pass(self) -> ActionResult:
        return self._apply(execute_pass(self.state))

    def play_card(self, card_id: str) -> ActionResult:
        return self._apply(play_card(self.state, HUMAN_PLAYER_ID, card_id))

    def acknowledge(self) -> ActionResult:
        """Deal, skip a no-pass exchange, start play after receiving, or go to the next round."""
        return self._apply(advance_phase(self.state, self.rng))

    def reset(self) -> ActionResult:
        self.cancel_all()
        result = reset_game(self.state)
        self.state = result.state
        self.bots = {}
        self._dealt_round = None
        return result

    async def play_until_game_over(self) -> GameState:
        """Run the session until the game is over. Needs autopilot to finish on its own."""
        self._finished = asyncio.Event()
        if self.state.game_status == PHASE_GAME_OVER:
            return self.state
        if not self.state.players:
            self.start()
        else:
            self._on_state_change()
        await self._finished.wait()
        return self.state

    def cancel_all(self):
        for _, task in self._tasks.values():
            task.cancel()
        self._tasks.clear()

    # ---- scheduling ---------------------------------------------------

    def _apply(self, result: ActionResult) -> ActionResult:
        if result.success:
            self.state = result.state
            self._on_state_change()
        return result

    def _on_state_change(self):
        state = self.state
        key = self.turn_key()
        self._drop_stale(key)

        if state.game_status == PHASE_GAME_OVER:
            self.cancel_all()
            if self._finished is not None:
                self._finished.set()
            return

        if state.game_status == PHASE_PASSING and self._dealt_round != state.round_number:
            self._dealt_round = state.round_number
            for bot in self.bots.values():
                bot.new_round(state.round_number)

        if state.game_status in (PHASE_DEALING, PHASE_RECEIVING, PHASE_SCORING):
            if self.autopilot:
                self._schedule('ack', key, 0, self._run_acknowledge)
        elif state.game_status == PHASE_PASSING:
            self._schedule_passing(key)
        elif state.game_status == PHASE_PLAYING:
            self._schedule_playing(key)

    def _schedule_passing(self, key: TurnKey):
        state = self.state
        if state.pass_direction == DIRECTION_NONE:
            if self.autopilot:
                self._schedule('ack', key, 0, self._run_acknowledge)
            return

        if all(len(p.selected_to_pass) == PASS_COUNT for p in state.players):
            self._schedule('exchange', key, self.timing.pass_pause, self._run_exchange)
            return

        for player in state.players:
            if self.is_automated(player) and not player.selected_to_pass:
                delay = self.rng.uniform(self.timing.bot_pass_min, self.timing.bot_pass_max)
                self._schedule(
                    f'pass:{player.id}', key, delay,
                    lambda seat=player.id: self._run_bot_pass(seat)
                )

    def _schedule_playing(self, key: TurnKey):
        state = self.state
        if len(state.current_trick) == NUM_PLAYERS:
            self._schedule('resolve', key, self.timing.trick_pause, self._run_resolve)
            return

        player = state.players[state.turn_index]
        if self.is_automated(player):
            delay = self.rng.uniform(self.timing.bot_think_min, self.timing.bot_think_max)
            self._schedule('move', key, delay, lambda: self._run_bot_move(player.id))

        limit = self.timing.human_turn_time if player.is_human else self.timing.bot_turn_time
        if limit > 0:
            self._schedule('timer', key, limit, lambda: self._run_timeout(player.id))

    def _schedule(self, name: str, key: TurnKey, delay: float, action: Callable[[], None]):
        pending = self._tasks.get(name)
        if pending is not None and pending[0] == key and not pending[1].done():
            return
        task = asyncio.get_running_loop().create_task(self._delayed(name, key, delay, action))
        self._tasks[name] = (key, task)

    async def _delayed(self, name: str, key: TurnKey, delay: float, action: Callable[[], None]):
        await asyncio.sleep(delay)
        if self.turn_key() != key:
            logger.debug(f"Discarding stale {name} scheduled for {key}")
            return
        self._tasks.pop(name, None)
        action()

    def _drop_stale(self, key: TurnKey):
        current = asyncio.current_task() if self._has_loop() else None
        for name, (task_key, task) in list(self._tasks.items()):
            if task_key != key or task.done():
                if task is not current:
                    task.cancel()
                del self._tasks[name]

    @staticmethod
    def _has_loop() -> bool:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return False
        return True

    # ---- actions ------------------------------------------------------

    def _run_acknowledge(self):
        self._report(self.acknowledge(), 'acknowledge')

    def _run_exchange(self):
        self._report(self.execute_pass(), 'exchange')

    def _run_resolve(self):
        self._report(self._apply(resolve_trick(self.state)), 'resolve')

    def _run_bot_pass(self, seat: int):
        player = self.state.get_player(seat)
        fallback = [c.id for c in player.hand[:PASS_COUNT]]
        try:
            ids = self.bots[seat].compute_pass(player.hand)
        except Exception:
            logger.exception(f"Pass strategy failed for {player.name}; passing first cards")
            ids = fallback
        result = set_pass_selection(self.state, seat, ids)
        if not result.success:
            logger.error(f"{player.name} chose an invalid pass {ids}: {result.error_message}")
            result = set_pass_selection(self.state, seat, fallback)
        self._report(self._apply(result), f'pass for seat {seat}')

    def _run_bot_move(self, seat: int):
        player = self.state.get_player(seat)
        bot = self.bots.get(seat, self.fallback_bot)
        try:
            card = bot.compute_move(self.state, seat)
        except Exception:
            logger.exception(f"{bot.ai_type} failed for {player.name}; playing first card")
            card = player.hand[0]
        self._play_with_fallback(seat, card)

    def _run_timeout(self, seat: int):
        player = self.state.get_player(seat)
        logger.warning(f"Turn timer expired for {player.name}; forcing a {self.fallback_bot.ai_type} move")
        try:
            card = self.fallback_bot.compute_move(self.state, seat)
        except Exception:
            logger.exception(f"Fallback move failed for {player.name}; playing first card")
            card = player.hand[0]
        self._play_with_fallback(seat, card)

    def _play_with_fallback(self, seat: int, card: Card):
        result = play_card(self.state, seat, card)
        if not result.success:
            logger.error(f"Seat {seat} move {card} rejected: {result.error_message}")
            player = self.state.get_player(seat)
            legal: List[Card] = legal_moves(player.hand, self.state.current_trick, self.state.lead_suit)
            result = play_card(self.state, seat, legal[0])
        self._report(self._apply(result), f'move for seat {seat}')

    def _report(self, result: ActionResult, what: str):
        if not result.success:
            logger.error(f"Scheduled {what} rejected [{result.error_code}] {result.error_message}")

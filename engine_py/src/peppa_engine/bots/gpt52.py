"""
GPT52: plans over the whole 13-trick hand.

Every trick is worth +10, so clean tricks are pure profit; the danger is
being left late in the hand with cards that win tricks other players have
poisoned. The bot therefore:

- takes clean tricks early and ducks with 2-3-4 later (``poison_risk``)
- keeps clubs/diamonds aces and kings to regain the lead
- sheds high hearts before low ones, keeping a low heart to duck with
- goes for the slam ("cappotto") only with real control: a long suit,
  honours and outside entries
- switches to sabotage ("antiCappotto") when an opponent dominates

Its memory of seen cards and trick winners belongs to the bot instance, so
two sessions never share it, and it is rebuilt for every new hand.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from ..comparator import cards_of_suit, count_suits, current_winning_value, sort_by_value
from ..constants import (
    AI_GPT52, CLUBS, DIAMONDS, HAND_SIZE, HEARTS, PASS_COUNT, SPADES, SUITS, VALUE_QUEEN,
)
from ..models import Card, GameState, Player
from ..scoring import trick_value
from .base import BaseBot, top_scored

logger = logging.getLogger(__name__)

PLAN_NORMAL = 'normal'
PLAN_CAPPOTTO = 'cappotto'
PLAN_ANTI_CAPPOTTO = 'antiCappotto'

DOMINANT_STREAK = 3
DOMINANT_TRICKS = 6

# Suit preference when lengths tie
LEAD_SUIT_ORDER = [CLUBS, DIAMONDS, SPADES, HEARTS]
VOID_CANDIDATES = [CLUBS, DIAMONDS, SPADES]


def poison_risk(hand_size: int) -> float:
    """Chance that a won trick gets poisoned, rising as the hand empties."""
    if hand_size >= 11:
        return 0.15
    if hand_size >= 8:
        return 0.35
    if hand_size >= 5:
        return 0.60
    return 0.85


def is_low_ducker(card: Card) -> bool:
    return card.value <= 4


def is_trap(card: Card) -> bool:
    """7 to J: mid cards that tend to win tricks nobody wants."""
    return 7 <= card.value <= 11


def is_high_control(card: Card) -> bool:
    return card.rank in ('A', 'K')


def is_entry(card: Card) -> bool:
    return card.suit in (CLUBS, DIAMONDS) and is_high_control(card)


def longest_suit(hand: List[Card], order: List[str]) -> str:
    counts = count_suits(hand)
    return max(order, key=lambda s: counts[s])


@dataclass
class PlayMemory:
    round_number: Optional[int] = None
    seen_ids: Set[str] = field(default_factory=set)
    seen_by_suit: Dict[str, Set[str]] = field(default_factory=lambda: {s: set() for s in SUITS})
    seen_peppa: bool = False
    seen_hearts_count: int = 0
    seen_aces: Set[str] = field(default_factory=set)
    seen_kings: Set[str] = field(default_factory=set)
    last_winner_id: Optional[int] = None
    streak_winner_id: Optional[int] = None
    streak_count: int = 0
    tricks_seen: int = 0

    def note_seen(self, card: Card):
        if card.id in self.seen_ids:
            return
        self.seen_ids.add(card.id)
        self.seen_by_suit[card.suit].add(card.rank)
        if card.suit == HEARTS:
            self.seen_hearts_count += 1
        if card.is_penalty_queen:
            self.seen_peppa = True
        if card.rank == 'A':
            self.seen_aces.add(card.suit)
        if card.rank == 'K':
            self.seen_kings.add(card.suit)

    def note_winner(self, winner_id: int):
        self.last_winner_id = winner_id
        if self.streak_winner_id == winner_id:
            self.streak_count += 1
        else:
            self.streak_winner_id = winner_id
            self.streak_count = 1

    def update(self, state: GameState):
        """Fold in the tricks resolved since the last call and the trick on the table."""
        for trick in state.trick_history[self.tricks_seen:]:
            for play in trick.plays:
                self.note_seen(play.card)
            self.note_winner(trick.winner_id)
        self.tricks_seen = len(state.trick_history)

        for play in state.current_trick:
            self.note_seen(play.card)


class Gpt52Bot(BaseBot):
    ai_type = AI_GPT52

    def __init__(self):
        self.memory = PlayMemory()

    def new_round(self, round_number: int) -> None:
        self.memory = PlayMemory(round_number=round_number)

    def evaluate_plan(
        self,
        hand: List[Card],
        state: Optional[GameState] = None,
        player_id: Optional[int] = None
    ) -> str:
        """
        Choose between playing normally, going for the slam and sabotaging one.

        The slam needs control, not hearts: a suit of 7+, at least three
        aces/kings among four or more Q-K-A, and an ace or king outside the
        long suit to get back in.
        """
        counts = count_suits(hand)
        long_suit = longest_suit(hand, [HEARTS, SPADES, DIAMONDS, CLUBS])

        honors = sum(1 for c in hand if c.value >= VALUE_QUEEN)
        top_controls = sum(1 for c in hand if is_high_control(c))
        entries_outside = sum(1 for c in hand if is_high_control(c) and c.suit != long_suit)

        if counts[long_suit] >= 7 and top_controls >= 3 and honors >= 4 and entries_outside >= 1:
            return PLAN_CAPPOTTO

        if state is not None:
            mem = self.memory
            if mem.streak_count >= DOMINANT_STREAK and mem.streak_winner_id != player_id:
                return PLAN_ANTI_CAPPOTTO
            opponents = [p for p in state.players if p.id != player_id]
            if opponents and max(p.tricks_won for p in opponents) >= DOMINANT_TRICKS:
                return PLAN_ANTI_CAPPOTTO

        return PLAN_NORMAL

    def pass_score(self, card: Card, hand: List[Card], plan: str) -> int:
        counts = count_suits(hand)
        score = 0

        if is_low_ducker(card):
            score -= 300

        if is_entry(card):
            score -= 260

        if card.is_penalty_queen:
            score += -120 if plan == PLAN_CAPPOTTO else 900

        if card.suit == HEARTS:
            if plan == PLAN_CAPPOTTO:
                score -= 80
            else:
                score += 120 + card.value * 18

        if is_trap(card):
            score += 120

        # Emptying a short suit lets us sluff penalties later
        if counts[card.suit] <= 2 and not is_entry(card) and card.suit != HEARTS:
            score += 90
            if card.value >= VALUE_QUEEN:
                score += 60

        if card.is_spade_honor():
            if counts[SPADES] <= 2 and plan != PLAN_CAPPOTTO:
                score += 80
            else:
                score -= 40

        if plan == PLAN_CAPPOTTO:
            if is_trap(card):
                score += 40
            if counts[card.suit] >= 7:
                score -= 40

        return score

    def compute_pass(self, hand: List[Card]) -> List[str]:
        if len(hand) == HAND_SIZE:
            self.memory = PlayMemory()

        plan = self.evaluate_plan(hand)
        ids = top_scored(hand, lambda c: self.pass_score(c, hand, plan), PASS_COUNT)
        logger.debug(f"[GPT52] pass with plan {plan}: {ids}")
        return ids

    def compute_move(self, state: GameState, player_id: int) -> Card:
        if self.memory.round_number != state.round_number:
            self.memory = PlayMemory(round_number=state.round_number)
        self.memory.update(state)
        return super().compute_move(state, player_id)

    def select_move(self, state: GameState, player: Player, legal: List[Card]) -> Card:
        hand = player.hand
        plan = self.evaluate_plan(hand, state, player.id)
        risk = poison_risk(len(hand))
        logger.debug(f"[GPT52] {player.name}: plan {plan}, risk {risk}")

        if self.is_lead(state):
            if plan == PLAN_CAPPOTTO:
                return self._lead_cappotto(hand, legal)
            return self._lead_normal(hand, legal, risk)
        if self.can_follow(state, legal):
            return self._follow(state, legal, plan, risk)
        if plan == PLAN_CAPPOTTO:
            return self._discard_cappotto(legal)
        return self._discard_normal(legal, risk)

    def _lead_cappotto(self, hand: List[Card], legal: List[Card]) -> Card:
        # Establish the long suit from the top to pull out missing honours
        long_suit = longest_suit(hand, LEAD_SUIT_ORDER)
        for card in sort_by_value(cards_of_suit(hand, long_suit), reverse=True):
            if card.value >= VALUE_QUEEN:
                return card

        entries = sort_by_value([c for c in hand if is_entry(c)], reverse=True)
        if entries:
            return entries[0]

        # In control: lead hearts to collect them
        hearts = sort_by_value(cards_of_suit(hand, HEARTS), reverse=True)
        if hearts:
            return hearts[0]

        return sort_by_value(legal, reverse=True)[0]

    def _lead_normal(self, hand: List[Card], legal: List[Card], risk: float) -> Card:
        if risk <= 0.35:
            cash = sort_by_value([c for c in hand if is_entry(c)], reverse=True)
            if cash:
                return cash[0]

        counts = count_suits(hand)
        short_suits = [s for s in VOID_CANDIDATES if 1 <= counts[s] <= 2]
        if short_suits:
            suit = min(short_suits, key=lambda s: counts[s])
            return sort_by_value(cards_of_suit(hand, suit))[0]

        non_hearts = [c for c in legal if c.suit != HEARTS]
        non_trap = [c for c in non_hearts if not is_trap(c)]
        if non_trap:
            return sort_by_value(non_trap)[0]

        return sort_by_value(legal)[0]

    def _follow(self, state: GameState, legal: List[Card], plan: str, risk: float) -> Card:
        winning_value = current_winning_value(state.current_trick, state.lead_suit)
        ascending = sort_by_value(legal)
        descending = sort_by_value(legal, reverse=True)

        winning = next((c for c in ascending if c.value > winning_value), None)
        duck = next((c for c in descending if c.value < winning_value), None)

        # The trick on the table can only get worse after us, not better
        net = trick_value(t.card for t in state.current_trick)
        take_if_net_at_least = 6 if risk >= 0.6 else 8
        should_take = plan == PLAN_CAPPOTTO or net >= take_if_net_at_least

        if should_take:
            return winning or ascending[0]
        if duck:
            return duck
        return winning or ascending[0]

    def _discard_cappotto(self, legal: List[Card]) -> Card:
        # Keep hearts and the queen: we want to capture them ourselves
        keepers_out = [c for c in legal if c.suit != HEARTS and not c.is_penalty_queen]

        mid = sort_by_value([c for c in keepers_out if is_trap(c)], reverse=True)
        if mid:
            return mid[0]

        high = sort_by_value(
            [c for c in keepers_out if c.value >= VALUE_QUEEN and not is_high_control(c)],
            reverse=True,
        )
        if high:
            return high[0]

        return sort_by_value(keepers_out or legal, reverse=True)[0]

    def _discard_normal(self, legal: List[Card], risk: float) -> Card:
        for card in legal:
            if card.is_penalty_queen:
                return card

        # Highest heart first, keeping the low one to duck with later
        hearts = sort_by_value(cards_of_suit(legal, HEARTS), reverse=True)
        if hearts:
            return hearts[0]

        mid = sort_by_value([c for c in legal if is_trap(c)], reverse=True)
        if mid:
            return mid[0]

        # King of spades goes before the ace
        high_spades = sort_by_value([c for c in legal if c.is_spade_honor()])
        if risk >= 0.6 and high_spades:
            return high_spades[0]

        return sort_by_value(legal, reverse=True)[0]

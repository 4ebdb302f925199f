"""
GEM: weighs the clean value of the trick before contesting it.

Keeps the clubs/diamonds aces and kings as easy +10 tricks, keeps 2s and 3s
as parachutes for ducking, and drops the penalty queen the moment a spade
ace or king is winning the trick.
"""

import logging
from typing import List

from ..comparator import cards_of_suit, count_suits, current_winning_value, highest_card, lowest_card, sort_by_value
from ..constants import (
    AI_GEM, CLUBS, DIAMONDS, HEARTS, PASS_COUNT, SPADES, VALUE_JACK, VALUE_KING,
)
from ..models import Card, GameState, Player
from ..scoring import trick_value
from .base import BaseBot, top_scored

logger = logging.getLogger(__name__)

CLEAN_TRICK_THRESHOLD = 8
CASH_MIN_HAND = 8


def is_money_card(card: Card) -> bool:
    """Ace or King of clubs or diamonds: wins a clean trick."""
    return card.suit in (CLUBS, DIAMONDS) and card.value >= VALUE_KING


class GemBot(BaseBot):
    ai_type = AI_GEM

    def compute_pass(self, hand: List[Card]) -> List[str]:
        spades_count = count_suits(hand)[SPADES]
        has_protection = any(c.is_spade_honor() for c in hand)
        has_queen = any(c.is_penalty_queen for c in hand)

        def score(card: Card) -> int:
            if card.is_penalty_queen:
                # Unguarded queen is a hand grenade
                if spades_count < 4 and not has_protection:
                    return 10000
                return 500
            if card.is_spade_honor():
                return -1000 if has_queen else 200
            if card.suit == HEARTS and card.value >= VALUE_JACK:
                return card.value * 20
            if is_money_card(card):
                return -2000
            if 7 <= card.value <= 10:
                return 100
            if card.value <= 3:
                return -500
            return 0

        ids = top_scored(hand, score, PASS_COUNT)
        logger.debug(f"[GEM] pass candidates {[f'{c}({score(c)})' for c in hand]} -> {ids}")
        return ids

    def select_move(self, state: GameState, player: Player, legal: List[Card]) -> Card:
        if self.is_lead(state):
            return self._lead(state, player.hand, legal)
        if self.can_follow(state, legal):
            return self._follow(state, legal)
        return self._discard(legal)

    def _lead(self, state: GameState, hand: List[Card], legal: List[Card]) -> Card:
        safe_leads = [c for c in legal if not c.is_penalty_queen] or legal

        # Hearts still unbroken: the queen is probably out there
        if not state.hearts_broken:
            safer = [c for c in safe_leads if not (c.suit == SPADES and c.value >= VALUE_KING)]
            if safer:
                safe_leads = safer

        money = [c for c in safe_leads if is_money_card(c)]
        if money and len(hand) > CASH_MIN_HAND:
            logger.debug("[GEM] lead: cashing a clean +10")
            return highest_card(money)

        return lowest_card(safe_leads)

    def _follow(self, state: GameState, legal: List[Card]) -> Card:
        winning_value = current_winning_value(state.current_trick, state.lead_suit)

        queen = next((c for c in legal if c.is_penalty_queen), None)
        if queen and state.lead_suit == SPADES and winning_value >= VALUE_KING:
            logger.debug("[GEM] follow: queen onto the spade ace/king")
            return queen

        net = trick_value(t.card for t in state.current_trick)
        winning = sort_by_value([c for c in legal if c.value > winning_value])
        losing = sort_by_value([c for c in legal if c.value < winning_value], reverse=True)

        if net >= CLEAN_TRICK_THRESHOLD and state.lead_suit != SPADES:
            if winning:
                logger.debug(f"[GEM] follow: contesting a clean trick ({net:+d})")
                return winning[0]
            return lowest_card(legal)

        if losing:
            logger.debug("[GEM] follow: ducking")
            return losing[0]
        logger.debug(f"[GEM] follow: forced to win a {net:+d} trick")
        return winning[0] if winning else lowest_card(legal)

    def _discard(self, legal: List[Card]) -> Card:
        for card in legal:
            if card.is_penalty_queen:
                return card
        dangerous_hearts = [c for c in cards_of_suit(legal, HEARTS) if c.value >= VALUE_JACK]
        if dangerous_hearts:
            return highest_card(dangerous_hearts)
        return highest_card(legal)

"""
HAL: the baseline strategy, also used as the timeout fallback.

Strategy:
- Pass the penalty queen, high hearts and spade A/K; never pass hearts 2-5
- Never lead hearts before they are broken unless nothing else is held
- Discard the queen, then the highest heart, then the highest card
- Follow with the highest card that stays under the winner, else the lowest
- Lead the lowest card that is not a spade Q/K/A
"""

from typing import List

from ..comparator import cards_of_suit, count_suits, current_winning_value, highest_card, lowest_card, sort_by_value
from ..constants import AI_HAL, HEARTS, PASS_COUNT, SPADES
from ..models import Card, GameState, Player
from .base import BaseBot, top_scored

LOW_HEARTS = ('2', '3', '4', '5')


class HalBot(BaseBot):
    ai_type = AI_HAL

    def compute_pass(self, hand: List[Card]) -> List[str]:
        if len(hand) <= PASS_COUNT:
            return [c.id for c in hand]

        counts = count_suits(hand)

        def score(card: Card) -> int:
            if card.suit == HEARTS and card.rank in LOW_HEARTS:
                return -500
            if card.is_penalty_queen:
                return 1000
            if card.suit == HEARTS:
                return 500 + card.value
            if card.is_spade_honor():
                return 400
            points = card.value * 10
            if counts[card.suit] <= 2:
                points += 50  # towards a void
            return points

        return top_scored(hand, score, PASS_COUNT)

    def legal_moves(self, hand: List[Card], state: GameState) -> List[Card]:
        if not state.current_trick and not state.hearts_broken:
            non_hearts = [c for c in hand if c.suit != HEARTS]
            return non_hearts or list(hand)
        return super().legal_moves(hand, state)

    def select_move(self, state: GameState, player: Player, legal: List[Card]) -> Card:
        hand = player.hand

        if state.current_trick and not cards_of_suit(hand, state.lead_suit):
            return self._discard(legal)

        if state.current_trick:
            winning_value = current_winning_value(state.current_trick, state.lead_suit)
            for card in sort_by_value(legal, reverse=True):
                if card.value < winning_value:
                    return card
            return lowest_card(legal)

        safe_leads = [
            c for c in legal
            if not (c.suit == SPADES and c.rank in ('Q', 'K', 'A'))
        ]
        return lowest_card(safe_leads or legal)

    def _discard(self, legal: List[Card]) -> Card:
        for card in legal:
            if card.is_penalty_queen:
                return card
        hearts = cards_of_suit(legal, HEARTS)
        if hearts:
            return highest_card(hearts)
        return highest_card(legal)

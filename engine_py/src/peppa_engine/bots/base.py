"""
Base bot interface and utilities.
"""

import logging
from abc import ABC, abstractmethod
from typing import List

from ..comparator import cards_of_suit
from ..errors import BotError
from ..models import Card, GameState, Player
from ..validate import legal_moves

logger = logging.getLogger(__name__)


class BaseBot(ABC):
    """
    Abstract base class for bot strategies.

    A strategy chooses the three cards to pass from a fresh hand and one
    legal card to play from the shared GameState. It sees only what any
    player at the table sees: its own hand, the trick on the table and the
    resolved tricks of the round.
    """

    ai_type: str = ''

    @abstractmethod
    def compute_pass(self, hand: List[Card]) -> List[str]:
        """
        Choose the cards to pass.

        Args:
            hand: The 13 cards just dealt

        Returns:
            Exactly three card ids from the hand
        """

    @abstractmethod
    def select_move(self, state: GameState, player: Player, legal: List[Card]) -> Card:
        """Pick one card among ``legal`` (called only when there is a real choice)."""

    def new_round(self, round_number: int) -> None:
        """Hook called when a new hand is dealt."""

    def compute_move(self, state: GameState, player_id: int) -> Card:
        """
        Choose a legal card for ``player_id``.

        Raises:
            BotError: the player is missing from the state or has no cards
        """
        player = self.get_player(state, player_id)
        legal = self.legal_moves(player.hand, state)
        if len(legal) == 1:
            return legal[0]

        card = self.select_move(state, player, legal)
        logger.debug(f"[{self.ai_type}] {player.name} chooses {card}")
        return card

    def get_player(self, state: GameState, player_id: int) -> Player:
        player = state.get_player(player_id)
        if player is None:
            raise BotError(f"Player {player_id} not found")
        if not player.hand:
            raise BotError(f"Player {player_id} has no cards")
        return player

    def legal_moves(self, hand: List[Card], state: GameState) -> List[Card]:
        """Same follow-suit rule the engine enforces, derived from the hand."""
        return legal_moves(hand, state.current_trick, state.lead_suit)

    def is_lead(self, state: GameState) -> bool:
        return not state.current_trick

    def can_follow(self, state: GameState, hand: List[Card]) -> bool:
        return bool(state.current_trick) and bool(cards_of_suit(hand, state.lead_suit))


def top_scored(hand: List[Card], score, count: int) -> List[str]:
    """Ids of the ``count`` highest-scored cards; ties keep hand order."""
    ranked = sorted(hand, key=score, reverse=True)
    return [c.id for c in ranked[:count]]

"""
Trick values, slam ("cappotto") detection and round settlement.

Every trick is worth +10 to its winner, minus the face value of each heart
in it, minus 26 for the Queen of Spades. A round total therefore ranges from
+130 (thirteen clean tricks) down to heavily negative.
"""

import logging
from typing import Iterable, Optional

from .constants import (
    PENALTY_QUEEN_POINTS, SLAM_CHECK_TOTAL, SLAM_LOSER_POINTS,
    SLAM_WINNER_POINTS, TRICK_BASE_POINTS,
)
from .models import Card, GameState, Player

logger = logging.getLogger(__name__)


def card_penalty(card: Card) -> int:
    """Points a card costs whoever captures it."""
    if card.is_penalty_queen:
        return PENALTY_QUEEN_POINTS
    if card.is_heart:
        return card.value
    return 0


def trick_value(cards: Iterable[Card]) -> int:
    """Net value of a (possibly incomplete) trick: 10 - hearts - 26 if the queen is in it."""
    return TRICK_BASE_POINTS - sum(card_penalty(c) for c in cards)


def is_slam(player: Player) -> bool:
    """
    A slam means every trick was taken and all penalty cards were absorbed.

    Capturing all 13 tricks scores 130 minus 130 of penalties, so the round
    total is 0 and ``tricks_won * 10 - points_this_round`` equals 130.
    """
    return player.tricks_won * TRICK_BASE_POINTS - player.points_this_round == SLAM_CHECK_TOTAL


def find_slam_player(state: GameState) -> Optional[Player]:
    for player in state.players:
        if is_slam(player):
            return player
    return None


def settle_round(state: GameState) -> Optional[Player]:
    """
    Apply end-of-round settlement. Mutates the players in place.

    If a player made a slam, their round points become +45 and every other
    player's become -15, whatever they tallied trick by trick. Then each
    player's round points are added to the cumulative score and recorded in
    the score history, and trick counts are reset.

    Returns:
        The slam player, if any
    """
    slam_player = find_slam_player(state)
    if slam_player:
        state.winning_message = f"CAPPOTTO DI {slam_player.name.upper()}!"
        for player in state.players:
            player.points_this_round = (
                SLAM_WINNER_POINTS if player.id == slam_player.id else SLAM_LOSER_POINTS
            )
        logger.info(f"Slam by {slam_player.name} in round {state.round_number}")
        state.log(state.winning_message)

    for player in state.players:
        player.score += player.points_this_round
        player.score_history.append(player.points_this_round)
        player.tricks_won = 0

    return slam_player


def is_game_over(state: GameState) -> bool:
    """Game ends after the last configured round or once any |score| reaches the ceiling."""
    if state.round_number >= state.config.max_rounds:
        return True
    return any(abs(p.score) >= state.config.max_score for p in state.players)

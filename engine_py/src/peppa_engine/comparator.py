"""
Card comparison and trick resolution utilities.
"""

from typing import Dict, List, Optional

from .constants import CLUBS, DIAMONDS, HEARTS, SPADES
from .models import Card, TrickPlay


def sort_by_value(cards: List[Card], reverse: bool = False) -> List[Card]:
    """Sort cards by value; ties keep their hand order."""
    return sorted(cards, key=lambda c: c.value, reverse=reverse)


def lowest_card(cards: List[Card]) -> Card:
    return sort_by_value(cards)[0]


def highest_card(cards: List[Card]) -> Card:
    return sort_by_value(cards, reverse=True)[0]


def cards_of_suit(hand: List[Card], suit: Optional[str]) -> List[Card]:
    return [c for c in hand if c.suit == suit]


def count_suits(hand: List[Card]) -> Dict[str, int]:
    """Number of cards held per suit, including empty suits."""
    counts = {HEARTS: 0, SPADES: 0, DIAMONDS: 0, CLUBS: 0}
    for card in hand:
        counts[card.suit] += 1
    return counts


def current_winning_value(trick: List[TrickPlay], lead_suit: Optional[str]) -> int:
    """
    Value of the card currently winning the trick.

    Args:
        trick: Plays so far
        lead_suit: Suit of the first card

    Returns:
        Highest value played in the lead suit, or -1 on an empty trick
    """
    best = -1
    for play in trick:
        if play.card.suit == lead_suit and play.card.value > best:
            best = play.card.value
    return best


def trick_winner(trick: List[TrickPlay], lead_suit: Optional[str] = None) -> int:
    """Player who played the highest card of the lead suit."""
    if not trick:
        raise ValueError("Cannot resolve an empty trick")
    lead = lead_suit or trick[0].card.suit
    winner = trick[0].player_id
    best = -1
    for play in trick:
        if play.card.suit == lead and play.card.value > best:
            best = play.card.value
            winner = play.player_id
    return winner

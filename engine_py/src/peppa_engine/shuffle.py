"""
Card shuffling and dealing utilities.
"""

import random
from typing import List, Optional

from .constants import HAND_SIZE, NUM_PLAYERS, RANK_VALUES, RANKS, SUITS, card_id
from .models import Card, GameState


def create_deck() -> List[Card]:
    """Create the 52-card deck, one card per (suit, rank)."""
    deck = []
    for suit in SUITS:
        for rank in RANKS:
            deck.append(Card(id=card_id(rank, suit), suit=suit, rank=rank, value=RANK_VALUES[rank]))
    return deck


def shuffle_deck(deck: List[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """
    Shuffle a deck, deterministically if a seeded rng is provided.

    Args:
        deck: Cards to shuffle
        rng: Optional random source (seeded for reproducible games)

    Returns:
        Shuffled copy of the deck
    """
    deck_copy = deck.copy()
    (rng or random).shuffle(deck_copy)
    return deck_copy


def deal_hands(deck: List[Card], player_count: int = NUM_PLAYERS) -> List[List[Card]]:
    """
    Deal cards evenly, round-robin style.

    Args:
        deck: Shuffled deck of cards
        player_count: Number of seats to deal to

    Returns:
        One sorted hand per seat
    """
    cards_per_player = len(deck) // player_count
    hands: List[List[Card]] = [[] for _ in range(player_count)]

    for i, card in enumerate(deck[:cards_per_player * player_count]):
        hands[i % player_count].append(card)

    return [sort_hand(hand) for hand in hands]


def sort_hand(hand: List[Card]) -> List[Card]:
    """Sort a hand by suit (clubs, diamonds, hearts, spades), then by value."""
    return sorted(hand, key=lambda c: (SUITS.index(c.suit), c.value))


def validate_deck_integrity(state: GameState) -> bool:
    """
    Validate that all cards are accounted for and no duplicates exist.

    Cards may be in hands, in the trick on the table or in resolved tricks.
    """
    all_cards = []
    for player in state.players:
        all_cards.extend(player.hand)
    all_cards.extend(t.card for t in state.current_trick)
    for trick in state.trick_history:
        all_cards.extend(t.card for t in trick.plays)

    expected = {c.id for c in create_deck()}
    actual = [c.id for c in all_cards]
    return len(actual) == len(set(actual)) and set(actual) == expected


def assert_deck_integrity(state: GameState):
    """Raise ``ValueError`` when a card is missing or held twice."""
    if not validate_deck_integrity(state):
        raise ValueError(f"Deck integrity broken in round {state.round_number}")


def hand_size_ok(state: GameState) -> bool:
    """True when every seat holds a full hand (right after a deal or an exchange)."""
    return all(len(p.hand) == HAND_SIZE for p in state.players)

"""
Tests for deck construction, dealing and hand ordering.
"""

import random

import pytest

from peppa_engine.constants import CLUBS, DIAMONDS, HEARTS, SPADES
from peppa_engine.engine import create_game, execute_pass, initialize_game, start_round
from peppa_engine.shuffle import (
    assert_deck_integrity, create_deck, deal_hands, hand_size_ok, shuffle_deck, sort_hand,
    validate_deck_integrity,
)


def test_create_deck():
    """Test the deck holds 52 distinct cards, 13 per suit."""
    deck = create_deck()
    assert len(deck) == 52
    assert len({c.id for c in deck}) == 52
    for suit in (CLUBS, DIAMONDS, HEARTS, SPADES):
        assert len([c for c in deck if c.suit == suit]) == 13


def test_card_values():
    """Test ranks map to values 2..14."""
    deck = {c.id: c for c in create_deck()}
    assert deck['2H'].value == 2
    assert deck['10C'].value == 10
    assert deck['JD'].value == 11
    assert deck['QS'].value == 12
    assert deck['QS'].is_penalty_queen
    assert deck['AS'].value == 14
    assert deck['AS'].is_spade_honor()
    assert not deck['QS'].is_spade_honor()


def test_deal_partitions_deck():
    """Test four hands of 13 cover the deck exactly once."""
    hands = deal_hands(shuffle_deck(create_deck(), random.Random(7)))
    assert [len(h) for h in hands] == [13, 13, 13, 13]

    ids = [c.id for hand in hands for c in hand]
    assert len(ids) == 52
    assert set(ids) == {c.id for c in create_deck()}


def test_seeded_shuffle_is_reproducible():
    """Test the same seed gives the same deal."""
    first = shuffle_deck(create_deck(), random.Random(42))
    second = shuffle_deck(create_deck(), random.Random(42))
    assert [c.id for c in first] == [c.id for c in second]
    assert [c.id for c in first] != [c.id for c in create_deck()]


def test_sort_hand_by_suit_then_value():
    """Test hands sort clubs, diamonds, hearts, spades and ascending inside a suit."""
    deck = {c.id: c for c in create_deck()}
    hand = [deck[i] for i in ('AS', '2H', 'KC', '3C', '10D', 'QH')]
    assert [c.id for c in sort_hand(hand)] == ['3C', 'KC', '10D', '2H', 'QH', 'AS']


def test_every_round_deals_a_full_deck():
    """Test deck integrity right after a deal."""
    rng = random.Random(3)
    state = create_game()
    initialize_game(state, rng=rng)
    start_round(state, rng)

    assert hand_size_ok(state)
    assert validate_deck_integrity(state)
    for player in state.players:
        assert player.hand == sort_hand(player.hand)


def test_deck_integrity_detects_duplicates():
    """Test a duplicated card breaks integrity."""
    rng = random.Random(3)
    state = create_game()
    initialize_game(state, rng=rng)
    start_round(state, rng)

    state.players[1].hand[0] = state.players[0].hand[0]
    assert not validate_deck_integrity(state)

    with pytest.raises(ValueError):
        assert_deck_integrity(state)


def test_exchange_rejects_a_broken_deck():
    """Test the exchange raises when a card went missing during passing."""
    rng = random.Random(3)
    state = create_game()
    initialize_game(state, rng=rng)
    start_round(state, rng)
    assert_deck_integrity(state)

    for player in state.players:
        player.selected_to_pass = [c.id for c in player.hand[:3]]
    state.players[2].hand.pop()

    with pytest.raises(ValueError):
        execute_pass(state)

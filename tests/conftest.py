"""Pytest fixtures for EV engine tests."""

import pytest

from core.cards import Card, Rank, Suit, parse_cards
from core.hand import Hand
from core.rules import DEFAULT_HOUSE_RULES, HouseRules


def _make_hand(tokens: str, **flags) -> Hand:
    """Build a hand from card strings, e.g. ``make_hand("10 6")``."""
    return Hand(cards=parse_cards(tokens), **flags)


@pytest.fixture
def make_hand():
    """Factory for hands built from card strings."""
    return _make_hand


@pytest.fixture
def default_rules():
    """Two decks, H17, DAS, resplit aces, no surrender, peek."""
    return DEFAULT_HOUSE_RULES


@pytest.fixture
def s17_rules():
    """Six-deck S17 shoe game with late surrender."""
    return HouseRules(
        num_decks=6,
        dealer_hits_soft_17=False,
        surrender="late",
    )


@pytest.fixture
def enhc_rules():
    """Six-deck European no-hole-card game with full early surrender."""
    return HouseRules(
        num_decks=6,
        dealer_hits_soft_17=False,
        no_hole_card=True,
        surrender="enhcAll",
    )


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    hand = Hand()
    hand.add_card(Card(Rank.ACE, Suit.SPADES))
    hand.add_card(Card(Rank.KING, Suit.HEARTS))
    return hand


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    hand = Hand()
    hand.add_card(Card(Rank.ACE, Suit.SPADES))
    hand.add_card(Card(Rank.SIX, Suit.HEARTS))
    return hand


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    hand = Hand()
    hand.add_card(Card(Rank.TEN, Suit.SPADES))
    hand.add_card(Card(Rank.SIX, Suit.HEARTS))
    return hand


@pytest.fixture
def pair_8s_hand():
    """A pair of 8s hand."""
    return Hand.of(Card(Rank.EIGHT, Suit.SPADES), Card(Rank.EIGHT, Suit.HEARTS))


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return Hand.of(
        Card(Rank.KING, Suit.SPADES),
        Card(Rank.QUEEN, Suit.HEARTS),
        Card(Rank.FIVE, Suit.CLUBS),
    )


@pytest.fixture
def dealer_ten():
    """Dealer showing a ten."""
    return _make_hand("10")


@pytest.fixture
def dealer_ace():
    """Dealer showing an ace."""
    return _make_hand("A")


@pytest.fixture
def dealer_six():
    """Dealer showing a six."""
    return _make_hand("6")

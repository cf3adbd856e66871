"""Blackjack EV engine - pure computation, no I/O."""

from core.cards import Card, Rank, Suit
from core.errors import (
    EngineError,
    InvalidCompositionError,
    InvalidHandError,
    InvalidRulesError,
)
from core.hand import Hand, HandResult, get_hand_result
from core.rules import DEFAULT_HOUSE_RULES, HouseRules
from core.shoe import Composition, remaining_counts

__all__ = [
    "Card",
    "Rank",
    "Suit",
    "EngineError",
    "InvalidCompositionError",
    "InvalidHandError",
    "InvalidRulesError",
    "Hand",
    "HandResult",
    "get_hand_result",
    "DEFAULT_HOUSE_RULES",
    "HouseRules",
    "Composition",
    "remaining_counts",
]

"""Blackjack house rule variations."""

from dataclasses import dataclass
from typing import Literal

from core.cards import CARD_VALUES, TEN_VALUE
from core.errors import InvalidRulesError

SurrenderRule = Literal["none", "late", "early", "enhcAll", "es10"]
DoubleRestriction = Literal["any", "9-11", "10-11"]

# Bumped whenever DEFAULT_HOUSE_RULES changes meaning.
RULES_VERSION = "2"

_ALL_UP_CARDS = frozenset(CARD_VALUES)

# Up-cards against which each surrender rule may be taken.
SURRENDER_WINDOWS: dict[str, frozenset[int]] = {
    "none": frozenset(),
    "late": _ALL_UP_CARDS,
    "early": _ALL_UP_CARDS,
    "enhcAll": _ALL_UP_CARDS,
    "es10": frozenset({TEN_VALUE}),
}

# Surrender offered before the dealer's blackjack is known.
_EARLY_SURRENDER = frozenset({"early", "enhcAll", "es10"})
# Variants that only exist at no-hole-card tables.
_NO_HOLE_CARD_SURRENDER = frozenset({"enhcAll", "es10"})

_DOUBLE_TOTALS: dict[str, frozenset[int] | None] = {
    "any": None,
    "9-11": frozenset({9, 10, 11}),
    "10-11": frozenset({10, 11}),
}


@dataclass(frozen=True)
class HouseRules:
    """
    Table rules that change the EV of any decision.

    Contradictory combinations are rejected on construction, so every
    HouseRules instance the engine sees is playable.
    """

    # Shoe
    num_decks: int = 2

    # Dealer
    dealer_hits_soft_17: bool = True
    no_hole_card: bool = False  # ENHC: no peek, hole card dealt after the players act

    # Blackjack payout (3:2 = 1.5, 6:5 = 1.2, 1:1 = 1.0)
    blackjack_payout: float = 1.5

    # Doubling
    double_after_split: bool = True
    double_on: DoubleRestriction = "any"

    # Splitting
    resplit_aces: bool = True
    hit_split_aces: bool = False
    max_split_hands: int = 4

    surrender: SurrenderRule = "none"

    def __post_init__(self) -> None:
        """Validate rule combinations."""
        if not 1 <= self.num_decks <= 8:
            raise InvalidRulesError("num_decks must be between 1 and 8")
        if self.blackjack_payout < 1.0:
            raise InvalidRulesError("blackjack_payout must be at least 1.0")
        if not 1 <= self.max_split_hands <= 4:
            raise InvalidRulesError("max_split_hands must be between 1 and 4")
        if self.double_on not in _DOUBLE_TOTALS:
            raise InvalidRulesError(f"Unknown double restriction: {self.double_on}")
        if self.surrender not in SURRENDER_WINDOWS:
            raise InvalidRulesError(f"Unknown surrender rule: {self.surrender}")
        if self.surrender in _NO_HOLE_CARD_SURRENDER and not self.no_hole_card:
            raise InvalidRulesError(f"{self.surrender} surrender requires no_hole_card")
        if self.surrender == "late" and self.no_hole_card:
            raise InvalidRulesError("late surrender needs a peeking dealer")

    @property
    def is_early_surrender(self) -> bool:
        """Surrender is decided before the dealer's blackjack is known."""
        return self.surrender in _EARLY_SURRENDER

    @property
    def dealer_peeks(self) -> bool:
        return not self.no_hole_card

    def can_surrender_against(self, up_value: int) -> bool:
        return up_value in SURRENDER_WINDOWS[self.surrender]

    def can_double_total(self, total: int) -> bool:
        """Whether the double restriction admits a two-card total."""
        allowed = _DOUBLE_TOTALS[self.double_on]
        return allowed is None or total in allowed

    @classmethod
    def vegas_strip(cls) -> "HouseRules":
        """Six-deck Strip game: S17, DAS, late surrender."""
        return cls(
            num_decks=6,
            dealer_hits_soft_17=False,
            resplit_aces=False,
            surrender="late",
        )

    @classmethod
    def downtown_vegas(cls) -> "HouseRules":
        """Downtown Las Vegas rules (H17)."""
        return cls(
            num_decks=6,
            dealer_hits_soft_17=True,
            resplit_aces=False,
            surrender="late",
        )

    @classmethod
    def single_deck(cls) -> "HouseRules":
        return cls(
            num_decks=1,
            dealer_hits_soft_17=True,
            double_after_split=False,
            resplit_aces=False,
            max_split_hands=2,
        )

    @classmethod
    def atlantic_city(cls) -> "HouseRules":
        """Eight decks, S17, late surrender."""
        return cls(
            num_decks=8,
            dealer_hits_soft_17=False,
            resplit_aces=False,
            surrender="late",
        )

    @classmethod
    def european(cls) -> "HouseRules":
        """European no-hole-card game with full early surrender."""
        return cls(
            num_decks=6,
            dealer_hits_soft_17=False,
            no_hole_card=True,
            double_on="9-11",
            resplit_aces=False,
            max_split_hands=2,
            surrender="enhcAll",
        )


DEFAULT_HOUSE_RULES = HouseRules()

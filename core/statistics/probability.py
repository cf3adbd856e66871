"""Exact dealer outcome distributions for a finite shoe."""

from dataclasses import dataclass, replace
from enum import Enum, auto

from core.cards import Card
from core.errors import InvalidCompositionError
from core.hand import add_card_value
from core.rules import DEFAULT_HOUSE_RULES, HouseRules
from core.shoe import Composition

DEALER_FINAL_TOTALS = (17, 18, 19, 20, 21)

# Outcome vectors are tuples ordered (17, 18, 19, 20, 21, bust).
_BUST = (0.0, 0.0, 0.0, 0.0, 0.0, 1.0)
_STOOD = {
    total: tuple(1.0 if i == total - 17 else 0.0 for i in range(6))
    for total in DEALER_FINAL_TOTALS
}


class DealerOutcome(Enum):
    """Possible dealer final outcomes."""

    BUST = auto()
    SEVENTEEN = auto()
    EIGHTEEN = auto()
    NINETEEN = auto()
    TWENTY = auto()
    TWENTY_ONE = auto()
    BLACKJACK = auto()


@dataclass(frozen=True)
class DealerProbabilities:
    """Dealer outcome probabilities for a given upcard and shoe."""

    upcard: int  # 2-11
    bust: float
    seventeen: float
    eighteen: float
    nineteen: float
    twenty: float
    twenty_one: float
    blackjack: float = 0.0

    def __post_init__(self) -> None:
        """Validate probabilities sum to 1."""
        if abs(self.total - 1.0) > 1e-9:
            raise InvalidCompositionError(f"Probabilities must sum to 1.0, got {self.total}")

    @property
    def total(self) -> float:
        return (
            self.bust
            + self.seventeen
            + self.eighteen
            + self.nineteen
            + self.twenty
            + self.twenty_one
            + self.blackjack
        )

    @property
    def final_totals(self) -> dict[int, float]:
        """Probability of the dealer standing on each total 17-21 (non-blackjack)."""
        return {
            17: self.seventeen,
            18: self.eighteen,
            19: self.nineteen,
            20: self.twenty,
            21: self.twenty_one,
        }

    def without_blackjack(self) -> "DealerProbabilities":
        """
        Condition on the dealer not holding blackjack.

        Raises:
            InvalidCompositionError: If every possible hole card makes blackjack.
        """
        if not self.blackjack:
            return self
        rest = 1.0 - self.blackjack
        if rest <= 0.0:
            raise InvalidCompositionError("Dealer blackjack is certain")
        return replace(
            self,
            bust=self.bust / rest,
            seventeen=self.seventeen / rest,
            eighteen=self.eighteen / rest,
            nineteen=self.nineteen / rest,
            twenty=self.twenty / rest,
            twenty_one=self.twenty_one / rest,
            blackjack=0.0,
        )

    def to_dict(self) -> dict[DealerOutcome, float]:
        """Convert to outcome dictionary."""
        return {
            DealerOutcome.BUST: self.bust,
            DealerOutcome.SEVENTEEN: self.seventeen,
            DealerOutcome.EIGHTEEN: self.eighteen,
            DealerOutcome.NINETEEN: self.nineteen,
            DealerOutcome.TWENTY: self.twenty,
            DealerOutcome.TWENTY_ONE: self.twenty_one,
            DealerOutcome.BLACKJACK: self.blackjack,
        }


class DealerOutcomeCalculator:
    """
    Resolves dealer hands by exhaustive recursion over the remaining shoe.

    Sub-results are cached on (total, softness, composition), which fully
    determines the dealer's future. The cache belongs to this instance only, so
    create one calculator per top-level computation.
    """

    def __init__(self, rules: HouseRules = DEFAULT_HOUSE_RULES) -> None:
        self.rules = rules
        self._memo: dict[tuple, tuple[float, ...]] = {}

    def _stands(self, total: int, is_soft: bool) -> bool:
        if total > 17:
            return True
        if total == 17:
            return not (is_soft and self.rules.dealer_hits_soft_17)
        return False

    def _resolve(self, total: int, is_soft: bool, composition: Composition) -> tuple[float, ...]:
        if total > 21:
            return _BUST
        if self._stands(total, is_soft):
            return _STOOD[total]

        key = (total, is_soft, composition.signature())
        cached = self._memo.get(key)
        if cached is not None:
            return cached

        remaining = composition.total
        if not remaining:
            raise InvalidCompositionError("Shoe exhausted while the dealer was drawing")

        outcome = [0.0] * 6
        for value, count in composition.nonzero():
            p = count / remaining
            composition.draw(value)
            sub = self._resolve(*add_card_value(total, is_soft, value), composition)
            composition.replace(value)
            for i, q in enumerate(sub):
                outcome[i] += p * q

        result = tuple(outcome)
        self._memo[key] = result
        return result

    def distribution(self, up_value: int, composition: Composition) -> DealerProbabilities:
        """
        Final-outcome distribution for a dealer showing ``up_value``.

        Args:
            up_value: Point value of the up-card (Ace = 11)
            composition: Shoe without the up-card; the hole card comes from it

        Returns:
            DealerProbabilities including the two-card blackjack mass
        """
        remaining = composition.total
        if not remaining:
            raise InvalidCompositionError("No cards left for the dealer's hole card")

        up_total, up_soft = add_card_value(0, False, up_value)
        outcome = [0.0] * 6
        blackjack = 0.0
        for hole, count in composition.nonzero():
            p = count / remaining
            total, is_soft = add_card_value(up_total, up_soft, hole)
            if total == 21:
                blackjack += p
                continue
            composition.draw(hole)
            sub = self._resolve(total, is_soft, composition)
            composition.replace(hole)
            for i, q in enumerate(sub):
                outcome[i] += p * q

        seventeen, eighteen, nineteen, twenty, twenty_one, bust = outcome
        return DealerProbabilities(
            upcard=up_value,
            bust=bust,
            seventeen=seventeen,
            eighteen=eighteen,
            nineteen=nineteen,
            twenty=twenty,
            twenty_one=twenty_one,
            blackjack=blackjack,
        )


def dealer_distribution(
    up_card: Card | int,
    composition: Composition,
    rules: HouseRules = DEFAULT_HOUSE_RULES,
) -> DealerProbabilities:
    """
    Dealer outcome distribution for one up-card against a composition.

    ``composition`` must already exclude the up-card and every player card. It
    is not modified. Nothing is cached between calls.
    """
    up_value = up_card.value if isinstance(up_card, Card) else up_card
    calculator = DealerOutcomeCalculator(rules)
    return calculator.distribution(up_value, composition.copy())

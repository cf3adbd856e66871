"""House edge: exact enumeration over starting hands, plus a rule-table estimate."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from decimal import Decimal

from core.rules import DEFAULT_HOUSE_RULES, HouseRules
from core.shoe import Composition
from core.statistics.expected_value import (
    PLAY_ACTIONS,
    SURRENDER_EV,
    Action,
    ActionEV,
    ActionEVCalculator,
    HandState,
    select_action,
)
from core.statistics.probability import DealerOutcomeCalculator

logger = logging.getLogger(__name__)

DEFAULT_NUM_HANDS = 10_000


@dataclass(frozen=True)
class HouseEdgeResult:
    """Outcome of an exact house-edge computation."""

    house_edge_percent: float
    expected_return: float  # per unit initial bet, player's perspective
    num_hands: int
    hands_considered: int  # (up-card, starting pair) classes evaluated
    max_split_hands: int
    player_blackjack_probability: float
    dealer_blackjack_probability: float
    action_frequencies: dict[str, float] = field(default_factory=dict)


def split_cap_for(num_hands: int, rules: HouseRules) -> int:
    """
    Hands a split may grow to at a given resolution.

    Small runs stop at a single split; each extra order of magnitude from
    1,000 hands allows one more resplit, up to the table's own cap.
    """
    digits = len(str(max(num_hands, 1)))
    extra_resplits = min(max(digits - 2, 0), 2)
    return min(rules.max_split_hands, 2 + extra_resplits)


def starting_pairs(composition: Composition) -> Iterator[tuple[int, int, float]]:
    """
    Unordered two-card player hands with their exact deal probability.

    Yields ``(first, second, probability)`` with ``first <= second``. The
    composition is read once up front, so callers may draw and replace cards
    between iterations as long as they restore it.
    """
    remaining = composition.total
    values = composition.nonzero()
    for i, (first, first_count) in enumerate(values):
        for second, second_count in values[i:]:
            if second == first:
                if first_count < 2:
                    continue
                p = first_count / remaining * (first_count - 1) / (remaining - 1)
            else:
                p = 2 * first_count / remaining * second_count / (remaining - 1)
            yield first, second, p


def realised_ev(
    choice: ActionEV,
    state: HandState,
    dealer_blackjack: float,
    rules: HouseRules,
) -> float:
    """
    Unconditional value of a chosen action.

    The conditioned EVs assume no dealer blackjack; fold that risk back in.
    Early surrender is taken before the dealer checks, so it is worth exactly
    -0.5. A dealer blackjack costs only the original bet.
    """
    if choice.action is Action.SURRENDER and rules.is_early_surrender:
        return SURRENDER_EV
    loss = 0.0 if state.is_natural else -1.0
    return dealer_blackjack * loss + (1.0 - dealer_blackjack) * choice.ev


def simulate_house_edge(
    num_hands: int = DEFAULT_NUM_HANDS,
    rules: HouseRules = DEFAULT_HOUSE_RULES,
) -> HouseEdgeResult:
    """
    Exact house edge for a rule set.

    Every (dealer up-card, player starting pair) class is dealt from a fresh
    shoe, weighted by its probability, played with the EV-maximising action,
    and summed. Deterministic: identical inputs give identical output.

    Args:
        num_hands: Resolution knob; larger values allow deeper resplitting
        rules: House rules

    Returns:
        HouseEdgeResult with the edge as a percentage of the initial bet

    Raises:
        ValueError: If num_hands is not positive
    """
    if num_hands < 1:
        raise ValueError(f"num_hands must be positive, got {num_hands}")

    split_cap = split_cap_for(num_hands, rules)
    composition = Composition.full(rules.num_decks)
    shoe_size = composition.total

    expected = 0.0
    weight = 0.0
    classes = 0
    player_blackjack = 0.0
    dealer_blackjack = 0.0
    frequencies = {action.value: 0.0 for action in (*PLAY_ACTIONS, Action.SURRENDER)}

    for up_value, up_count in composition.nonzero():
        p_up = up_count / shoe_size
        composition.draw(up_value)
        up_expected = 0.0

        for first, second, p_pair in starting_pairs(composition):
            composition.draw(first)
            composition.draw(second)

            dealer = DealerOutcomeCalculator(rules).distribution(up_value, composition)
            calculator = ActionEVCalculator(
                rules,
                dealer.without_blackjack(),
                composition,
                max_split_hands=split_cap,
            )
            state = HandState.initial(first, second)
            choice = select_action(
                calculator.action_evs(
                    state,
                    up_value,
                    blackjack_probability=dealer.blackjack,
                    allow_continue=rules.is_early_surrender,
                )
            )
            ev = realised_ev(choice, state, dealer.blackjack, rules)

            composition.replace(second)
            composition.replace(first)

            p = p_up * p_pair
            classes += 1
            weight += p
            up_expected += p_pair * ev
            expected += p * ev
            dealer_blackjack += p * dealer.blackjack
            if state.is_natural:
                player_blackjack += p
            frequencies[choice.action.value] += p

        composition.replace(up_value)
        logger.debug("Up-card %d: EV %.6f", up_value, up_expected)

    expected_return = expected / weight
    result = HouseEdgeResult(
        house_edge_percent=-expected_return * 100.0,
        expected_return=expected_return,
        num_hands=num_hands,
        hands_considered=classes,
        max_split_hands=split_cap,
        player_blackjack_probability=player_blackjack / weight,
        dealer_blackjack_probability=dealer_blackjack / weight,
        action_frequencies={action: p / weight for action, p in frequencies.items()},
    )
    logger.info(
        "House edge %.4f%% (%d decks, %s, %d starting hands, split cap %d)",
        result.house_edge_percent,
        rules.num_decks,
        "H17" if rules.dealer_hits_soft_17 else "S17",
        classes,
        split_cap,
    )
    return result


class HouseEdgeCalculator:
    """
    Quick house edge estimate from published per-rule effects.

    Baseline is 0.43% for 8 decks, S17, DAS, 3:2, late surrender, no
    resplit of aces, four hands. Useful for instant display next to the exact
    figure from ``simulate_house_edge``.
    """

    # Positive = worse for the player (percentage points)
    _RULE_EFFECTS = {
        "h17": Decimal("0.22"),
        "bj_6_5": Decimal("1.39"),
        "bj_1_1": Decimal("2.27"),
        "no_das": Decimal("0.14"),
        "double_9_11_only": Decimal("0.09"),
        "double_10_11_only": Decimal("0.18"),
        "no_surrender": Decimal("0.07"),
        "early_surrender": Decimal("-0.63"),
        "enhc_all_surrender": Decimal("-0.28"),
        "enhc_es10_surrender": Decimal("-0.23"),
        "resplit_aces": Decimal("-0.08"),
        "hit_split_aces": Decimal("-0.19"),
        "no_hole_card": Decimal("0.11"),
        "max_three_hands": Decimal("0.01"),
        "max_two_hands": Decimal("0.02"),
        "no_split": Decimal("0.40"),
    }

    _DECK_EFFECTS = {
        1: Decimal("-0.48"),
        2: Decimal("-0.19"),
        3: Decimal("-0.13"),
        4: Decimal("-0.06"),
        5: Decimal("-0.03"),
        6: Decimal("-0.02"),
        7: Decimal("-0.01"),
        8: Decimal("0.00"),
    }

    _SURRENDER_EFFECTS = {
        "none": "no_surrender",
        "early": "early_surrender",
        "enhcAll": "enhc_all_surrender",
        "es10": "enhc_es10_surrender",
    }

    _SPLIT_CAP_EFFECTS = {
        1: "no_split",
        2: "max_two_hands",
        3: "max_three_hands",
    }

    _BASELINE = Decimal("0.43")

    def __init__(self, rules: HouseRules) -> None:
        self.rules = rules

    def calculate(self) -> Decimal:
        """
        Estimate the house edge for the configured rules.

        Returns:
            House edge as a percentage (e.g., 0.43 for 0.43%)
        """
        rules = self.rules
        effects = self._RULE_EFFECTS
        edge = self._BASELINE + self._DECK_EFFECTS[rules.num_decks]

        if rules.dealer_hits_soft_17:
            edge += effects["h17"]

        if rules.blackjack_payout <= 1.0:
            edge += effects["bj_1_1"]
        elif rules.blackjack_payout <= 1.2:
            edge += effects["bj_6_5"]

        if not rules.double_after_split:
            edge += effects["no_das"]
        if rules.double_on == "9-11":
            edge += effects["double_9_11_only"]
        elif rules.double_on == "10-11":
            edge += effects["double_10_11_only"]

        if rules.surrender in self._SURRENDER_EFFECTS:
            edge += effects[self._SURRENDER_EFFECTS[rules.surrender]]

        if rules.resplit_aces:
            edge += effects["resplit_aces"]
        if rules.hit_split_aces:
            edge += effects["hit_split_aces"]
        if rules.max_split_hands in self._SPLIT_CAP_EFFECTS:
            edge += effects[self._SPLIT_CAP_EFFECTS[rules.max_split_hands]]

        if rules.no_hole_card:
            edge += effects["no_hole_card"]

        return edge

"""Full strategy charts computed from the EV engine."""

from dataclasses import dataclass

from core.cards import CARD_VALUES, Card
from core.hand import Hand
from core.rules import DEFAULT_HOUSE_RULES, HouseRules
from core.shoe import Composition
from core.statistics.expected_value import (
    Action,
    ActionEVCalculator,
    HandState,
    select_action,
)
from core.statistics.probability import DealerOutcomeCalculator

HARD_TOTALS = range(5, 22)
SOFT_TOTALS = range(13, 22)

# Row -> dealer up-card value -> entry
ChartTable = dict[int, dict[int, "ChartEntry"]]


@dataclass(frozen=True)
class ChartEntry:
    """Selected action for one chart cell, with the EVs it was chosen from."""

    action: Action
    evs: dict[Action, float]

    @property
    def ev(self) -> float:
        return self.evs[self.action]


@dataclass(frozen=True)
class StrategyChart:
    """Hard, soft and pair tables for one rule set."""

    rules: HouseRules
    hard: ChartTable
    soft: ChartTable
    pairs: ChartTable

    def lookup(self, hand: Hand, up_card: Card) -> ChartEntry | None:
        """
        Find the chart cell for a two-card hand.

        Returns:
            The entry, or None if the hand has no row (e.g. a busted total)
        """
        state = HandState.from_hand(hand)
        if state.pair_value is not None:
            table = self.pairs
            row = state.pair_value
        elif state.is_soft:
            table = self.soft
            row = state.total
        else:
            table = self.hard
            row = state.total
        return table.get(row, {}).get(up_card.value)


def generate_strategy_chart(rules: HouseRules = DEFAULT_HOUSE_RULES) -> StrategyChart:
    """
    Compute a full strategy chart.

    Each up-card column uses a shoe with only that up-card removed, so the
    chart is the total-dependent strategy for the rule set rather than the
    play for any particular two cards.
    """
    hard: ChartTable = {total: {} for total in HARD_TOTALS}
    soft: ChartTable = {total: {} for total in SOFT_TOTALS}
    pairs: ChartTable = {value: {} for value in CARD_VALUES}

    for up_value in CARD_VALUES:
        composition = Composition.full(rules.num_decks)
        composition.draw(up_value)
        dealer = DealerOutcomeCalculator(rules).distribution(up_value, composition)
        calculator = ActionEVCalculator(rules, dealer.without_blackjack(), composition)

        def entry(state: HandState) -> ChartEntry:
            action_evs = calculator.action_evs(
                state,
                up_value,
                blackjack_probability=dealer.blackjack,
                allow_continue=rules.is_early_surrender,
            )
            choice = select_action(action_evs)
            return ChartEntry(
                action=choice.action,
                evs={
                    e.action: e.ev
                    for e in action_evs
                    if e.is_available and e.action is not Action.CONTINUE
                },
            )

        for total in HARD_TOTALS:
            hard[total][up_value] = entry(HandState(total=total, is_soft=False))
        for total in SOFT_TOTALS:
            soft[total][up_value] = entry(HandState(total=total, is_soft=True))
        for value in CARD_VALUES:
            pairs[value][up_value] = entry(HandState.initial(value, value))

    return StrategyChart(rules=rules, hard=hard, soft=soft, pairs=pairs)

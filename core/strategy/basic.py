"""EV-driven strategy decisions for a single hand."""

from dataclasses import dataclass

from core.hand import Hand
from core.rules import DEFAULT_HOUSE_RULES, HouseRules
from core.statistics.expected_value import (
    Action,
    ActionEV,
    compute_action_evs,
    select_action,
)


def get_basic_strategy_action(
    player_hand: Hand,
    dealer_hand: Hand,
    rules: HouseRules = DEFAULT_HOUSE_RULES,
) -> Action:
    """
    The EV-maximising action for a hand.

    Under early-timed surrender the surrender decision is weighed against the
    value of playing on with the dealer's blackjack still possible. The
    result is always a concrete action; CONTINUE is never returned.

    Args:
        player_hand: Hand facing the decision
        dealer_hand: Dealer hand; its first card is the up-card
        rules: House rules

    Returns:
        The recommended action
    """
    action_evs = compute_action_evs(
        player_hand,
        dealer_hand,
        rules,
        allow_continue=rules.is_early_surrender,
    )
    return select_action(action_evs).action


def get_best_action_without_surrender(
    player_hand: Hand,
    dealer_hand: Hand,
    rules: HouseRules = DEFAULT_HOUSE_RULES,
) -> Action:
    """The best play once surrender has been declined or is not offered."""
    action_evs = compute_action_evs(player_hand, dealer_hand, rules)
    return select_action(action_evs, allow_surrender=False).action


@dataclass(frozen=True)
class EVCost:
    """How much a chosen action gives up against the optimal one."""

    chosen: Action
    optimal: Action
    chosen_ev: float
    optimal_ev: float

    @property
    def cost(self) -> float:
        return self.optimal_ev - self.chosen_ev

    @property
    def is_mistake(self) -> bool:
        return self.chosen is not self.optimal and self.cost > 1e-9


def ev_cost(
    player_hand: Hand,
    dealer_hand: Hand,
    chosen: Action,
    rules: HouseRules = DEFAULT_HOUSE_RULES,
) -> EVCost | None:
    """
    Compare a chosen action with the best available one.

    EVs are conditioned on no dealer blackjack, as they are at the moment of a
    late decision.

    Returns:
        EVCost, or None if the chosen action is not available for this hand
    """
    action_evs: list[ActionEV] = compute_action_evs(player_hand, dealer_hand, rules)
    available = {entry.action: entry for entry in action_evs if entry.is_available}
    if chosen not in available:
        return None

    best = max(available.values(), key=lambda entry: entry.ev)
    return EVCost(
        chosen=chosen,
        optimal=best.action,
        chosen_ev=available[chosen].ev,
        optimal_ev=best.ev,
    )

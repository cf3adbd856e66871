"""Dealer probabilities, action EVs and house edge."""

from core.statistics.probability import (
    DealerOutcome,
    DealerOutcomeCalculator,
    DealerProbabilities,
    dealer_distribution,
)
from core.statistics.expected_value import (
    Action,
    ActionEV,
    ActionEVCalculator,
    HandState,
    compute_action_evs,
    select_action,
)
from core.statistics.house_edge import (
    HouseEdgeCalculator,
    HouseEdgeResult,
    simulate_house_edge,
)

__all__ = [
    "DealerOutcome",
    "DealerOutcomeCalculator",
    "DealerProbabilities",
    "dealer_distribution",
    "Action",
    "ActionEV",
    "ActionEVCalculator",
    "HandState",
    "compute_action_evs",
    "select_action",
    "HouseEdgeCalculator",
    "HouseEdgeResult",
    "simulate_house_edge",
]

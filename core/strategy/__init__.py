"""Strategy selection and charts."""

from core.statistics.expected_value import Action
from core.strategy.basic import (
    EVCost,
    ev_cost,
    get_basic_strategy_action,
    get_best_action_without_surrender,
)
from core.strategy.chart import ChartEntry, StrategyChart, generate_strategy_chart

__all__ = [
    "Action",
    "EVCost",
    "ev_cost",
    "get_basic_strategy_action",
    "get_best_action_without_surrender",
    "ChartEntry",
    "StrategyChart",
    "generate_strategy_chart",
]

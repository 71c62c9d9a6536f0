"""
Position and P&L engine.

Pure functions: store snapshot -> ``aggregate`` -> ``with_price`` -> ``summarize``.
"""

from .aggregator import aggregate, canonical_order, is_aggregatable
from .analysis import (
    calculate_cost_basis,
    calculate_dollar_move,
    calculate_percentage_move,
    calculate_profit_analysis,
)
from .commission import calculate_commission, effective_commission
from .metrics import price_positions, with_price
from .summary import calculate_cash_balance, summarize, trade_cash_flow

__all__ = [
    "calculate_commission",
    "effective_commission",
    "aggregate",
    "canonical_order",
    "is_aggregatable",
    "with_price",
    "price_positions",
    "summarize",
    "calculate_cash_balance",
    "trade_cash_flow",
    "calculate_cost_basis",
    "calculate_profit_analysis",
    "calculate_dollar_move",
    "calculate_percentage_move",
]

"""
Core enumerations for the portfolio dashboard.

This module provides centralized enumerations for domain concepts
like trade sides, record kinds, cash movements and market sessions.
"""

from .trade_types import CashEventKind, MarketState, TradeKind, TradeSide

__all__ = ["TradeSide", "TradeKind", "CashEventKind", "MarketState"]

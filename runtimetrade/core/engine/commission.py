"""
Commission model.

Per-share commission with a per-trade minimum ($0.005/share, $1 minimum).
"""

import math

from runtimetrade.core.constants import COMMISSION_MINIMUM, COMMISSION_PER_SHARE
from runtimetrade.core.models.trade import TradeEvent
from runtimetrade.core.types.financial import ZERO


def calculate_commission(shares: float) -> float:
    """Commission charged for trading ``shares`` shares.

    Args:
        shares: Share count (0 or more)

    Returns:
        ``max(shares * COMMISSION_PER_SHARE, COMMISSION_MINIMUM)``

    Examples:
        >>> calculate_commission(100)
        1.0
        >>> calculate_commission(1000)
        5.0
    """
    return max(shares * COMMISSION_PER_SHARE, COMMISSION_MINIMUM)


def effective_commission(trade: TradeEvent) -> float:
    """Recorded commission when positive and finite, otherwise the model commission."""
    if math.isfinite(trade.commission) and trade.commission > ZERO:
        return trade.commission
    return calculate_commission(trade.shares)

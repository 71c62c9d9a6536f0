"""
Market quote model.
"""

from dataclasses import dataclass, field
from datetime import datetime

from runtimetrade.core.enums import MarketState
from runtimetrade.core.models.trade import utc_now
from runtimetrade.core.types.financial import ZERO, is_known_price


@dataclass(frozen=True)
class Quote:
    """Last price for a symbol as reported by a quote source.

    A price of 0 means unknown; ``error`` then says why.
    """

    symbol: str
    price: float
    timestamp: datetime = field(default_factory=utc_now)
    source: str = ""
    market_state: MarketState = MarketState.UNKNOWN
    error: str | None = None

    @property
    def is_known(self) -> bool:
        return is_known_price(self.price)

    @classmethod
    def unknown(cls, symbol: str, source: str, error: str | None = None) -> "Quote":
        """Build an unknown-price quote."""
        return cls(symbol=symbol, price=ZERO, source=source, error=error)

"""
Trade, order and cash-event type enumerations.

This module defines the allowed trade sides, record kinds and cash movements.
"""

from enum import StrEnum


class TradeSide(StrEnum):
    """
    Allowed trade sides.

    Defines whether a trade adds to or reduces a position.
    """

    BUY = "buy"
    SELL = "sell"

    @property
    def is_buy(self) -> bool:
        """Check if side is a buy."""
        return self == self.BUY

    @property
    def is_sell(self) -> bool:
        """Check if side is a sell."""
        return self == self.SELL


class TradeKind(StrEnum):
    """
    Allowed trade record kinds.

    An ``ORDER`` is a recorded intent that has not been filled. It is inert
    data until it becomes a ``TRADE``.
    """

    TRADE = "trade"
    ORDER = "order"

    @property
    def is_executed(self) -> bool:
        """Check if the record is an executed trade."""
        return self == self.TRADE

    @property
    def is_pending(self) -> bool:
        """Check if the record is a pending order."""
        return self == self.ORDER


class CashEventKind(StrEnum):
    """
    Allowed cash movements.

    Deposits add to the cash balance, withdrawals subtract from it.
    """

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"

    @property
    def sign(self) -> float:
        """Direction applied to the event amount."""
        return 1.0 if self == self.DEPOSIT else -1.0


class MarketState(StrEnum):
    """
    Exchange session reported by a quote provider.

    Decides which of the regular, pre-market or post-market prices is current.
    """

    PRE = "PRE"
    REGULAR = "REGULAR"
    POST = "POST"
    POSTPOST = "POSTPOST"
    CLOSED = "CLOSED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: str | None) -> "MarketState":
        """Parse a provider value, falling back to UNKNOWN."""
        try:
            return cls(str(value or "").upper())
        except ValueError:
            return cls.UNKNOWN

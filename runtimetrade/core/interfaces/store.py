"""
Trade and cash-event store interface.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from runtimetrade.core.models.cash import CashEvent, CashEventDraft
from runtimetrade.core.models.trade import TradeDraft, TradeEvent, TradeUpdate


class ITradeStore(ABC):
    """Abstract interface for per-user trade and cash-event persistence.

    Implementations normalize records on ingestion (uppercase ticker,
    lowercase side, default commission for executed trades) and list
    newest first.
    """

    @abstractmethod
    def add_trade(self, user_id: str, draft: TradeDraft) -> TradeEvent:
        """Persist a new trade or pending order."""
        pass

    @abstractmethod
    def list_trades(
        self, user_id: str, start: datetime | None = None, end: datetime | None = None
    ) -> list[TradeEvent]:
        """List trades and orders, newest first, optionally within [start, end]."""
        pass

    @abstractmethod
    def get_trade(self, user_id: str, trade_id: str) -> TradeEvent:
        """Get one trade; raises RecordNotFoundError if missing."""
        pass

    @abstractmethod
    def update_trade(self, user_id: str, trade_id: str, update: TradeUpdate) -> TradeEvent:
        """Replace the provided fields of a trade."""
        pass

    @abstractmethod
    def delete_trade(self, user_id: str, trade_id: str) -> None:
        """Delete a trade or order."""
        pass

    @abstractmethod
    def add_cash_event(self, user_id: str, draft: CashEventDraft) -> CashEvent:
        """Persist a deposit or withdrawal."""
        pass

    @abstractmethod
    def list_cash_events(self, user_id: str) -> list[CashEvent]:
        """List cash events, newest first."""
        pass

    @abstractmethod
    def delete_cash_event(self, user_id: str, event_id: str) -> None:
        """Delete a cash event."""
        pass

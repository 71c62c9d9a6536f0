"""
In-memory trade store.

Dict-backed implementation of ``ITradeStore`` for tests and embedding.
"""

from collections import defaultdict
from datetime import datetime
from threading import RLock

from loguru import logger

from runtimetrade.core.exceptions.portfolio import RecordNotFoundError
from runtimetrade.core.interfaces.store import ITradeStore
from runtimetrade.core.models.cash import CashEvent, CashEventDraft
from runtimetrade.core.models.trade import TradeDraft, TradeEvent, TradeUpdate
from runtimetrade.core.utils.decorators import log_operation

from .records import (
    apply_trade_update,
    build_cash_event,
    build_trade,
    newest_first,
    within_range,
)


class InMemoryTradeStore(ITradeStore):
    """Thread-safe per-user trade and cash-event store held in memory."""

    def __init__(self) -> None:
        self._trades: defaultdict[str, dict[str, TradeEvent]] = defaultdict(dict)
        self._cash_events: defaultdict[str, dict[str, CashEvent]] = defaultdict(dict)
        self._lock = RLock()

    @log_operation
    def add_trade(self, user_id: str, draft: TradeDraft) -> TradeEvent:
        trade = build_trade(draft)
        with self._lock:
            self._trades[user_id][trade.id] = trade
        return trade

    def list_trades(
        self, user_id: str, start: datetime | None = None, end: datetime | None = None
    ) -> list[TradeEvent]:
        with self._lock:
            trades = list(self._trades.get(user_id, {}).values())
        return newest_first(t for t in trades if within_range(t.created_at, start, end))

    def get_trade(self, user_id: str, trade_id: str) -> TradeEvent:
        with self._lock:
            trade = self._trades.get(user_id, {}).get(trade_id)
        if trade is None:
            raise RecordNotFoundError("Trade", trade_id)
        return trade

    @log_operation
    def update_trade(self, user_id: str, trade_id: str, update: TradeUpdate) -> TradeEvent:
        with self._lock:
            updated = apply_trade_update(self.get_trade(user_id, trade_id), update)
            self._trades[user_id][trade_id] = updated
        return updated

    @log_operation
    def delete_trade(self, user_id: str, trade_id: str) -> None:
        with self._lock:
            if self._trades.get(user_id, {}).pop(trade_id, None) is None:
                raise RecordNotFoundError("Trade", trade_id)

    @log_operation
    def add_cash_event(self, user_id: str, draft: CashEventDraft) -> CashEvent:
        event = build_cash_event(draft)
        with self._lock:
            self._cash_events[user_id][event.id] = event
        return event

    def list_cash_events(self, user_id: str) -> list[CashEvent]:
        with self._lock:
            events = list(self._cash_events.get(user_id, {}).values())
        return newest_first(events)

    @log_operation
    def delete_cash_event(self, user_id: str, event_id: str) -> None:
        with self._lock:
            if self._cash_events.get(user_id, {}).pop(event_id, None) is None:
                raise RecordNotFoundError("Cash event", event_id)

    def clear(self) -> None:
        """Remove every record for every user."""
        with self._lock:
            self._trades.clear()
            self._cash_events.clear()
        logger.info("In-memory trade store cleared")

"""
Portfolio dashboard service.

Orchestrates one user's store snapshot, the position engine and the price
board. Every mutation re-reads the store and re-aggregates from scratch;
pricing is reapplied on each read so a new tick never re-derives cost basis.
"""

from datetime import datetime
from threading import RLock

from loguru import logger

from runtimetrade.core.constants import DEFAULT_DISPLAY_CURRENCY, DEFAULT_EXCHANGE_RATE_SYMBOL
from runtimetrade.core.engine import aggregate, price_positions, summarize
from runtimetrade.core.enums import TradeKind, TradeSide
from runtimetrade.core.exceptions.portfolio import OversellError, ValidationError
from runtimetrade.core.interfaces.quotes import IQuoteSource
from runtimetrade.core.interfaces.store import ITradeStore
from runtimetrade.core.models.cash import CashEvent, CashEventDraft
from runtimetrade.core.models.position import LivePosition, Position
from runtimetrade.core.models.summary import PortfolioSummary
from runtimetrade.core.models.trade import TradeDraft, TradeEvent, TradeUpdate, parse_timestamp
from runtimetrade.core.types.financial import ONE, ZERO
from runtimetrade.core.utils.formatting import convert_for_display
from runtimetrade.infrastructure.quotes.feed import PriceBoard

# Tolerance for float noise when comparing a sell against the held quantity
OVERSELL_TOLERANCE = 1e-9


class PortfolioDashboard:
    """Live portfolio view for a single user."""

    def __init__(
        self,
        store: ITradeStore,
        user_id: str,
        price_board: PriceBoard | None = None,
        quote_source: IQuoteSource | None = None,
        allow_oversell: bool = False,
        display_currency: str = DEFAULT_DISPLAY_CURRENCY,
        exchange_rate_symbol: str = DEFAULT_EXCHANGE_RATE_SYMBOL,
    ):
        if not user_id:
            raise ValidationError("user_id cannot be empty")
        self.store = store
        self.user_id = user_id
        self.price_board = price_board if price_board is not None else PriceBoard()
        self.quote_source = quote_source
        self.allow_oversell = allow_oversell
        self.display_currency = display_currency.upper()
        self.exchange_rate_symbol = exchange_rate_symbol
        self.exchange_rate = ONE

        self._lock = RLock()
        self._trades: list[TradeEvent] = []
        self._cash_events: list[CashEvent] = []
        self._positions: list[Position] = []
        self.reload()

    # Snapshot

    def reload(self) -> None:
        """Re-read the store and re-aggregate positions."""
        trades = self.store.list_trades(self.user_id)
        cash_events = self.store.list_cash_events(self.user_id)
        positions = aggregate(trades)
        with self._lock:
            self._trades = trades
            self._cash_events = cash_events
            self._positions = positions
        logger.debug(
            f"Dashboard {self.user_id}: {len(trades)} trades, {len(cash_events)} cash events, "
            f"{len(positions)} positions"
        )

    def _held_shares(self, ticker: str, excluding: str | None = None) -> float:
        with self._lock:
            trades = [t for t in self._trades if t.id != excluding and t.ticker == ticker]
        for position in aggregate(trades):
            return position.shares
        return ZERO

    def _check_oversell(
        self, ticker: str, side: TradeSide, kind: TradeKind, shares: float, excluding: str | None = None
    ) -> None:
        if self.allow_oversell or not side.is_sell or not kind.is_executed:
            return
        held = self._held_shares(ticker, excluding)
        if shares > held + OVERSELL_TOLERANCE:
            raise OversellError(ticker, shares, max(held, ZERO))

    # Mutations

    def add_trade(self, draft: TradeDraft) -> TradeEvent:
        """Record a trade or pending order.

        Raises:
            OversellError: If an executed sell exceeds the held quantity
        """
        self._check_oversell(draft.ticker, TradeSide(draft.side), TradeKind(draft.kind), draft.shares)
        trade = self.store.add_trade(self.user_id, draft)
        self.reload()
        return trade

    def fill_order(self, order_id: str) -> TradeEvent:
        """Turn a pending order into an executed trade.

        Raises:
            ValidationError: If the record is already an executed trade
            OversellError: If filling a sell would exceed the held quantity
        """
        order = self.store.get_trade(self.user_id, order_id)
        if not order.is_pending:
            raise ValidationError(f"Trade {order_id} is not a pending order")
        self._check_oversell(order.ticker, order.side, TradeKind.TRADE, order.shares, excluding=order_id)
        trade = self.store.update_trade(self.user_id, order_id, TradeUpdate(kind=TradeKind.TRADE))
        self.reload()
        return trade

    def update_trade(self, trade_id: str, update: TradeUpdate) -> TradeEvent:
        current = self.store.get_trade(self.user_id, trade_id)
        self._check_oversell(
            update.ticker or current.ticker,
            TradeSide(update.side or current.side),
            TradeKind(update.kind or current.kind),
            update.shares if update.shares is not None else current.shares,
            excluding=trade_id,
        )
        trade = self.store.update_trade(self.user_id, trade_id, update)
        self.reload()
        return trade

    def delete_trade(self, trade_id: str) -> None:
        self.store.delete_trade(self.user_id, trade_id)
        self.reload()

    def add_cash_event(self, draft: CashEventDraft) -> CashEvent:
        event = self.store.add_cash_event(self.user_id, draft)
        self.reload()
        return event

    def delete_cash_event(self, event_id: str) -> None:
        self.store.delete_cash_event(self.user_id, event_id)
        self.reload()

    # Views

    def positions(self) -> list[Position]:
        """All positions, closed and oversold ones included."""
        with self._lock:
            return list(self._positions)

    def live_positions(self, prices: dict[str, float] | None = None) -> list[LivePosition]:
        """Positions valued at ``prices`` (defaults to the price board)."""
        if prices is None:
            prices = self.price_board.snapshot()
        return price_positions(self.positions(), prices)

    def open_positions(self, prices: dict[str, float] | None = None) -> list[LivePosition]:
        return [live for live in self.live_positions(prices) if live.is_open]

    def summary(self, prices: dict[str, float] | None = None) -> PortfolioSummary:
        with self._lock:
            trades = list(self._trades)
            cash_events = list(self._cash_events)
        return summarize(self.live_positions(prices), cash_events, trades)

    def cash_events(self) -> list[CashEvent]:
        with self._lock:
            return list(self._cash_events)

    def pending_orders(self) -> list[TradeEvent]:
        """Pending orders, newest first."""
        with self._lock:
            return [t for t in self._trades if t.is_pending]

    def list_trades(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
        kind: TradeKind | None = None,
    ) -> list[TradeEvent]:
        """Trades and orders created in [start, end], newest first.

        Naive bounds are taken to be UTC so they compare with aware ones.

        Raises:
            ValidationError: If start is after end
        """
        start = parse_timestamp(start) if start is not None else None
        end = parse_timestamp(end) if end is not None else None
        if start is not None and end is not None and start > end:
            raise ValidationError("start must be before or equal to end")
        trades = self.store.list_trades(self.user_id, start, end)
        if kind is not None:
            trades = [t for t in trades if t.kind == kind]
        return trades

    def trade_history(
        self, start: datetime | None = None, end: datetime | None = None
    ) -> list[TradeEvent]:
        """Executed trades in [start, end], newest first."""
        return self.list_trades(start, end, TradeKind.TRADE)

    def symbols(self) -> list[str]:
        """Tickers worth quoting: open positions and pending orders."""
        with self._lock:
            tickers = {p.ticker for p in self._positions if p.is_open}
            tickers.update(t.ticker for t in self._trades if t.is_pending and t.ticker)
        return sorted(tickers)

    # Display currency

    def refresh_exchange_rate(self) -> float:
        """Fetch the USD to display-currency rate, keeping the last good value.

        Falls back to 1.0 when no rate has ever been fetched.
        """
        if self.display_currency == DEFAULT_DISPLAY_CURRENCY or self.quote_source is None:
            return self.exchange_rate
        quote = self.quote_source.fetch_quote(self.exchange_rate_symbol)
        if quote.is_known:
            self.exchange_rate = quote.price
            logger.info(f"Exchange rate {self.exchange_rate_symbol} = {quote.price}")
        else:
            logger.warning(
                f"Exchange rate {self.exchange_rate_symbol} unavailable, using {self.exchange_rate}"
            )
        return self.exchange_rate

    def display_value(self, value: float) -> float:
        """Convert a USD amount into the display currency."""
        if self.display_currency == DEFAULT_DISPLAY_CURRENCY:
            return value
        return convert_for_display(value, self.exchange_rate)

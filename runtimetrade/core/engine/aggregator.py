"""
Position aggregator.

Folds executed trades into one ``Position`` per ticker using a blended
weighted-average cost. Pure and stateless: the same trades in any order
produce identical positions.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field, replace

from loguru import logger

from runtimetrade.core.engine.commission import calculate_commission, effective_commission
from runtimetrade.core.models.position import Position
from runtimetrade.core.models.trade import TradeEvent
from runtimetrade.core.types.financial import ZERO, is_known_price, safe_divide


def is_aggregatable(trade: TradeEvent) -> bool:
    """Check if a trade contributes to positions and cash.

    Pending orders, empty tickers and non-positive (or non-finite) shares
    or prices are excluded.
    """
    return (
        trade.kind.is_executed
        and bool(trade.ticker)
        and is_known_price(trade.shares)
        and is_known_price(trade.price)
    )


def canonical_order(trades: Iterable[TradeEvent]) -> list[TradeEvent]:
    """Sort trades by creation time with deterministic tie-breaks."""
    return sorted(trades, key=TradeEvent.sort_key)


@dataclass
class _TickerLedger:
    """Running totals for one ticker while folding trades."""

    ticker: str
    total_buy_shares: float = ZERO
    total_buy_cost: float = ZERO
    total_sell_shares: float = ZERO
    total_sale_proceeds: float = ZERO
    total_sale_proceeds_before_commission: float = ZERO
    total_commissions_paid: float = ZERO
    trades: list[TradeEvent] = field(default_factory=list)

    def apply(self, trade: TradeEvent) -> None:
        commission = effective_commission(trade)
        gross = trade.gross_value()
        if trade.side.is_buy:
            self.total_buy_shares += trade.shares
            self.total_buy_cost += gross + commission
        else:
            self.total_sell_shares += trade.shares
            self.total_sale_proceeds_before_commission += gross
            self.total_sale_proceeds += gross - commission
        self.total_commissions_paid += commission
        if commission != trade.commission:
            trade = replace(trade, commission=commission)
        self.trades.append(trade)

    def to_position(self) -> Position:
        net_shares = self.total_buy_shares - self.total_sell_shares
        avg_cost = safe_divide(self.total_buy_cost, self.total_buy_shares)

        cost_basis = ZERO
        break_even = ZERO
        if net_shares > ZERO and self.total_buy_shares > ZERO:
            cost_basis = (net_shares / self.total_buy_shares) * self.total_buy_cost
            break_even = (cost_basis + calculate_commission(net_shares)) / net_shares

        realized_cost_basis = ZERO
        realized_proceeds = ZERO
        realized_pnl = ZERO
        sell_avg_price = ZERO
        if self.total_sell_shares > ZERO:
            realized_cost_basis = avg_cost * self.total_sell_shares
            realized_proceeds = self.total_sale_proceeds
            realized_pnl = realized_proceeds - realized_cost_basis
            sell_avg_price = self.total_sale_proceeds / self.total_sell_shares

        return Position(
            ticker=self.ticker,
            shares=net_shares,
            avg_cost_per_share=avg_cost,
            cost_basis=cost_basis,
            break_even_price=break_even,
            realized_pnl=realized_pnl,
            realized_cost_basis=realized_cost_basis,
            realized_proceeds=realized_proceeds,
            sell_avg_price=sell_avg_price,
            total_sell_shares=self.total_sell_shares,
            total_buy_shares=self.total_buy_shares,
            total_buy_cost=self.total_buy_cost,
            total_commissions=self.total_commissions_paid,
            trade_history=tuple(self.trades),
        )


def aggregate(trades: Iterable[TradeEvent]) -> list[Position]:
    """Aggregate executed trades into positions.

    Cost is blended: every buy (commission included) feeds one weighted
    average per ticker, and that average prices every sell ever made.
    Realized P&L is therefore restated retroactively whenever a later buy
    moves the average; no FIFO or LIFO lot tracking is done.

    Args:
        trades: Trade events in any order; orders and invalid rows are skipped

    Returns:
        Positions sorted by ticker, closed and oversold ones included
    """
    ledgers: dict[str, _TickerLedger] = {}
    skipped = 0

    for trade in canonical_order(trades):
        if not is_aggregatable(trade):
            skipped += 1
            logger.debug(
                f"Skipping trade {trade.id or '<no id>'} ({trade.kind}, {trade.ticker!r}, "
                f"shares={trade.shares}, price={trade.price})"
            )
            continue
        ledger = ledgers.get(trade.ticker)
        if ledger is None:
            ledger = ledgers[trade.ticker] = _TickerLedger(trade.ticker)
        ledger.apply(trade)

    positions = [ledgers[ticker].to_position() for ticker in sorted(ledgers)]
    logger.debug(f"Aggregated {len(positions)} positions ({skipped} records skipped)")
    return positions

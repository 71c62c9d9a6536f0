"""
Portfolio summary calculator.

Combines live positions, cash events and executed trades into account-level
totals.
"""

from collections.abc import Iterable

from runtimetrade.core.engine.aggregator import canonical_order, is_aggregatable
from runtimetrade.core.engine.commission import effective_commission
from runtimetrade.core.models.cash import CashEvent
from runtimetrade.core.models.position import LivePosition
from runtimetrade.core.models.summary import PortfolioSummary
from runtimetrade.core.models.trade import TradeEvent
from runtimetrade.core.types.financial import ZERO, percent_of


def trade_cash_flow(trade: TradeEvent) -> float:
    """Cash effect of one trade: sells add net proceeds, buys subtract total cost.

    Returns 0 for pending orders and rows the aggregator would skip.
    """
    if not is_aggregatable(trade):
        return ZERO
    commission = effective_commission(trade)
    if trade.side.is_sell:
        return trade.gross_value() - commission
    return -(trade.gross_value() + commission)


def calculate_cash_balance(
    cash_events: Iterable[CashEvent], trades: Iterable[TradeEvent]
) -> float:
    """Deposits minus withdrawals plus the cash flow of every executed trade.

    Args:
        cash_events: Deposits and withdrawals
        trades: Trade events; pending orders never touch cash

    Returns:
        Cash balance (may be negative)
    """
    events = sorted(cash_events, key=lambda event: (event.created_at, event.id))
    balance = ZERO
    for event in events:
        balance += event.signed_amount
    for trade in canonical_order(trades):
        balance += trade_cash_flow(trade)
    return balance


def summarize(
    live_positions: Iterable[LivePosition],
    cash_events: Iterable[CashEvent] = (),
    trades: Iterable[TradeEvent] = (),
) -> PortfolioSummary:
    """Summarize the account.

    Net liquidation value counts each open position at market value, or at
    cost basis while its price is unknown, plus the cash balance. Realized
    P&L, realized cost basis and commissions include closed positions.

    Args:
        live_positions: Positions valued by ``with_price``
        cash_events: Deposits and withdrawals
        trades: Trade events used for the cash balance

    Returns:
        PortfolioSummary
    """
    cash_balance = calculate_cash_balance(cash_events, trades)

    holdings_value = ZERO
    total_market_value = ZERO
    total_cost_basis = ZERO
    total_unrealized = ZERO
    total_realized = ZERO
    total_realized_basis = ZERO
    total_commissions = ZERO
    position_count = 0

    for live in sorted(live_positions, key=lambda item: item.ticker):
        total_commissions += live.total_commissions
        total_realized += live.realized_pnl
        total_realized_basis += live.realized_cost_basis
        if not live.is_open:
            continue
        position_count += 1
        total_cost_basis += live.cost_basis
        total_market_value += live.market_value
        total_unrealized += live.unrealized_pnl
        holdings_value += live.market_value if live.has_price else live.cost_basis

    return PortfolioSummary(
        net_liquidation_value=holdings_value + cash_balance,
        cash_balance=cash_balance,
        total_market_value=total_market_value,
        total_cost_basis=total_cost_basis,
        total_unrealized_pnl=total_unrealized,
        total_unrealized_pnl_percent=percent_of(total_unrealized, total_cost_basis),
        total_realized_pnl=total_realized,
        total_realized_cost_basis=total_realized_basis,
        total_return_percent=percent_of(
            total_unrealized + total_realized, total_cost_basis + total_realized_basis
        ),
        total_commissions=total_commissions,
        position_count=position_count,
    )

#!/usr/bin/env python3
"""
Portfolio Report

Prints open positions and the account summary for one user of the CSV
store, optionally fetching live quotes once before valuing positions.
"""

import argparse
import sys
from pathlib import Path

from loguru import logger

from runtimetrade.core.config.settings import get_settings
from runtimetrade.core.exceptions.portfolio import PortfolioException
from runtimetrade.core.utils.formatting import format_currency, format_number, format_percent
from runtimetrade.core.utils.logging import setup_logging
from runtimetrade.infrastructure.quotes import PriceBoard, QuoteFeed, YahooQuoteSource
from runtimetrade.infrastructure.store import CSVTradeStore
from runtimetrade.services.dashboard import PortfolioDashboard

HEADER = f"{'Ticker':<8}{'Shares':>12}{'Avg Cost':>14}{'Price':>14}{'Mkt Value':>16}{'Unrl P&L':>16}{'Unrl %':>10}"


def render_report(dashboard: PortfolioDashboard) -> str:
    """Render positions and summary as a fixed-width text report."""
    currency = dashboard.display_currency

    def money(value: float) -> str:
        return format_currency(dashboard.display_value(value), currency)

    lines = [HEADER, "-" * len(HEADER)]
    for live in dashboard.open_positions():
        price = money(live.current_price) if live.has_price else "n/a"
        lines.append(
            f"{live.ticker:<8}{format_number(live.shares, 4):>12}{money(live.avg_cost_per_share):>14}"
            f"{price:>14}{money(live.market_value):>16}{money(live.unrealized_pnl):>16}"
            f"{format_percent(live.unrealized_pnl_percent):>10}"
        )

    summary = dashboard.summary()
    lines += [
        "",
        f"Net liquidation value: {money(summary.net_liquidation_value)}",
        f"Cash balance:          {money(summary.cash_balance)}",
        f"Cost basis (open):     {money(summary.total_cost_basis)}",
        f"Unrealized P&L:        {money(summary.total_unrealized_pnl)} "
        f"({format_percent(summary.total_unrealized_pnl_percent)})",
        f"Realized P&L:          {money(summary.total_realized_pnl)}",
        f"Total return:          {format_percent(summary.total_return_percent)}",
        f"Commissions paid:      {money(summary.total_commissions)}",
        f"Open positions:        {summary.position_count}",
    ]
    return "\n".join(lines)


def main() -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Print positions and P&L for a portfolio",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python portfolio_report.py
  python portfolio_report.py --user alice --live --currency EUR
        """,
    )
    parser.add_argument("--data-dir", type=Path, default=settings.data_dir, help="Store directory")
    parser.add_argument("--user", type=str, default=settings.default_user_id, help="User id")
    parser.add_argument("--live", action="store_true", help="Fetch quotes once before valuing")
    parser.add_argument(
        "--currency",
        choices=["USD", "EUR"],
        default=settings.display_currency,
        help="Display currency (default: USD)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args()
    setup_logging(settings.log_level, debug=args.debug)

    try:
        source = YahooQuoteSource(
            base_url=settings.yahoo_base_url, timeout=settings.quote_request_timeout_seconds
        )
        board = PriceBoard()
        dashboard = PortfolioDashboard(
            CSVTradeStore(args.data_dir),
            args.user,
            price_board=board,
            quote_source=source,
            display_currency=args.currency,
            exchange_rate_symbol=settings.exchange_rate_symbol,
        )
        if args.live:
            feed = QuoteFeed(source, dashboard.symbols)
            feed.add_observer(board)
            feed.poll_once()
            logger.info(f"Fetched prices for {len(board)} of {len(dashboard.symbols())} symbols")
        dashboard.refresh_exchange_rate()
    except PortfolioException as e:
        logger.error(f"Report failed: {e}")
        return 1

    print(render_report(dashboard))
    return 0


if __name__ == "__main__":
    sys.exit(main())

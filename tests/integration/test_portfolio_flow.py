"""
Integration tests for the portfolio flow on the CSV store.

Import a broker export, trade through the dashboard, restart from disk and
render the report.
"""

from datetime import UTC, datetime
from pathlib import Path

import pytest

from runtimetrade.core.models.cash import CashEventDraft
from runtimetrade.core.models.trade import TradeDraft
from runtimetrade.infrastructure.store import CSVTradeStore
from runtimetrade.services.dashboard import PortfolioDashboard
from scripts.import_trades import load_trades
from scripts.portfolio_report import HEADER, render_report


class TestPortfolioFlow:
    """End-to-end tests across store, engine and dashboard."""

    @pytest.fixture
    def data_dir(self, tmp_path: Path) -> Path:
        return tmp_path / "data"

    def test_should_rebuild_identical_state_after_restart(self, data_dir: Path) -> None:
        """Test positions derived from disk match the live session."""
        dashboard = PortfolioDashboard(CSVTradeStore(data_dir), "alice")
        dashboard.add_cash_event(CashEventDraft(kind="deposit", amount=1000))
        dashboard.add_trade(
            TradeDraft(ticker="ACME", side="buy", shares=100, price=10,
                       created_at=datetime(2024, 1, 2, tzinfo=UTC))
        )
        dashboard.add_trade(
            TradeDraft(ticker="ACME", side="sell", shares=40, price=12,
                       created_at=datetime(2024, 1, 3, tzinfo=UTC))
        )
        before = dashboard.summary({"ACME": 12.0})

        restarted = PortfolioDashboard(CSVTradeStore(data_dir), "alice")
        after = restarted.summary({"ACME": 12.0})

        assert after == before
        assert after.net_liquidation_value == pytest.approx(1198.0)
        assert restarted.positions()[0].break_even_price == pytest.approx(601.6 / 60)

    def test_should_aggregate_imported_trades_in_time_order(
        self, tmp_path: Path, data_dir: Path
    ) -> None:
        """Test an unordered broker export aggregates by execution time."""
        export = tmp_path / "export.csv"
        export.write_text(
            "symbol,side,quantity,price,date\n"
            "ACME,sell,40,12,2024-01-03T15:00:00Z\n"
            "ACME,buy,100,10,2024-01-02T15:00:00Z\n"
        )
        trades, errors = load_trades(export)
        store = CSVTradeStore(data_dir)
        store.insert_trades("alice", trades)

        position = PortfolioDashboard(store, "alice").positions()[0]

        assert errors == []
        assert position.shares == 60
        assert position.realized_pnl == pytest.approx(78.6)
        assert not position.is_oversold

    def test_should_render_report(self, data_dir: Path) -> None:
        """Test the text report lists open positions and totals."""
        dashboard = PortfolioDashboard(CSVTradeStore(data_dir), "alice")
        dashboard.add_trade(TradeDraft(ticker="ACME", side="buy", shares=100, price=10))
        dashboard.price_board.set_price("ACME", 12.0)

        report = render_report(dashboard)

        assert report.startswith(HEADER)
        assert "ACME" in report
        assert "$1,200.00" in report
        assert "Open positions:        1" in report

"""
Unit tests for the in-memory trade store and the shared ingestion rules.
"""

from datetime import UTC, datetime

import pytest

from runtimetrade.core.enums import CashEventKind, TradeKind, TradeSide
from runtimetrade.core.exceptions.portfolio import RecordNotFoundError
from runtimetrade.core.models.cash import CashEventDraft
from runtimetrade.core.models.trade import TradeDraft, TradeUpdate
from runtimetrade.infrastructure.store import InMemoryTradeStore


@pytest.fixture
def store() -> InMemoryTradeStore:
    return InMemoryTradeStore()


def _draft(**overrides: object) -> TradeDraft:
    values: dict[str, object] = {
        "ticker": "aapl",
        "side": "BUY",
        "shares": 100,
        "price": 10,
        "created_at": datetime(2024, 1, 2, tzinfo=UTC),
    }
    values.update(overrides)
    return TradeDraft(**values)  # type: ignore[arg-type]


class TestTradeIngestion:
    """Test suite for normalization on add."""

    def test_should_normalize_and_assign_model_commission(self, store: InMemoryTradeStore) -> None:
        """Test executed trades without commission get the model value."""
        trade = store.add_trade("alice", _draft())

        assert trade.ticker == "AAPL"
        assert trade.side == TradeSide.BUY
        assert trade.kind == TradeKind.TRADE
        assert trade.commission == 1.0
        assert len(trade.id) == 32

    def test_should_replace_zero_commission_on_executed_trade(
        self, store: InMemoryTradeStore
    ) -> None:
        """Test a zero commission is treated as missing."""
        trade = store.add_trade("alice", _draft(shares=1000, commission=0))
        assert trade.commission == pytest.approx(5.0)

    def test_should_keep_explicit_commission(self, store: InMemoryTradeStore) -> None:
        """Test a positive commission is stored unchanged."""
        trade = store.add_trade("alice", _draft(commission=2.5))
        assert trade.commission == 2.5

    def test_should_leave_order_commission_at_zero(self, store: InMemoryTradeStore) -> None:
        """Test pending orders without commission keep 0."""
        order = store.add_trade("alice", _draft(kind="order"))

        assert order.kind == TradeKind.ORDER
        assert order.commission == 0.0


class TestTradeQueries:
    """Test suite for listing and lookup."""

    def test_should_list_newest_first(self, store: InMemoryTradeStore) -> None:
        """Test descending created_at order."""
        older = store.add_trade("alice", _draft(created_at=datetime(2024, 1, 1, tzinfo=UTC)))
        newer = store.add_trade("alice", _draft(created_at=datetime(2024, 3, 1, tzinfo=UTC)))

        assert [t.id for t in store.list_trades("alice")] == [newer.id, older.id]

    def test_should_filter_inclusive_date_range(self, store: InMemoryTradeStore) -> None:
        """Test start and end bounds are inclusive."""
        store.add_trade("alice", _draft(created_at=datetime(2024, 1, 1, tzinfo=UTC)))
        middle = store.add_trade("alice", _draft(created_at=datetime(2024, 2, 1, tzinfo=UTC)))
        store.add_trade("alice", _draft(created_at=datetime(2024, 3, 1, tzinfo=UTC)))

        trades = store.list_trades(
            "alice",
            start=datetime(2024, 2, 1, tzinfo=UTC),
            end=datetime(2024, 2, 1, tzinfo=UTC),
        )

        assert [t.id for t in trades] == [middle.id]

    def test_should_isolate_users(self, store: InMemoryTradeStore) -> None:
        """Test one user's trades are invisible to another."""
        store.add_trade("alice", _draft())

        assert store.list_trades("bob") == []

    def test_should_raise_for_missing_trade(self, store: InMemoryTradeStore) -> None:
        """Test lookup of unknown ids."""
        with pytest.raises(RecordNotFoundError, match="Trade not found: nope"):
            store.get_trade("alice", "nope")


class TestTradeMutations:
    """Test suite for update, fill and delete."""

    def test_should_rederive_commission_when_shares_change(
        self, store: InMemoryTradeStore
    ) -> None:
        """Test a derived commission follows the new share count."""
        trade = store.add_trade("alice", _draft())

        updated = store.update_trade("alice", trade.id, TradeUpdate(shares=1000))

        assert updated.shares == 1000
        assert updated.commission == pytest.approx(5.0)

    def test_should_keep_explicit_commission_on_update(self, store: InMemoryTradeStore) -> None:
        """Test an entered commission survives a share change."""
        trade = store.add_trade("alice", _draft(commission=3.0))

        updated = store.update_trade("alice", trade.id, TradeUpdate(shares=1000))

        assert updated.commission == 3.0

    def test_should_assign_commission_when_order_is_filled(
        self, store: InMemoryTradeStore
    ) -> None:
        """Test filling an order applies the commission model."""
        order = store.add_trade("alice", _draft(kind="order"))

        filled = store.update_trade("alice", order.id, TradeUpdate(kind="trade"))

        assert filled.kind == TradeKind.TRADE
        assert filled.commission == 1.0
        assert store.get_trade("alice", order.id) == filled

    def test_should_delete_trade(self, store: InMemoryTradeStore) -> None:
        """Test deletion and repeated deletion."""
        trade = store.add_trade("alice", _draft())

        store.delete_trade("alice", trade.id)

        assert store.list_trades("alice") == []
        with pytest.raises(RecordNotFoundError):
            store.delete_trade("alice", trade.id)

    def test_should_raise_when_updating_missing_trade(self, store: InMemoryTradeStore) -> None:
        """Test update of unknown ids."""
        with pytest.raises(RecordNotFoundError):
            store.update_trade("alice", "missing", TradeUpdate(price=5))


class TestCashEvents:
    """Test suite for deposits and withdrawals."""

    def test_should_add_list_and_delete_cash_events(self, store: InMemoryTradeStore) -> None:
        """Test the cash event lifecycle."""
        deposit = store.add_cash_event(
            "alice",
            CashEventDraft(kind="deposit", amount=1000, created_at=datetime(2024, 1, 1, tzinfo=UTC)),
        )
        withdrawal = store.add_cash_event(
            "alice",
            CashEventDraft(kind="WITHDRAWAL", amount=200, description=" rent "),
        )

        events = store.list_cash_events("alice")
        assert [e.id for e in events] == [withdrawal.id, deposit.id]
        assert withdrawal.kind == CashEventKind.WITHDRAWAL
        assert withdrawal.description == "rent"

        store.delete_cash_event("alice", deposit.id)
        assert [e.id for e in store.list_cash_events("alice")] == [withdrawal.id]

    def test_should_raise_for_missing_cash_event(self, store: InMemoryTradeStore) -> None:
        """Test deleting unknown cash events."""
        with pytest.raises(RecordNotFoundError, match="Cash event not found"):
            store.delete_cash_event("alice", "missing")

    def test_should_clear_everything(self, store: InMemoryTradeStore) -> None:
        """Test clear removes all users' records."""
        store.add_trade("alice", _draft())
        store.add_cash_event("bob", CashEventDraft(kind="deposit", amount=5))

        store.clear()

        assert store.list_trades("alice") == []
        assert store.list_cash_events("bob") == []

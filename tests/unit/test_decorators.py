"""
Unit tests for utility decorators.
Testing operation logging with correlation ids.
"""

from unittest.mock import Mock, patch

import pytest

from runtimetrade.core.enums import TradeSide
from runtimetrade.core.exceptions.portfolio import RecordNotFoundError
from runtimetrade.core.models.trade import TradeDraft
from runtimetrade.core.utils.decorators import log_operation


class FakeStore:
    """Minimal object with decorated methods."""

    @log_operation
    def add_trade(self, user_id: str, draft: TradeDraft) -> str:
        return f"{user_id}:{draft.ticker}"

    @log_operation
    def delete_trade(self, user_id: str, trade_id: str) -> None:
        raise RecordNotFoundError("Trade", trade_id)


class TestLogOperationDecorator:
    """Test suite for log_operation decorator."""

    @patch("runtimetrade.core.utils.decorators.logger")
    def test_should_log_function_entry_and_success(self, mock_logger: Mock) -> None:
        """Test successful calls log start and completion."""
        draft = TradeDraft(ticker="aapl", side="buy", shares=10, price=5.0)

        result = FakeStore().add_trade("alice", draft)

        assert result == "alice:AAPL"
        bound = mock_logger.bind.return_value
        assert bound.debug.call_count == 1
        assert bound.info.call_count == 1
        assert "FakeStore.add_trade" in bound.info.call_args[0][0]
        assert "'alice:AAPL'" in bound.info.call_args[0][0]

    @patch("runtimetrade.core.utils.decorators.logger")
    def test_should_bind_trade_context(self, mock_logger: Mock) -> None:
        """Test identifiers and draft fields are bound to the log record."""
        draft = TradeDraft(ticker="msft", side="sell", shares=1, price=5.0)

        FakeStore().add_trade("bob", draft)

        context = mock_logger.bind.call_args[1]
        assert context["user_id"] == "bob"
        assert context["ticker"] == "MSFT"
        assert context["side"] == TradeSide.SELL.value
        assert len(context["correlation_id"]) == 8

    @patch("runtimetrade.core.utils.decorators.logger")
    def test_should_log_function_failure_and_reraise(self, mock_logger: Mock) -> None:
        """Test failures are logged and propagated."""
        with pytest.raises(RecordNotFoundError):
            FakeStore().delete_trade("alice", "missing")

        bound = mock_logger.bind.return_value
        assert bound.error.call_count == 1
        assert bound.info.call_count == 0
        assert "RecordNotFoundError" in bound.error.call_args[0][0]

    @patch("runtimetrade.core.utils.decorators.logger")
    def test_should_generate_unique_correlation_ids(self, mock_logger: Mock) -> None:
        """Test each call gets its own correlation id."""
        store = FakeStore()
        draft = TradeDraft(ticker="a", side="buy", shares=1, price=1.0)

        store.add_trade("u", draft)
        store.add_trade("u", draft)

        first = mock_logger.bind.call_args_list[0][1]["correlation_id"]
        second = mock_logger.bind.call_args_list[1][1]["correlation_id"]
        assert first != second

    def test_should_preserve_function_metadata(self) -> None:
        """Test functools.wraps keeps the name."""
        assert FakeStore.add_trade.__name__ == "add_trade"

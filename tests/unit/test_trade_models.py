"""
Unit tests for trade, cash-event and quote models.
"""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from runtimetrade.core.enums import CashEventKind, MarketState, TradeKind, TradeSide
from runtimetrade.core.exceptions.portfolio import ValidationError
from runtimetrade.core.models.cash import CashEvent, CashEventDraft
from runtimetrade.core.models.quote import Quote
from runtimetrade.core.models.trade import (
    TradeDraft,
    TradeEvent,
    TradeUpdate,
    parse_timestamp,
)


class TestParseTimestamp:
    """Test suite for timestamp coercion."""

    def test_should_parse_iso_string_with_z(self) -> None:
        """Test Zulu suffix."""
        assert parse_timestamp("2024-03-01T14:30:00Z") == datetime(2024, 3, 1, 14, 30, tzinfo=UTC)

    def test_should_treat_naive_values_as_utc(self) -> None:
        """Test naive datetimes get UTC."""
        assert parse_timestamp(datetime(2024, 3, 1)).tzinfo == UTC

    def test_should_convert_offsets_to_utc(self) -> None:
        """Test offset-aware values are normalized."""
        eastern = datetime(2024, 3, 1, 9, 30, tzinfo=timezone(timedelta(hours=-5)))
        assert parse_timestamp(eastern) == datetime(2024, 3, 1, 14, 30, tzinfo=UTC)

    def test_should_parse_epoch_seconds(self) -> None:
        """Test numeric timestamps."""
        assert parse_timestamp(0) == datetime(1970, 1, 1, tzinfo=UTC)

    @pytest.mark.parametrize("value", ["not a date", "", None, True])
    def test_should_reject_invalid_values(self, value: object) -> None:
        """Test unparseable timestamps raise ValidationError."""
        with pytest.raises(ValidationError):
            parse_timestamp(value)


class TestTradeEventFromRecord:
    """Test suite for loose store rows."""

    def test_should_normalize_ticker_and_side(self) -> None:
        """Test uppercase ticker and lowercase side."""
        trade = TradeEvent.from_record(
            {"id": 7, "ticker": " aapl ", "side": "BUY", "shares": "100", "price": "10.5"}
        )

        assert trade.id == "7"
        assert trade.ticker == "AAPL"
        assert trade.side == TradeSide.BUY
        assert trade.shares == 100.0
        assert trade.price == 10.5
        assert trade.kind == TradeKind.TRADE

    def test_should_default_missing_numbers_to_zero(self) -> None:
        """Test missing or bad numbers do not raise."""
        trade = TradeEvent.from_record({"id": "x", "ticker": "A", "side": "sell", "shares": "abc"})
        assert trade.shares == 0.0
        assert trade.price == 0.0
        assert trade.commission == 0.0

    def test_should_accept_legacy_order_type_key(self) -> None:
        """Test order_type maps to kind."""
        trade = TradeEvent.from_record(
            {"id": "o", "ticker": "A", "side": "buy", "shares": 1, "price": 1, "order_type": "order"}
        )
        assert trade.is_pending

    def test_should_reject_unknown_side(self) -> None:
        """Test side must be buy or sell."""
        with pytest.raises(ValidationError):
            TradeEvent.from_record({"id": "x", "ticker": "A", "side": "short"})

    def test_should_round_trip_through_record(self) -> None:
        """Test to_record output is accepted by from_record."""
        original = TradeEvent(
            id="t1",
            ticker="MSFT",
            side=TradeSide.SELL,
            shares=5.0,
            price=300.0,
            commission=1.0,
            kind=TradeKind.ORDER,
            created_at=datetime(2024, 1, 2, tzinfo=UTC),
        )
        assert TradeEvent.from_record(original.to_record()) == original


class TestTradeDraft:
    """Test suite for boundary validation of new trades."""

    def test_should_normalize_valid_draft(self) -> None:
        """Test normalization of ticker, side and kind."""
        draft = TradeDraft(ticker="tsla", side="Sell", shares="3", price=200, kind="ORDER")

        assert draft.ticker == "TSLA"
        assert draft.side == TradeSide.SELL
        assert draft.kind == TradeKind.ORDER
        assert draft.shares == 3.0
        assert draft.commission is None

    @pytest.mark.parametrize(
        "overrides",
        [
            {"ticker": ""},
            {"ticker": "   "},
            {"side": "hold"},
            {"shares": 0},
            {"shares": -1},
            {"shares": float("nan")},
            {"price": 0},
            {"commission": -0.5},
            {"kind": "limit"},
        ],
    )
    def test_should_reject_invalid_fields(self, overrides: dict) -> None:
        """Test each invalid field raises ValidationError."""
        fields = {"ticker": "AAPL", "side": "buy", "shares": 10, "price": 10.0, **overrides}
        with pytest.raises(ValidationError):
            TradeDraft(**fields)

    def test_should_accept_zero_commission(self) -> None:
        """Test zero is a valid explicit commission."""
        assert TradeDraft(ticker="A", side="buy", shares=1, price=1, commission=0).commission == 0.0


class TestTradeUpdate:
    """Test suite for partial updates."""

    def test_should_collect_only_provided_fields(self) -> None:
        """Test changes() omits None fields."""
        update = TradeUpdate(price=12.5, kind="trade")
        assert update.changes() == {"price": 12.5, "kind": TradeKind.TRADE}
        assert not update.is_empty()

    def test_should_detect_empty_update(self) -> None:
        """Test an update with nothing set."""
        assert TradeUpdate().is_empty()

    def test_should_validate_provided_fields(self) -> None:
        """Test updates use draft rules."""
        with pytest.raises(ValidationError):
            TradeUpdate(shares=-3)


class TestCashModels:
    """Test suite for cash events."""

    def test_should_sign_amounts(self) -> None:
        """Test deposits are positive and withdrawals negative."""
        assert CashEvent(id="1", kind=CashEventKind.DEPOSIT, amount=100).signed_amount == 100
        assert CashEvent(id="2", kind=CashEventKind.WITHDRAWAL, amount=40).signed_amount == -40

    def test_should_validate_draft(self) -> None:
        """Test amount must be positive and kind known."""
        with pytest.raises(ValidationError):
            CashEventDraft(kind="deposit", amount=0)
        with pytest.raises(ValidationError):
            CashEventDraft(kind="transfer", amount=10)

    def test_should_normalize_draft(self) -> None:
        """Test kind parsing and description trimming."""
        draft = CashEventDraft(kind="Withdrawal", amount="25", description="  rent  ")
        assert draft.kind == CashEventKind.WITHDRAWAL
        assert draft.amount == 25.0
        assert draft.description == "rent"

    def test_should_build_from_record(self) -> None:
        """Test loose rows with a legacy type key."""
        event = CashEvent.from_record(
            {"id": "c", "type": "deposit", "amount": "10", "created_at": "2024-01-01T00:00:00+00:00"}
        )
        assert event.kind == CashEventKind.DEPOSIT
        assert event.amount == 10.0
        assert event.description == ""


class TestQuote:
    """Test suite for quote values."""

    def test_should_report_known_price(self) -> None:
        """Test positive prices are known."""
        assert Quote(symbol="AAPL", price=190.0).is_known

    def test_should_build_unknown_quote(self) -> None:
        """Test the unknown factory."""
        quote = Quote.unknown("AAPL", "yahoo_error", "timeout")
        assert not quote.is_known
        assert quote.price == 0.0
        assert quote.error == "timeout"
        assert quote.market_state == MarketState.UNKNOWN

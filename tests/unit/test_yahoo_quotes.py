"""
Unit tests for the Yahoo Finance quote source.
"""

from typing import Any
from unittest.mock import Mock

import pytest
import requests

from runtimetrade.core.enums import MarketState
from runtimetrade.infrastructure.quotes import YahooQuoteSource, select_session_price


def _chart(meta: dict[str, Any]) -> dict[str, Any]:
    return {"chart": {"result": [{"meta": meta}], "error": None}}


def _session(payload: Any = None, error: Exception | None = None) -> Mock:
    session = Mock()
    response = Mock()
    response.json.return_value = payload
    if error is not None:
        session.get.side_effect = error
    session.get.return_value = response
    return session


class TestSelectSessionPrice:
    """Test suite for session-aware price selection."""

    def test_should_prefer_pre_market_price_before_open(self) -> None:
        """Test PRE uses the pre-market price."""
        meta = {"marketState": "PRE", "regularMarketPrice": 100.0, "preMarketPrice": 101.5}
        assert select_session_price(meta) == (101.5, "pre-market", MarketState.PRE)

    def test_should_fall_back_to_regular_without_pre_market_price(self) -> None:
        """Test PRE without a pre-market price."""
        meta = {"marketState": "PRE", "regularMarketPrice": 100.0}
        assert select_session_price(meta) == (100.0, "regular", MarketState.PRE)

    @pytest.mark.parametrize("state", ["POST", "POSTPOST"])
    def test_should_prefer_post_market_price_after_close(self, state: str) -> None:
        """Test POST and POSTPOST use the post-market price."""
        meta = {"marketState": state, "regularMarketPrice": 100.0, "postMarketPrice": 99.0}
        price, price_type, _ = select_session_price(meta)
        assert (price, price_type) == (99.0, "post-market")

    def test_should_use_regular_price_during_session(self) -> None:
        """Test REGULAR ignores extended-hours prices."""
        meta = {
            "marketState": "REGULAR",
            "regularMarketPrice": 100.0,
            "preMarketPrice": 98.0,
            "postMarketPrice": 97.0,
        }
        assert select_session_price(meta) == (100.0, "regular", MarketState.REGULAR)

    def test_should_return_zero_without_any_price(self) -> None:
        """Test missing prices give 0."""
        assert select_session_price({"marketState": "CLOSED"})[0] == 0.0


class TestYahooQuoteSource:
    """Test suite for YahooQuoteSource."""

    def test_should_fetch_and_parse_quote(self) -> None:
        """Test a successful chart response."""
        session = _session(_chart({"marketState": "REGULAR", "regularMarketPrice": 187.25}))
        source = YahooQuoteSource(base_url="https://example.test/chart/", session=session)

        quote = source.fetch_quote("aapl")

        assert quote.symbol == "AAPL"
        assert quote.price == 187.25
        assert quote.is_known
        assert quote.source == "yahoo_regular"
        assert quote.market_state == MarketState.REGULAR
        session.get.assert_called_once_with(
            "https://example.test/chart/AAPL",
            params={"interval": "1d", "range": "1d", "includePrePost": "true"},
            timeout=source.timeout,
        )

    def test_should_return_unknown_quote_on_http_error(self) -> None:
        """Test network failures never raise."""
        session = _session(error=requests.exceptions.ConnectionError("boom"))

        quote = YahooQuoteSource(session=session).fetch_quote("AAPL")

        assert not quote.is_known
        assert quote.price == 0.0
        assert quote.source == "yahoo_error"
        assert "boom" in (quote.error or "")

    def test_should_return_unknown_quote_on_http_status(self) -> None:
        """Test raise_for_status failures."""
        session = _session({})
        session.get.return_value.raise_for_status.side_effect = requests.exceptions.HTTPError("404")

        quote = YahooQuoteSource(session=session).fetch_quote("NOPE")

        assert quote.source == "yahoo_error"

    def test_should_return_unknown_quote_on_chart_error(self) -> None:
        """Test provider error payloads."""
        payload = {"chart": {"result": None, "error": {"description": "No data found"}}}

        quote = YahooQuoteSource(session=_session(payload)).fetch_quote("NOPE")

        assert quote.source == "yahoo_no_price"
        assert quote.error == "No data found"

    def test_should_return_unknown_quote_without_price(self) -> None:
        """Test payloads with no usable price."""
        payload = _chart({"marketState": "REGULAR", "regularMarketPrice": None})

        quote = YahooQuoteSource(session=_session(payload)).fetch_quote("AAPL")

        assert not quote.is_known
        assert quote.source == "yahoo_no_price"

    def test_should_return_unknown_quote_on_invalid_json(self) -> None:
        """Test undecodable responses."""
        session = _session()
        session.get.return_value.json.side_effect = ValueError("bad json")

        quote = YahooQuoteSource(session=session).fetch_quote("AAPL")

        assert quote.error == "invalid JSON response"

    def test_should_fetch_several_symbols(self) -> None:
        """Test fetch_quotes keys results by symbol."""
        session = _session(_chart({"marketState": "REGULAR", "regularMarketPrice": 10.0}))

        quotes = YahooQuoteSource(session=session).fetch_quotes(["AAPL", "MSFT", "AAPL"])

        assert set(quotes) == {"AAPL", "MSFT"}
        assert session.get.call_count == 2

"""
Yahoo Finance quote source.

Fetches the chart endpoint and picks the price that matches the current
session: pre-market before the open, post-market after the close and the
regular price otherwise.
"""

from typing import Any

import requests
from loguru import logger

from runtimetrade.core.constants import DEFAULT_QUOTE_TIMEOUT_SECONDS, DEFAULT_YAHOO_BASE_URL
from runtimetrade.core.enums import MarketState
from runtimetrade.core.exceptions.portfolio import QuoteError
from runtimetrade.core.interfaces.quotes import IQuoteSource
from runtimetrade.core.models.quote import Quote
from runtimetrade.core.types.financial import ZERO, is_known_price, to_float
from runtimetrade.core.utils.validation import normalize_ticker

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def select_session_price(meta: dict[str, Any]) -> tuple[float, str, MarketState]:
    """Pick the current price from a Yahoo quote payload.

    Returns:
        Tuple of (price, price type, market state); price is 0 if none found
    """
    state = MarketState.parse(meta.get("marketState"))
    regular = to_float(meta.get("regularMarketPrice"))
    pre = to_float(meta.get("preMarketPrice"))
    post = to_float(meta.get("postMarketPrice"))

    if state == MarketState.PRE:
        candidates = [(pre, "pre-market"), (regular, "regular")]
    elif state in (MarketState.POST, MarketState.POSTPOST):
        candidates = [(post, "post-market"), (regular, "regular")]
    else:
        candidates = [(regular, "regular"), (pre, "regular"), (post, "regular")]

    for price, price_type in candidates:
        if is_known_price(price):
            return price, price_type, state
    return ZERO, "regular", state


class YahooQuoteSource(IQuoteSource):
    """Quote source backed by the public Yahoo Finance chart API."""

    name = "yahoo"

    def __init__(
        self,
        base_url: str = DEFAULT_YAHOO_BASE_URL,
        timeout: float = DEFAULT_QUOTE_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})

    def build_quote_url(self, symbol: str) -> str:
        return f"{self.base_url}/{symbol}"

    def fetch_quote(self, symbol: str) -> Quote:
        """Fetch a quote; failures are logged and returned as unknown quotes."""
        symbol = normalize_ticker(symbol)
        if not symbol:
            return Quote.unknown(symbol, f"{self.name}_error", "empty symbol")
        try:
            meta = self._fetch_meta(symbol)
            price, price_type, state = select_session_price(meta)
            if not is_known_price(price):
                raise QuoteError(symbol, "no price in quote")
        except QuoteError as e:
            logger.warning(f"[Yahoo] {e}")
            return Quote.unknown(symbol, f"{self.name}_no_price", e.reason)
        except requests.exceptions.RequestException as e:
            logger.error(f"[Yahoo] Error fetching {symbol}: {e}")
            return Quote.unknown(symbol, f"{self.name}_error", str(e))

        logger.debug(f"[Yahoo] {symbol}: price={price} ({price_type})")
        return Quote(
            symbol=symbol,
            price=price,
            source=f"{self.name}_{price_type}",
            market_state=state,
        )

    def _fetch_meta(self, symbol: str) -> dict[str, Any]:
        response = self.session.get(
            self.build_quote_url(symbol),
            params={"interval": "1d", "range": "1d", "includePrePost": "true"},
            timeout=self.timeout,
        )
        response.raise_for_status()
        try:
            payload = response.json()
        except ValueError as e:
            raise QuoteError(symbol, "invalid JSON response") from e

        chart = payload.get("chart") if isinstance(payload, dict) else None
        if not isinstance(chart, dict):
            raise QuoteError(symbol, "missing chart payload")
        if chart.get("error"):
            error = chart["error"]
            description = error.get("description") if isinstance(error, dict) else error
            raise QuoteError(symbol, str(description))
        results = chart.get("result") or []
        if not results or not isinstance(results[0], dict):
            raise QuoteError(symbol, "empty chart result")
        meta = results[0].get("meta")
        if not isinstance(meta, dict):
            raise QuoteError(symbol, "missing quote metadata")
        return meta

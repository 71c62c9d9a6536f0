"""
Quote feed adapters.
"""

from runtimetrade.core.models.quote import Quote

from .caching import CachingQuoteSource
from .feed import PriceBoard, QuoteFeed, QuoteObserver
from .yahoo import YahooQuoteSource, select_session_price

__all__ = [
    "Quote",
    "YahooQuoteSource",
    "CachingQuoteSource",
    "QuoteFeed",
    "QuoteObserver",
    "PriceBoard",
    "select_session_price",
]

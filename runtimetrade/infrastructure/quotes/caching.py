"""
Caching quote source decorator.
"""

from threading import RLock

from cachetools import TTLCache
from loguru import logger

from runtimetrade.core.constants import DEFAULT_QUOTE_CACHE_TTL_SECONDS
from runtimetrade.core.interfaces.quotes import IQuoteSource
from runtimetrade.core.models.quote import Quote
from runtimetrade.core.utils.validation import normalize_ticker


class CachingQuoteSource(IQuoteSource):
    """Wraps a quote source and reuses known quotes for ``ttl`` seconds.

    Unknown quotes are never cached so the next poll retries the provider.
    """

    DEFAULT_CACHE_SIZE = 256

    def __init__(
        self,
        source: IQuoteSource,
        ttl: float = DEFAULT_QUOTE_CACHE_TTL_SECONDS,
        maxsize: int = DEFAULT_CACHE_SIZE,
    ):
        if maxsize <= 0:
            raise ValueError("Cache size must be positive")
        self.source = source
        self.name = f"cached_{source.name}"
        self._cache: TTLCache[str, Quote] = TTLCache(maxsize=maxsize, ttl=ttl)
        self._cache_lock = RLock()
        self.hits = 0
        self.misses = 0

    def fetch_quote(self, symbol: str) -> Quote:
        key = normalize_ticker(symbol)
        with self._cache_lock:
            cached = self._cache.get(key)
            if cached is not None:
                self.hits += 1
                logger.debug(f"Quote cache hit for {key}")
                return cached
            self.misses += 1

        quote = self.source.fetch_quote(key)
        if quote.is_known:
            with self._cache_lock:
                self._cache[key] = quote
        return quote

    def clear(self) -> None:
        with self._cache_lock:
            self._cache.clear()

"""
Quote feed and price board.

``QuoteFeed`` polls a quote source on a background thread and notifies
observers of every quote. ``PriceBoard`` is the observer that keeps the last
known price per ticker for the live metrics step.
"""

import threading
import weakref
from collections.abc import Callable, Iterable
from threading import RLock
from typing import Protocol

from loguru import logger

from runtimetrade.core.constants import DEFAULT_QUOTE_POLL_SECONDS, MIN_QUOTE_POLL_SECONDS
from runtimetrade.core.interfaces.quotes import IQuoteSource
from runtimetrade.core.models.quote import Quote
from runtimetrade.core.utils.validation import normalize_ticker


class QuoteObserver(Protocol):
    """Protocol for quote observers."""

    def notify(self, quote: Quote) -> None:
        """Handle a polled quote."""
        ...


class QuoteSubject:
    """Subject class implementing the Observer Pattern for quotes."""

    def __init__(self) -> None:
        """Initialize subject with observer management using weak references."""
        self._observers: weakref.WeakSet[QuoteObserver] = weakref.WeakSet()
        self._observers_lock = RLock()

    def add_observer(self, observer: QuoteObserver) -> None:
        with self._observers_lock:
            self._observers.add(observer)
            logger.debug(f"Added quote observer: {type(observer).__name__}")

    def remove_observer(self, observer: QuoteObserver) -> None:
        with self._observers_lock:
            self._observers.discard(observer)
            logger.debug(f"Removed quote observer: {type(observer).__name__}")

    def notify_observers(self, quote: Quote) -> None:
        """Notify all observers; a failing observer does not stop the others."""
        with self._observers_lock:
            observers_copy = list(self._observers)
        for observer in observers_copy:
            try:
                observer.notify(quote)
            except Exception as e:
                logger.error(f"Quote observer {type(observer).__name__} failed: {e}")


class PriceBoard:
    """Thread-safe map of ticker to last known price.

    Unknown quotes are ignored so a failed poll never wipes a good price.
    """

    def __init__(self) -> None:
        self._prices: dict[str, float] = {}
        self._quotes: dict[str, Quote] = {}
        self._lock = RLock()

    def notify(self, quote: Quote) -> None:
        self.update(quote)

    def update(self, quote: Quote) -> bool:
        """Record a quote. Returns True if the price was stored."""
        if not quote.is_known:
            return False
        symbol = normalize_ticker(quote.symbol)
        with self._lock:
            self._prices[symbol] = quote.price
            self._quotes[symbol] = quote
        return True

    def set_price(self, ticker: str, price: float) -> bool:
        """Record a manually entered price."""
        return self.update(Quote(symbol=ticker, price=price, source="manual"))

    def get(self, ticker: str) -> float | None:
        with self._lock:
            return self._prices.get(normalize_ticker(ticker))

    def quote(self, ticker: str) -> Quote | None:
        with self._lock:
            return self._quotes.get(normalize_ticker(ticker))

    def snapshot(self) -> dict[str, float]:
        """Copy of all known prices."""
        with self._lock:
            return dict(self._prices)

    def clear(self) -> None:
        with self._lock:
            self._prices.clear()
            self._quotes.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._prices)


class QuoteFeed(QuoteSubject):
    """Polls quotes for a changing set of symbols on a background thread."""

    def __init__(
        self,
        source: IQuoteSource,
        symbols: Callable[[], Iterable[str]],
        interval: float = DEFAULT_QUOTE_POLL_SECONDS,
    ):
        super().__init__()
        if interval < MIN_QUOTE_POLL_SECONDS:
            raise ValueError(f"Poll interval must be at least {MIN_QUOTE_POLL_SECONDS}s")
        self.source = source
        self.symbols = symbols
        self.interval = interval
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._lifecycle_lock = RLock()
        self.poll_count = 0

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def poll_once(self) -> dict[str, Quote]:
        """Fetch quotes for the current symbols and notify observers."""
        try:
            symbols = sorted({normalize_ticker(s) for s in self.symbols()} - {""})
        except Exception as e:
            logger.error(f"Quote feed symbol provider failed: {e}")
            return {}
        if not symbols:
            return {}

        quotes = self.source.fetch_quotes(symbols)
        for quote in quotes.values():
            if not quote.is_known:
                logger.warning(f"Quote unknown for {quote.symbol}: {quote.error or quote.source}")
            self.notify_observers(quote)
        self.poll_count += 1
        known = sum(1 for q in quotes.values() if q.is_known)
        logger.debug(f"Polled {len(quotes)} quotes ({known} known)")
        return quotes

    def start(self) -> None:
        """Start polling in a daemon thread; no-op if already running."""
        with self._lifecycle_lock:
            if self.is_running:
                return
            self._stop_event.clear()
            self._thread = threading.Thread(target=self._run, name="quote-feed", daemon=True)
            self._thread.start()
        logger.info(f"Quote feed started (every {self.interval:g}s via {self.source.name})")

    def stop(self, timeout: float | None = 5.0) -> None:
        """Signal the polling thread to stop and wait for it."""
        with self._lifecycle_lock:
            thread = self._thread
            self._stop_event.set()
            self._thread = None
        if thread is not None:
            thread.join(timeout)
            logger.info("Quote feed stopped")

    def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.poll_once()
            except Exception as e:
                logger.error(f"Quote feed poll failed: {e}")
            self._stop_event.wait(self.interval)

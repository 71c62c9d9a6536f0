"""
Quote source interface.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from runtimetrade.core.models.quote import Quote


class IQuoteSource(ABC):
    """Abstract interface for market quote providers.

    Implementations never raise for provider failures; they return
    ``Quote.unknown`` instead.
    """

    name: str = "quotes"

    @abstractmethod
    def fetch_quote(self, symbol: str) -> Quote:
        """Fetch the current quote for one symbol."""
        pass

    def fetch_quotes(self, symbols: Iterable[str]) -> dict[str, Quote]:
        """Fetch quotes for several symbols, keyed by symbol."""
        return {symbol: self.fetch_quote(symbol) for symbol in dict.fromkeys(symbols)}

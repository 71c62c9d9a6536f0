"""
Custom exception hierarchy for the portfolio dashboard.

This module defines domain-specific exceptions raised at the store, quote
and API boundaries. The position engine itself never raises.
"""


class PortfolioException(Exception):
    """Base exception for all portfolio-related errors."""

    pass


class ValidationError(PortfolioException):
    """Raised when input validation fails."""

    pass


class ConfigurationError(PortfolioException):
    """Raised when configuration is invalid."""

    pass


class StoreError(PortfolioException):
    """Raised when trade or cash-event persistence fails."""

    pass


class QuoteError(PortfolioException):
    """Raised when a quote cannot be fetched or parsed."""

    def __init__(self, symbol: str, reason: str):
        self.symbol = symbol
        self.reason = reason
        super().__init__(f"Quote unavailable for {symbol}: {reason}")


class RecordNotFoundError(StoreError):
    """Raised when trying to operate on a non-existent store record."""

    def __init__(self, record_type: str, record_id: str):
        self.record_type = record_type
        self.record_id = record_id
        super().__init__(f"{record_type} not found: {record_id}")


class OversellError(ValidationError):
    """Raised when a sell exceeds the shares currently held."""

    def __init__(self, ticker: str, requested: float, held: float):
        self.ticker = ticker
        self.requested = requested
        self.held = held
        super().__init__(
            f"Cannot sell {requested:g} shares of {ticker}: only {held:g} held"
        )

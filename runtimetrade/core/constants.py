"""
Core constants and limits.

Defines the commission schedule, quote polling defaults and store layout
shared by the engine, the store and the quote feed.
"""

# Commission schedule ($0.005/share, $1 minimum per trade)
COMMISSION_PER_SHARE = 0.005
COMMISSION_MINIMUM = 1.0

# Trade Limits
MAX_TICKER_LENGTH = 16  # Longest accepted ticker symbol (e.g. "BRK-B", "EUR=X")
MAX_TRADE_SHARES = 10_000_000  # Largest single trade accepted at the store boundary

# Quote Feed
DEFAULT_QUOTE_POLL_SECONDS = 30.0  # Yahoo rate limit friendly polling interval
DEFAULT_QUOTE_CACHE_TTL_SECONDS = 15.0
DEFAULT_QUOTE_TIMEOUT_SECONDS = 10.0
DEFAULT_YAHOO_BASE_URL = "https://query1.finance.yahoo.com/v8/finance/chart"
MIN_QUOTE_POLL_SECONDS = 1.0

# Display
DEFAULT_DISPLAY_CURRENCY = "USD"
DEFAULT_EXCHANGE_RATE_SYMBOL = "EUR=X"  # USD -> EUR
DEFAULT_EXCHANGE_RATE_POLL_SECONDS = 30.0
SUPPORTED_DISPLAY_CURRENCIES = ("USD", "EUR")

# Store Layout
TRADES_FILE_NAME = "trades.csv"
CASH_EVENTS_FILE_NAME = "cash_events.csv"
STORE_CACHE_SIZE = 8  # Cached DataFrames per CSV store
DEFAULT_USER_ID = "local"

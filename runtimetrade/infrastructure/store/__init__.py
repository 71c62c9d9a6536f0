"""
Trade and cash-event stores.
"""

from .csv_store import CSVTradeStore
from .csv_validator import StoreCSVValidator
from .memory_store import InMemoryTradeStore

__all__ = ["CSVTradeStore", "InMemoryTradeStore", "StoreCSVValidator"]

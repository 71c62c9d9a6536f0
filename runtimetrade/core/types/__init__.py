"""
Core type definitions and utilities.
"""

# Re-export financial utilities for easy access
from .financial import (
    HUNDRED,
    ONE,
    ZERO,
    is_known_price,
    percent_of,
    safe_divide,
    to_float,
)

__all__ = [
    # Utility functions
    "to_float",
    "is_known_price",
    "safe_divide",
    "percent_of",
    # Constants
    "ZERO",
    "ONE",
    "HUNDRED",
]

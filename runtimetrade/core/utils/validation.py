"""
Validation utilities for trade and cash-event input.

Provides consistent validation at the store and API boundaries. The position
engine does not use these; it filters invalid rows silently instead.
"""

import math
from typing import Any

from runtimetrade.core.constants import MAX_TICKER_LENGTH, MAX_TRADE_SHARES
from runtimetrade.core.exceptions.portfolio import ValidationError


def normalize_ticker(ticker: Any) -> str:
    """Normalize a ticker to stripped uppercase text.

    Returns an empty string for None so callers can decide whether that is
    an error.
    """
    if ticker is None:
        return ""
    return str(ticker).strip().upper()


def validate_ticker(ticker: Any, param_name: str = "ticker") -> str:
    """Validate and normalize a ticker symbol.

    Args:
        ticker: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The normalized uppercase ticker

    Raises:
        ValidationError: If ticker is empty, too long or contains whitespace
    """
    normalized = normalize_ticker(ticker)
    if not normalized:
        raise ValidationError(f"{param_name} must not be empty")
    if len(normalized) > MAX_TICKER_LENGTH:
        raise ValidationError(
            f"{param_name} must be at most {MAX_TICKER_LENGTH} characters, got {normalized!r}"
        )
    if any(char.isspace() for char in normalized):
        raise ValidationError(f"{param_name} must not contain whitespace, got {normalized!r}")
    return normalized


def _validate_number(value: Any, param_name: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{param_name} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{param_name} must be a number, got {value!r}") from e
    if not math.isfinite(number):
        raise ValidationError(f"{param_name} must be finite, got {value!r}")
    return number


def validate_positive(value: Any, param_name: str) -> float:
    """Validate that a numeric value is positive.

    Args:
        value: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The validated value as float

    Raises:
        ValidationError: If value is not a finite positive number
    """
    number = _validate_number(value, param_name)
    if number <= 0:
        raise ValidationError(f"{param_name} must be positive, got {value}")
    return number


def validate_non_negative(value: Any, param_name: str) -> float:
    """Validate that a numeric value is zero or positive.

    Raises:
        ValidationError: If value is not a finite non-negative number
    """
    number = _validate_number(value, param_name)
    if number < 0:
        raise ValidationError(f"{param_name} must be non-negative, got {value}")
    return number


def validate_shares(value: Any, param_name: str = "shares") -> float:
    """Validate a share quantity (positive and below the sanity limit)."""
    shares = validate_positive(value, param_name)
    if shares > MAX_TRADE_SHARES:
        raise ValidationError(f"{param_name} must be at most {MAX_TRADE_SHARES:,}, got {value}")
    return shares

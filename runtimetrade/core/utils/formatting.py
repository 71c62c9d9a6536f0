"""
Display formatting helpers.

Currency conversion happens only here, at display time. The engine always
works in the account's base currency (USD).
"""

import math

from runtimetrade.core.types.financial import ONE, ZERO, is_known_price

CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€"}


def _finite(value: float | None) -> float:
    if value is None or not isinstance(value, int | float) or not math.isfinite(value):
        return ZERO
    return float(value)


def format_currency(value: float | None, currency: str = "USD", decimals: int = 2) -> str:
    """Format a money amount, e.g. ``-$1,234.50``.

    Non-numeric, NaN and infinite values render as zero.

    Examples:
        >>> format_currency(1234.5)
        '$1,234.50'
        >>> format_currency(-3, "EUR")
        '-€3.00'
    """
    amount = _finite(value)
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), f"{currency.upper()} ")
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.{decimals}f}"


def format_number(value: float | None, decimals: int = 2) -> str:
    """Format a number with thousands separators."""
    return f"{_finite(value):,.{decimals}f}"


def format_percent(value: float | None, decimals: int = 2) -> str:
    """Format a percentage value (5.5 means 5.5%)."""
    return f"{_finite(value):.{decimals}f}%"


def pnl_direction(value: float | None) -> str:
    """Classify a P&L figure as ``"profit"``, ``"loss"`` or ``"flat"``."""
    amount = _finite(value)
    if amount > 0:
        return "profit"
    if amount < 0:
        return "loss"
    return "flat"


def convert_for_display(value: float, rate: float | None) -> float:
    """Convert a USD amount with ``rate`` (USD -> display currency).

    An unknown rate falls back to 1.0.
    """
    return value * (rate if is_known_price(rate) else ONE)  # type: ignore[operator]

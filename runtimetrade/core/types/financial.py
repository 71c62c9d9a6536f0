"""
Financial number helpers for position and P&L calculations.

Values are plain floats. Share counts and prices entered by a user carry a
handful of decimals, so float64 keeps well inside its ~15 significant digits
for a personal portfolio.

IMPORTANT PRECISION CONSIDERATIONS:
- Never divide directly; use ``safe_divide`` so zero denominators yield 0
  instead of ``ZeroDivisionError``, NaN or Infinity
- Rounding is a display concern; the engine keeps full precision
"""

import math

# Common financial values as float constants
ZERO = 0.0
ONE = 1.0
HUNDRED = 100.0


def to_float(value: str | int | float | None, default: float = ZERO) -> float:
    """Convert loosely typed store values to float.

    Args:
        value: Numeric value, numeric string, or None
        default: Value returned when conversion is impossible or not finite

    Returns:
        Float representation of the value, or ``default``

    Examples:
        >>> to_float("1.5")
        1.5
        >>> to_float(None)
        0.0
        >>> to_float("abc")
        0.0
        >>> to_float("inf")
        0.0
    """
    if value is None:
        return default
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    return result if math.isfinite(result) else default


def is_known_price(price: float | None) -> bool:
    """Return True when ``price`` is a usable positive market price.

    Zero, negative, None and NaN all mean "unknown", never "worthless".
    """
    if price is None:
        return False
    try:
        return math.isfinite(price) and price > ZERO
    except TypeError:
        return False


def safe_divide(numerator: float, denominator: float) -> float:
    """Divide, returning 0 when the denominator is zero or not finite.

    Args:
        numerator: Dividend
        denominator: Divisor

    Returns:
        ``numerator / denominator`` or 0.0
    """
    if denominator == ZERO or not math.isfinite(denominator):
        return ZERO
    return numerator / denominator


def percent_of(value: float, base: float) -> float:
    """Express ``value`` as a percentage of ``base`` (0 when base is 0)."""
    return safe_divide(value, base) * HUNDRED

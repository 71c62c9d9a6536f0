"""
Live metrics calculator.

Values positions at a market price without re-deriving cost basis. Runs on
every price tick.
"""

from collections.abc import Iterable, Mapping

from runtimetrade.core.models.position import LivePosition, Position
from runtimetrade.core.types.financial import ZERO, is_known_price, percent_of


def with_price(position: Position, price: float | None) -> LivePosition:
    """Value a position at ``price``.

    An unknown price (None, NaN, zero or negative) never falls back to
    average cost: market value and unrealized figures are 0 and
    ``current_price`` is reported as 0. Positions that are not open are
    likewise reported with zero market value.

    Args:
        position: Aggregated position
        price: Last market price, or None if unknown

    Returns:
        LivePosition wrapping ``position``
    """
    if not is_known_price(price):
        return LivePosition(position=position, current_price=ZERO)

    current_price = float(price)  # type: ignore[arg-type]
    if position.shares <= ZERO:
        return LivePosition(position=position, current_price=current_price)

    market_value = position.shares * current_price
    unrealized_pnl = market_value - position.cost_basis
    return LivePosition(
        position=position,
        current_price=current_price,
        market_value=market_value,
        unrealized_pnl=unrealized_pnl,
        unrealized_pnl_percent=percent_of(unrealized_pnl, position.cost_basis),
    )


def price_positions(
    positions: Iterable[Position], prices: Mapping[str, float]
) -> list[LivePosition]:
    """Apply ``with_price`` to each position; missing tickers are unknown."""
    return [with_price(position, prices.get(position.ticker)) for position in positions]

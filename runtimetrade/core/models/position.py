"""
Position domain models.

``Position`` is derived from executed trades and recomputed wholesale on every
aggregation. ``LivePosition`` joins a position with a market price.
"""

from dataclasses import dataclass, field

from runtimetrade.core.models.trade import TradeEvent
from runtimetrade.core.types.financial import ZERO


@dataclass(frozen=True)
class Position:
    """Aggregated holding in a single ticker.

    ``shares`` is signed: bought minus sold. A negative value means more was
    sold than recorded as bought and is surfaced as-is.
    """

    ticker: str
    shares: float = ZERO
    avg_cost_per_share: float = ZERO
    cost_basis: float = ZERO
    break_even_price: float = ZERO
    realized_pnl: float = ZERO
    realized_cost_basis: float = ZERO
    realized_proceeds: float = ZERO
    sell_avg_price: float = ZERO
    total_sell_shares: float = ZERO
    total_buy_shares: float = ZERO
    total_buy_cost: float = ZERO
    total_commissions: float = ZERO
    trade_history: tuple[TradeEvent, ...] = field(default=(), compare=False, repr=False)

    @property
    def is_open(self) -> bool:
        return self.shares > ZERO

    @property
    def is_oversold(self) -> bool:
        return self.shares < ZERO


@dataclass(frozen=True)
class LivePosition:
    """A position valued at a market price.

    ``current_price`` is 0 when the price is unknown; market value and
    unrealized figures are then 0 as well.
    """

    position: Position
    current_price: float = ZERO
    market_value: float = ZERO
    unrealized_pnl: float = ZERO
    unrealized_pnl_percent: float = ZERO

    @property
    def has_price(self) -> bool:
        return self.current_price > ZERO

    @property
    def ticker(self) -> str:
        return self.position.ticker

    @property
    def shares(self) -> float:
        return self.position.shares

    @property
    def avg_cost_per_share(self) -> float:
        return self.position.avg_cost_per_share

    @property
    def cost_basis(self) -> float:
        return self.position.cost_basis

    @property
    def break_even_price(self) -> float:
        return self.position.break_even_price

    @property
    def realized_pnl(self) -> float:
        return self.position.realized_pnl

    @property
    def realized_cost_basis(self) -> float:
        return self.position.realized_cost_basis

    @property
    def realized_proceeds(self) -> float:
        return self.position.realized_proceeds

    @property
    def sell_avg_price(self) -> float:
        return self.position.sell_avg_price

    @property
    def total_sell_shares(self) -> float:
        return self.position.total_sell_shares

    @property
    def total_commissions(self) -> float:
        return self.position.total_commissions

    @property
    def trade_history(self) -> tuple[TradeEvent, ...]:
        return self.position.trade_history

    @property
    def is_open(self) -> bool:
        return self.position.is_open

"""
Portfolio summary model.
"""

from dataclasses import asdict, dataclass

from runtimetrade.core.types.financial import ZERO


@dataclass(frozen=True)
class PortfolioSummary:
    """Account-level totals across every position and cash event.

    Realized figures and commissions cover closed positions too; cost basis,
    market value and unrealized figures cover open positions only.
    """

    net_liquidation_value: float = ZERO
    cash_balance: float = ZERO
    total_market_value: float = ZERO
    total_cost_basis: float = ZERO
    total_unrealized_pnl: float = ZERO
    total_unrealized_pnl_percent: float = ZERO
    total_realized_pnl: float = ZERO
    total_realized_cost_basis: float = ZERO
    total_return_percent: float = ZERO
    total_commissions: float = ZERO
    position_count: int = 0

    @property
    def total_pnl(self) -> float:
        """Realized plus unrealized P&L."""
        return self.total_realized_pnl + self.total_unrealized_pnl

    def to_dict(self) -> dict[str, float | int]:
        return asdict(self)

"""
What-if profit analysis.

Projects the outcome of selling a holding at a target price, charging the
commission model on both the buy and the sell.
"""

from dataclasses import asdict, dataclass

from runtimetrade.core.engine.commission import calculate_commission
from runtimetrade.core.types.financial import HUNDRED, ONE, percent_of
from runtimetrade.core.utils.validation import validate_positive

ONE_CENT = 0.01
ONE_PERCENT = 0.01


@dataclass(frozen=True)
class CostBasis:
    """Cost of acquiring a holding including the buy commission."""

    gross_cost: float
    buy_commission: float
    total_cost_basis: float
    cost_basis_per_share: float


@dataclass(frozen=True)
class ProfitAnalysis:
    """Projected P&L of selling ``shares`` at ``target_price``."""

    shares: float
    avg_price: float
    target_price: float
    cost_basis_per_share: float
    buy_commission: float
    total_cost_basis: float
    market_value: float
    gross_pnl: float
    net_pnl: float
    gross_pnl_percent: float
    net_pnl_percent: float
    sell_commission: float
    break_even_price: float
    profit_per_1_cent: float
    profit_per_1_percent_move: float

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


def calculate_cost_basis(shares: float, avg_price: float) -> CostBasis:
    """Cost basis of buying ``shares`` at ``avg_price``.

    Raises:
        ValidationError: If shares or avg_price is not positive
    """
    shares = validate_positive(shares, "shares")
    avg_price = validate_positive(avg_price, "avg_price")
    buy_commission = calculate_commission(shares)
    gross_cost = shares * avg_price
    total_cost_basis = gross_cost + buy_commission
    return CostBasis(
        gross_cost=gross_cost,
        buy_commission=buy_commission,
        total_cost_basis=total_cost_basis,
        cost_basis_per_share=total_cost_basis / shares,
    )


def calculate_profit_analysis(
    shares: float, avg_price: float, target_price: float
) -> ProfitAnalysis:
    """Project P&L for selling a holding at ``target_price``.

    Gross P&L is after the buy commission; net P&L also deducts the sell
    commission. Break-even covers both commissions.

    Args:
        shares: Shares held
        avg_price: Average buy price per share, before commission
        target_price: Hypothetical sell price

    Returns:
        ProfitAnalysis

    Raises:
        ValidationError: If shares or avg_price is not positive
    """
    basis = calculate_cost_basis(shares, avg_price)
    shares = float(shares)
    avg_price = float(avg_price)
    target_price = float(target_price)

    market_value = shares * target_price
    sell_commission = calculate_commission(shares)
    gross_pnl = market_value - basis.total_cost_basis
    net_pnl = gross_pnl - sell_commission

    return ProfitAnalysis(
        shares=shares,
        avg_price=avg_price,
        target_price=target_price,
        cost_basis_per_share=basis.cost_basis_per_share,
        buy_commission=basis.buy_commission,
        total_cost_basis=basis.total_cost_basis,
        market_value=market_value,
        gross_pnl=gross_pnl,
        net_pnl=net_pnl,
        gross_pnl_percent=percent_of(gross_pnl, basis.total_cost_basis),
        net_pnl_percent=percent_of(net_pnl, basis.total_cost_basis),
        sell_commission=sell_commission,
        break_even_price=(basis.total_cost_basis + sell_commission) / shares,
        profit_per_1_cent=shares * ONE_CENT - sell_commission,
        profit_per_1_percent_move=shares * avg_price * ONE_PERCENT - sell_commission,
    )


def calculate_dollar_move(shares: float, avg_price: float, dollar_move: float) -> ProfitAnalysis:
    """Profit analysis at ``avg_price + dollar_move``."""
    return calculate_profit_analysis(shares, avg_price, avg_price + dollar_move)


def calculate_percentage_move(
    shares: float, avg_price: float, percent_move: float
) -> ProfitAnalysis:
    """Profit analysis after a ``percent_move`` % change (5 means +5%)."""
    return calculate_profit_analysis(shares, avg_price, avg_price * (ONE + percent_move / HUNDRED))

"""
Pydantic schemas for API request/response models.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from runtimetrade.core.constants import MAX_TICKER_LENGTH, MAX_TRADE_SHARES
from runtimetrade.core.engine.analysis import ProfitAnalysis
from runtimetrade.core.enums import CashEventKind, TradeKind, TradeSide
from runtimetrade.core.models.cash import CashEvent, CashEventDraft
from runtimetrade.core.models.position import LivePosition
from runtimetrade.core.models.summary import PortfolioSummary
from runtimetrade.core.models.trade import TradeDraft, TradeEvent, TradeUpdate


def _clean_ticker(value: str) -> str:
    ticker = value.strip().upper()
    if not ticker:
        raise ValueError("ticker must not be empty")
    return ticker


class TradeCreateRequest(BaseModel):
    """Request model for recording a trade or pending order."""

    ticker: str = Field(..., max_length=MAX_TICKER_LENGTH, description="Ticker symbol")
    side: TradeSide = Field(..., description="buy or sell")
    shares: float = Field(..., gt=0, le=MAX_TRADE_SHARES, description="Share count")
    price: float = Field(..., gt=0, description="Price per share")
    commission: float | None = Field(
        default=None, ge=0, description="Commission paid; omitted means the default schedule"
    )
    kind: TradeKind = Field(default=TradeKind.TRADE, description="trade (executed) or order (pending)")
    created_at: datetime | None = Field(default=None, description="Execution time, defaults to now")
    currency: str = Field(default="USD", min_length=3, max_length=3)

    @field_validator("ticker")
    @classmethod
    def validate_ticker(cls, v: str) -> str:
        return _clean_ticker(v)

    def to_draft(self) -> TradeDraft:
        return TradeDraft(
            ticker=self.ticker,
            side=self.side,
            shares=self.shares,
            price=self.price,
            commission=self.commission,
            kind=self.kind,
            created_at=self.created_at,
            currency=self.currency,
        )


class TradeUpdateRequest(BaseModel):
    """Request model for editing a trade; omitted fields stay unchanged."""

    ticker: str | None = Field(default=None, max_length=MAX_TICKER_LENGTH)
    side: TradeSide | None = None
    shares: float | None = Field(default=None, gt=0, le=MAX_TRADE_SHARES)
    price: float | None = Field(default=None, gt=0)
    commission: float | None = Field(default=None, ge=0)
    kind: TradeKind | None = None
    created_at: datetime | None = None

    @field_validator("ticker")
    @classmethod
    def validate_ticker(cls, v: str | None) -> str | None:
        return None if v is None else _clean_ticker(v)

    def to_update(self) -> TradeUpdate:
        return TradeUpdate(**self.model_dump())


class TradeSchema(BaseModel):
    """Response model for a stored trade or order."""

    id: str
    ticker: str
    side: TradeSide
    shares: float
    price: float
    commission: float
    kind: TradeKind
    created_at: datetime
    currency: str
    gross_value: float

    @classmethod
    def from_event(cls, trade: TradeEvent) -> "TradeSchema":
        return cls(
            id=trade.id,
            ticker=trade.ticker,
            side=trade.side,
            shares=trade.shares,
            price=trade.price,
            commission=trade.commission,
            kind=trade.kind,
            created_at=trade.created_at,
            currency=trade.currency,
            gross_value=trade.gross_value(),
        )


class CashEventCreateRequest(BaseModel):
    """Request model for a deposit or withdrawal."""

    kind: CashEventKind
    amount: float = Field(..., gt=0)
    description: str = Field(default="", max_length=200)
    created_at: datetime | None = None

    def to_draft(self) -> CashEventDraft:
        return CashEventDraft(
            kind=self.kind,
            amount=self.amount,
            description=self.description,
            created_at=self.created_at,
        )


class CashEventSchema(BaseModel):
    """Response model for a stored cash event."""

    id: str
    kind: CashEventKind
    amount: float
    signed_amount: float
    description: str
    created_at: datetime

    @classmethod
    def from_event(cls, event: CashEvent) -> "CashEventSchema":
        return cls(
            id=event.id,
            kind=event.kind,
            amount=event.amount,
            signed_amount=event.signed_amount,
            description=event.description,
            created_at=event.created_at,
        )


class PositionSchema(BaseModel):
    """Response model for a priced position."""

    ticker: str
    shares: float
    avg_cost_per_share: float
    cost_basis: float
    break_even_price: float
    current_price: float
    market_value: float
    unrealized_pnl: float
    unrealized_pnl_percent: float
    realized_pnl: float
    realized_cost_basis: float
    realized_proceeds: float
    sell_avg_price: float
    total_sell_shares: float
    total_commissions: float
    trade_count: int

    @classmethod
    def from_live(cls, live: LivePosition) -> "PositionSchema":
        return cls(
            ticker=live.ticker,
            shares=live.shares,
            avg_cost_per_share=live.avg_cost_per_share,
            cost_basis=live.cost_basis,
            break_even_price=live.break_even_price,
            current_price=live.current_price,
            market_value=live.market_value,
            unrealized_pnl=live.unrealized_pnl,
            unrealized_pnl_percent=live.unrealized_pnl_percent,
            realized_pnl=live.realized_pnl,
            realized_cost_basis=live.realized_cost_basis,
            realized_proceeds=live.realized_proceeds,
            sell_avg_price=live.sell_avg_price,
            total_sell_shares=live.total_sell_shares,
            total_commissions=live.total_commissions,
            trade_count=len(live.trade_history),
        )


class SummarySchema(BaseModel):
    """Response model for the portfolio summary."""

    net_liquidation_value: float
    cash_balance: float
    total_market_value: float
    total_cost_basis: float
    total_unrealized_pnl: float
    total_unrealized_pnl_percent: float
    total_realized_pnl: float
    total_realized_cost_basis: float
    total_return_percent: float
    total_commissions: float
    position_count: int

    @classmethod
    def from_summary(cls, summary: PortfolioSummary) -> "SummarySchema":
        return cls(**summary.to_dict())


class PricesUpdateRequest(BaseModel):
    """Request model for pushing manual prices."""

    prices: dict[str, float] = Field(..., description="Ticker to last price")

    @field_validator("prices")
    @classmethod
    def validate_prices(cls, v: dict[str, float]) -> dict[str, float]:
        return {_clean_ticker(ticker): price for ticker, price in v.items()}


class PricesResponse(BaseModel):
    """Response model for known prices."""

    prices: dict[str, float]
    rejected: list[str] = Field(default_factory=list)


class AnalysisRequest(BaseModel):
    """Request model for a what-if profit analysis.

    Exactly one of ``target_price``, ``dollar_move`` or ``percent_move``
    must be given.
    """

    shares: float = Field(..., gt=0)
    avg_price: float = Field(..., gt=0)
    target_price: float | None = None
    dollar_move: float | None = None
    percent_move: float | None = None

    @model_validator(mode="after")
    def validate_single_scenario(self) -> "AnalysisRequest":
        given = [v for v in (self.target_price, self.dollar_move, self.percent_move) if v is not None]
        if len(given) != 1:
            raise ValueError("Provide exactly one of target_price, dollar_move, percent_move")
        return self


class AnalysisResponse(BaseModel):
    """Response model for a what-if profit analysis."""

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

    @classmethod
    def from_analysis(cls, analysis: ProfitAnalysis) -> "AnalysisResponse":
        return cls(**analysis.to_dict())


class ErrorResponse(BaseModel):
    """Response model for errors."""

    error: str
    message: str
    details: dict | None = None

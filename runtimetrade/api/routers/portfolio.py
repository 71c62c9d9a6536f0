"""
Portfolio API endpoints: positions, summary, orders, prices and analysis.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, Request

from runtimetrade.core.engine.analysis import (
    calculate_dollar_move,
    calculate_percentage_move,
    calculate_profit_analysis,
)
from runtimetrade.services.dashboard import PortfolioDashboard

from ..dependencies import get_dashboard
from ..schemas.api_models import (
    AnalysisRequest,
    AnalysisResponse,
    PositionSchema,
    PricesResponse,
    PricesUpdateRequest,
    SummarySchema,
    TradeSchema,
)

router = APIRouter()


@router.get("/positions", response_model=list[PositionSchema])
def get_positions(
    include_closed: bool = Query(default=False, description="Include closed and oversold positions"),
    dashboard: PortfolioDashboard = Depends(get_dashboard),
) -> list[PositionSchema]:
    """Positions valued at the last known prices."""
    positions = dashboard.live_positions() if include_closed else dashboard.open_positions()
    return [PositionSchema.from_live(live) for live in positions]


@router.get("/summary", response_model=SummarySchema)
def get_summary(dashboard: PortfolioDashboard = Depends(get_dashboard)) -> SummarySchema:
    return SummarySchema.from_summary(dashboard.summary())


@router.get("/orders", response_model=list[TradeSchema])
def get_pending_orders(dashboard: PortfolioDashboard = Depends(get_dashboard)) -> list[TradeSchema]:
    return [TradeSchema.from_event(order) for order in dashboard.pending_orders()]


@router.get("/history", response_model=list[TradeSchema])
def get_trade_history(
    start: datetime | None = Query(default=None),
    end: datetime | None = Query(default=None),
    dashboard: PortfolioDashboard = Depends(get_dashboard),
) -> list[TradeSchema]:
    """Executed trades in the date range, newest first."""
    return [TradeSchema.from_event(t) for t in dashboard.trade_history(start, end)]


@router.get("/prices", response_model=PricesResponse)
def get_prices(request: Request) -> PricesResponse:
    return PricesResponse(prices=request.app.state.price_board.snapshot())


@router.put("/prices", response_model=PricesResponse)
def push_prices(body: PricesUpdateRequest, request: Request) -> PricesResponse:
    """Record manual prices; non-positive prices are rejected as unknown."""
    board = request.app.state.price_board
    rejected = [ticker for ticker, price in body.prices.items() if not board.set_price(ticker, price)]
    return PricesResponse(prices=board.snapshot(), rejected=sorted(rejected))


@router.post("/analysis", response_model=AnalysisResponse)
def analyze(body: AnalysisRequest) -> AnalysisResponse:
    """What-if P&L for selling a holding at a target price or after a move."""
    if body.target_price is not None:
        analysis = calculate_profit_analysis(body.shares, body.avg_price, body.target_price)
    elif body.dollar_move is not None:
        analysis = calculate_dollar_move(body.shares, body.avg_price, body.dollar_move)
    else:
        analysis = calculate_percentage_move(body.shares, body.avg_price, body.percent_move or 0.0)
    return AnalysisResponse.from_analysis(analysis)

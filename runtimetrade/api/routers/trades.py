"""
Trade and order API endpoints.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, Response, status

from runtimetrade.core.enums import TradeKind
from runtimetrade.core.exceptions.portfolio import ValidationError
from runtimetrade.services.dashboard import PortfolioDashboard

from ..dependencies import get_dashboard
from ..schemas.api_models import TradeCreateRequest, TradeSchema, TradeUpdateRequest

router = APIRouter()


@router.get("/", response_model=list[TradeSchema])
def list_trades(
    start: datetime | None = Query(default=None, description="Earliest created_at (inclusive)"),
    end: datetime | None = Query(default=None, description="Latest created_at (inclusive)"),
    kind: TradeKind | None = Query(default=None, description="Only trades or only orders"),
    dashboard: PortfolioDashboard = Depends(get_dashboard),
) -> list[TradeSchema]:
    """List trades and orders, newest first."""
    return [TradeSchema.from_event(t) for t in dashboard.list_trades(start, end, kind)]


@router.post("/", response_model=TradeSchema, status_code=status.HTTP_201_CREATED)
def create_trade(
    request: TradeCreateRequest, dashboard: PortfolioDashboard = Depends(get_dashboard)
) -> TradeSchema:
    """Record a trade or a pending order."""
    return TradeSchema.from_event(dashboard.add_trade(request.to_draft()))


@router.get("/{trade_id}", response_model=TradeSchema)
def get_trade(trade_id: str, dashboard: PortfolioDashboard = Depends(get_dashboard)) -> TradeSchema:
    return TradeSchema.from_event(dashboard.store.get_trade(dashboard.user_id, trade_id))


@router.patch("/{trade_id}", response_model=TradeSchema)
def update_trade(
    trade_id: str,
    request: TradeUpdateRequest,
    dashboard: PortfolioDashboard = Depends(get_dashboard),
) -> TradeSchema:
    """Edit a trade; omitted fields are left unchanged."""
    update = request.to_update()
    if update.is_empty():
        raise ValidationError("No fields to update")
    return TradeSchema.from_event(dashboard.update_trade(trade_id, update))


@router.post("/{trade_id}/fill", response_model=TradeSchema)
def fill_order(trade_id: str, dashboard: PortfolioDashboard = Depends(get_dashboard)) -> TradeSchema:
    """Mark a pending order as executed."""
    return TradeSchema.from_event(dashboard.fill_order(trade_id))


@router.delete("/{trade_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_trade(trade_id: str, dashboard: PortfolioDashboard = Depends(get_dashboard)) -> Response:
    dashboard.delete_trade(trade_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""
Cash event API endpoints.
"""

from fastapi import APIRouter, Depends, Response, status

from runtimetrade.services.dashboard import PortfolioDashboard

from ..dependencies import get_dashboard
from ..schemas.api_models import CashEventCreateRequest, CashEventSchema

router = APIRouter()


@router.get("/", response_model=list[CashEventSchema])
def list_cash_events(dashboard: PortfolioDashboard = Depends(get_dashboard)) -> list[CashEventSchema]:
    """List deposits and withdrawals, newest first."""
    return [CashEventSchema.from_event(event) for event in dashboard.cash_events()]


@router.post("/", response_model=CashEventSchema, status_code=status.HTTP_201_CREATED)
def create_cash_event(
    request: CashEventCreateRequest, dashboard: PortfolioDashboard = Depends(get_dashboard)
) -> CashEventSchema:
    return CashEventSchema.from_event(dashboard.add_cash_event(request.to_draft()))


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_cash_event(
    event_id: str, dashboard: PortfolioDashboard = Depends(get_dashboard)
) -> Response:
    dashboard.delete_cash_event(event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""
Shared FastAPI dependencies.
"""

from dataclasses import dataclass

from fastapi import Depends, Header, Request

from runtimetrade.core.exceptions.portfolio import ValidationError
from runtimetrade.infrastructure.store.csv_validator import StoreCSVValidator
from runtimetrade.services.dashboard import PortfolioDashboard


@dataclass
class RequestContext:
    user_id: str


def get_request_context(
    request: Request, x_user_id: str | None = Header(default=None)
) -> RequestContext:
    """Resolve the user from the ``X-User-Id`` header, falling back to the default user."""
    user_id = (x_user_id or "").strip() or request.app.state.settings.default_user_id
    try:
        StoreCSVValidator.validate_user_id(user_id)
    except ValidationError as e:
        raise ValidationError(f"Invalid X-User-Id header: {e}") from e
    return RequestContext(user_id=user_id)


def get_dashboard(
    request: Request, context: RequestContext = Depends(get_request_context)
) -> PortfolioDashboard:
    """Build a dashboard over a fresh store snapshot for the requesting user."""
    state = request.app.state
    dashboard = PortfolioDashboard(
        store=state.store,
        user_id=context.user_id,
        price_board=state.price_board,
        allow_oversell=state.settings.allow_oversell,
        display_currency=state.settings.display_currency,
        exchange_rate_symbol=state.settings.exchange_rate_symbol,
    )
    rate = state.price_board.get(state.settings.exchange_rate_symbol)
    if rate is not None:
        dashboard.exchange_rate = rate
    return dashboard


__all__ = ["RequestContext", "get_request_context", "get_dashboard"]

"""
FastAPI main application for the portfolio dashboard.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from runtimetrade.core.config.settings import DashboardSettings, get_settings
from runtimetrade.core.constants import DEFAULT_DISPLAY_CURRENCY
from runtimetrade.core.exceptions.portfolio import (
    OversellError,
    RecordNotFoundError,
    StoreError,
    ValidationError,
)
from runtimetrade.core.interfaces.quotes import IQuoteSource
from runtimetrade.core.interfaces.store import ITradeStore
from runtimetrade.infrastructure.quotes import (
    CachingQuoteSource,
    PriceBoard,
    QuoteFeed,
    YahooQuoteSource,
)
from runtimetrade.infrastructure.store import CSVTradeStore
from runtimetrade.services.dashboard import PortfolioDashboard

from .routers import cash, portfolio, trades
from .schemas.api_models import ErrorResponse

API_VERSION = "1.0.0"


def _error_response(status_code: int, error: str, exc: Exception) -> JSONResponse:
    body = ErrorResponse(error=error, message=str(exc))
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    details = None
    if isinstance(exc, OversellError):
        details = {"ticker": exc.ticker, "requested": exc.requested, "held": exc.held}
    body = ErrorResponse(error=type(exc).__name__, message=str(exc), details=details)
    return JSONResponse(status_code=422, content=body.model_dump())


async def not_found_handler(request: Request, exc: Exception) -> JSONResponse:
    return _error_response(status.HTTP_404_NOT_FOUND, "RecordNotFoundError", exc)


async def store_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Store failure on {request.method} {request.url.path}: {exc}")
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "StoreError", exc)


def build_quote_feed(
    settings: DashboardSettings,
    store: ITradeStore,
    price_board: PriceBoard,
    source: IQuoteSource | None = None,
) -> QuoteFeed:
    """Create a feed polling the default user's symbols into ``price_board``.

    Only ``settings.default_user_id`` is polled. Users selected per request
    with ``X-User-Id`` share the board but get live prices for their own
    tickers only when those overlap, or when pushed via
    ``PUT /api/portfolio/prices``.
    """
    if source is None:
        source = CachingQuoteSource(
            YahooQuoteSource(
                base_url=settings.yahoo_base_url,
                timeout=settings.quote_request_timeout_seconds,
            ),
            ttl=settings.quote_cache_ttl_seconds,
        )

    def symbols() -> list[str]:
        tickers = PortfolioDashboard(store, settings.default_user_id, price_board).symbols()
        if settings.display_currency != DEFAULT_DISPLAY_CURRENCY:
            tickers.append(settings.exchange_rate_symbol)
        return tickers

    feed = QuoteFeed(source, symbols, interval=settings.quote_poll_interval_seconds)
    feed.add_observer(price_board)
    return feed


def create_app(
    store: ITradeStore | None = None,
    settings: DashboardSettings | None = None,
    price_board: PriceBoard | None = None,
    quote_source: IQuoteSource | None = None,
) -> FastAPI:
    """Build the API around an explicitly constructed store.

    The background feed, when enabled, quotes the default user's positions
    only (see ``build_quote_feed``).

    Args:
        store: Trade store; defaults to a CSV store under ``settings.data_dir``
        settings: Dashboard settings; defaults to environment settings
        price_board: Shared price board; a new one is created if omitted
        quote_source: Source for the background feed; defaults to Yahoo

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    store = store if store is not None else CSVTradeStore(settings.data_dir)
    price_board = price_board if price_board is not None else PriceBoard()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        feed = None
        if settings.quote_feed_enabled:
            feed = build_quote_feed(settings, store, price_board, quote_source)
            feed.start()
        app.state.quote_feed = feed
        logger.bind(**settings.dict_for_logging()).info(
            f"Portfolio API started (quote feed {'on' if feed else 'off'})"
        )
        try:
            yield
        finally:
            if feed is not None:
                feed.stop()

    app = FastAPI(
        title="RuntimeTrade Portfolio API",
        version=API_VERSION,
        description="API for trade journaling, live positions and P&L",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.price_board = price_board
    app.state.quote_feed = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",  # Development frontend
            "http://localhost:8080",  # Alternative development port
        ],
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["Content-Type", "Accept", "Origin", "X-User-Id"],
    )

    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RecordNotFoundError, not_found_handler)
    app.add_exception_handler(StoreError, store_error_handler)

    app.include_router(trades.router, prefix="/api/trades", tags=["trades"])
    app.include_router(cash.router, prefix="/api/cash", tags=["cash"])
    app.include_router(portfolio.router, prefix="/api/portfolio", tags=["portfolio"])

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint returning API information."""
        return {"message": "RuntimeTrade Portfolio API", "version": API_VERSION, "status": "running"}

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app

"""
FastAPI Application Factory

Creates and configures the leaderboard API application.
"""

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
import structlog

from staff_analytics.config import Settings, get_settings
from staff_analytics.exceptions import StaffAnalyticsError
from staff_analytics.ingestion.source import ReportingClient
from .middleware import RequestLoggingMiddleware
from .routes import health_router, leaderboard_router, reports_router, sites_router

logger = structlog.get_logger(__name__)


def _encode_details(details: Any) -> Any:
    """JSON-safe form of an error payload; opaque upstream objects become strings"""
    try:
        return jsonable_encoder(details)
    except (TypeError, ValueError):
        return str(details)


async def handle_staff_analytics_error(request: Request, exc: StaffAnalyticsError) -> JSONResponse:
    """Render domain errors as ``{"error", "details"}`` bodies"""
    if exc.status_code >= 500:
        logger.error("Request failed", path=request.url.path, error=exc.message, details=exc.details)
    else:
        logger.warning("Request rejected", path=request.url.path, error=exc.message)

    content = {"error": exc.message}
    if exc.details is not None:
        content["details"] = _encode_details(exc.details)
    return JSONResponse(status_code=exc.status_code, content=content)



def create_api_app(
    settings: Optional[Settings] = None,
    reporting_client: Optional[ReportingClient] = None,
    lifespan: Optional[Any] = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Application settings (cached settings when omitted)
        reporting_client: Row source used by every leaderboard and report
        lifespan: Optional lifespan context manager

    Returns:
        Configured FastAPI app instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Staff Analytics Leaderboards API",
        description="Per-employee leaderboards and reports from analytics rows",
        version=settings.version,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.reporting_client = reporting_client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(StaffAnalyticsError, handle_staff_analytics_error)

    app.include_router(health_router, prefix="/api", tags=["Health"])
    app.include_router(sites_router, prefix="/api", tags=["Sites"])
    app.include_router(leaderboard_router, prefix="/api", tags=["Leaderboard"])
    app.include_router(reports_router, prefix="/api", tags=["Reports"])

    return app

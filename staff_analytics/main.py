"""
FastAPI Production Application

Main entry point for the Staff Analytics Leaderboards API.

The reporting client is supplied by the deployment: assign it to
``app.state.reporting_client`` (or build the app with
``create_api_app(reporting_client=...)``) before serving traffic.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
import structlog

from staff_analytics.config import get_settings
from staff_analytics.serving.api import create_api_app

settings = get_settings()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    from staff_analytics.config.logging import configure_logging
    configure_logging(settings=app.state.settings)

    reporting = app.state.settings.reporting
    logger.info(
        "Starting Staff Analytics API",
        sites=len(reporting.sites),
        alias_sources=len(reporting.alias_map),
        default_mode=reporting.default_mode,
        employee_dimension=reporting.employee_dimension,
    )

    if app.state.reporting_client is None:
        logger.warning("No reporting client configured; leaderboard and report endpoints will return 503")

    yield

    logger.info("Shutting down...")


app = create_api_app(settings=settings, lifespan=lifespan)


@app.get("/api/info")
async def api_info():
    """API information endpoint."""
    return {
        "name": "Staff Analytics Leaderboards API",
        "version": settings.version,
        "environment": settings.app_env,
        "documentation": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)

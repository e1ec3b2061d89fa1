"""
Health Check Endpoints
"""

from datetime import datetime, timezone
from typing import Dict

from fastapi import APIRouter, Depends, Request

from staff_analytics.config import Settings
from ..dependencies import get_app_settings
from ..schemas import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> HealthResponse:
    """
    Health check endpoint.

    Reports "degraded" when no reporting client is configured.
    """
    has_client = getattr(request.app.state, "reporting_client", None) is not None

    return HealthResponse(
        status="healthy" if has_client else "degraded",
        version=settings.version,
        environment=settings.app_env,
        timestamp=datetime.now(timezone.utc),
        reporting_client=has_client,
    )


@router.get("/health/live")
async def liveness_check() -> Dict[str, str]:
    """Liveness check endpoint."""
    return {"status": "alive"}

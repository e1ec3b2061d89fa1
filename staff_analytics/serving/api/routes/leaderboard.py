"""
Leaderboard Endpoints

Per-source leaderboards and the merged leaderboard across every configured
site.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
import structlog

from staff_analytics.config import Settings
from staff_analytics.reporting import LeaderboardService
from ..dependencies import get_app_settings, get_leaderboard_service, resolve_site
from ..schemas import LeaderboardResponse, MergedLeaderboardResponse

router = APIRouter()
logger = structlog.get_logger(__name__)


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    property_id: Optional[str] = Query(None, alias="propertyId"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    order_metric: str = Query("screenPageViews", alias="orderMetric"),
    mode: Optional[str] = Query(None),
    limit: Optional[int] = Query(None, ge=1),
    settings: Settings = Depends(get_app_settings),
    service: LeaderboardService = Depends(get_leaderboard_service),
) -> LeaderboardResponse:
    """Leaderboard for a single site."""
    site = resolve_site(settings, property_id)

    logger.info(
        "Leaderboard requested",
        property_id=site.id,
        start_date=start_date,
        end_date=end_date,
        mode=mode,
        order_metric=order_metric,
    )

    source = await service.source_leaderboard(
        site.id,
        mode=mode,
        metric=order_metric,
        date_range=service.date_range(start_date, end_date),
        label=site.label,
    )
    return LeaderboardResponse.from_leaderboard(source.leaderboard, limit)


@router.get("/leaderboard/all", response_model=MergedLeaderboardResponse)
async def get_merged_leaderboard(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    order_metric: str = Query("screenPageViews", alias="orderMetric"),
    mode: Optional[str] = Query(None),
    settings: Settings = Depends(get_app_settings),
    service: LeaderboardService = Depends(get_leaderboard_service),
) -> MergedLeaderboardResponse:
    """
    Leaderboard merged across every configured site.

    Sites that fail are left out and listed in ``failedSources``.
    """
    sites = settings.reporting.sites

    logger.info(
        "Merged leaderboard requested",
        start_date=start_date,
        end_date=end_date,
        mode=mode,
        total_sites=len(sites),
    )

    result = await service.global_leaderboard(
        sites,
        mode=mode,
        metric=order_metric,
        date_range=service.date_range(start_date, end_date),
    )
    return MergedLeaderboardResponse.from_merge(result)

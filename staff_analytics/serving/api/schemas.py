"""
API response models.

Responses use camelCase field names on the wire.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from staff_analytics.reporting.reports import EntityReport
from staff_analytics.transformation.aggregation import AggregatedEntity
from staff_analytics.transformation.merge import MergeResult, SourceFailure
from staff_analytics.transformation.ranking import Leaderboard, LeaderboardEntry


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthResponse(CamelModel):
    """Health check response"""
    status: str
    version: str
    environment: str
    timestamp: datetime
    reporting_client: bool


class SiteModel(CamelModel):
    label: str
    id: str


class SitesResponse(CamelModel):
    sites: List[SiteModel]


class AliasMapResponse(CamelModel):
    alias_map: Dict[str, Dict[str, str]]


class DefaultAliasResponse(CamelModel):
    alias: str


class LeaderboardRow(CamelModel):
    """One ranked employee"""
    employee_id: str
    active_users: float
    sessions: float
    screen_page_views: float
    views_per_active_user: float
    average_engagement_time: float
    event_count: float
    conversions: float
    total_revenue: float
    rank: int

    @classmethod
    def from_entry(cls, entry: LeaderboardEntry) -> "LeaderboardRow":
        entity = entry.entity
        return cls(
            employee_id=entity.identity,
            active_users=entity.active_users,
            sessions=entity.sessions,
            screen_page_views=entity.screen_page_views,
            views_per_active_user=entity.views_per_active_user,
            average_engagement_time=entity.average_engagement_time,
            event_count=entity.event_count,
            conversions=entity.conversions,
            total_revenue=entity.total_revenue,
            rank=entry.rank,
        )


class LeaderboardResponse(CamelModel):
    rows: List[LeaderboardRow]
    total_employees: int
    metric_sorted: str

    @classmethod
    def from_leaderboard(cls, leaderboard: Leaderboard, limit: Optional[int] = None) -> "LeaderboardResponse":
        return cls(
            rows=[LeaderboardRow.from_entry(entry) for entry in leaderboard.top(limit)],
            total_employees=leaderboard.total_entities,
            metric_sorted=leaderboard.metric.value,
        )


class FailedSource(CamelModel):
    property_id: str
    label: str
    error: str

    @classmethod
    def from_failure(cls, failure: SourceFailure) -> "FailedSource":
        return cls(property_id=failure.property_id, label=failure.label, error=failure.error)


class MergedLeaderboardResponse(LeaderboardResponse):
    """Merged leaderboard; ``failed_sources`` lists sites left out"""
    failed_sources: List[FailedSource]

    @classmethod
    def from_merge(cls, result: MergeResult) -> "MergedLeaderboardResponse":
        leaderboard = result.leaderboard
        return cls(
            rows=[LeaderboardRow.from_entry(entry) for entry in leaderboard.entries],
            total_employees=leaderboard.total_entities,
            metric_sorted=leaderboard.metric.value,
            failed_sources=[FailedSource.from_failure(failure) for failure in result.failures],
        )


class ReportTotals(CamelModel):
    active_users: float
    sessions: float
    screen_page_views: float
    views_per_active_user: float
    average_engagement_time: float

    @classmethod
    def from_entity(cls, entity: AggregatedEntity) -> "ReportTotals":
        return cls(
            active_users=entity.active_users,
            sessions=entity.sessions,
            screen_page_views=entity.screen_page_views,
            views_per_active_user=entity.views_per_active_user,
            average_engagement_time=entity.average_engagement_time,
        )


class SiteTotalsModel(CamelModel):
    active_users: float
    screen_page_views: float


class PageRow(CamelModel):
    """One page of a report; pages are not split by screen class, which stays empty"""
    page_path: str
    screen_class: str = ""
    screen_page_views: float
    active_users: float
    sessions: float
    engagement_time: float
    views_per_active_user: float
    average_engagement_time: float


class RankModel(CamelModel):
    position: int
    total_employees: int
    metric: str


class ReportResponse(CamelModel):
    identity: str
    alias: Optional[str] = None
    totals: ReportTotals
    site_totals: SiteTotalsModel
    by_page_and_screen: List[PageRow]
    rank: RankModel

    @classmethod
    def from_report(cls, report: EntityReport) -> "ReportResponse":
        return cls(
            identity=report.identity,
            alias=report.alias,
            totals=ReportTotals.from_entity(report.totals),
            site_totals=SiteTotalsModel(
                active_users=report.site_totals.active_users,
                screen_page_views=report.site_totals.screen_page_views,
            ),
            by_page_and_screen=[
                PageRow(
                    page_path=page.page,
                    screen_page_views=page.screen_page_views,
                    active_users=page.active_users,
                    sessions=page.sessions,
                    engagement_time=page.engagement_duration,
                    views_per_active_user=page.views_per_active_user,
                    average_engagement_time=page.average_engagement_time,
                )
                for page in report.pages
            ],
            rank=RankModel(
                position=report.rank.position,
                total_employees=report.rank.total_entities,
                metric=report.rank.metric.value,
            ),
        )

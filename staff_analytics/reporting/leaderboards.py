"""
Leaderboard Pipeline

Fetch -> resolve -> aggregate -> rank for one source, and the cross-source
fan-out that merges every configured site into one leaderboard.
"""

import asyncio
from enum import Enum
from typing import Any, List, Optional, Sequence, Union

import structlog

from staff_analytics.config import SiteProperty, get_settings, normalize_property_id
from staff_analytics.config.settings import ReportingSettings
from staff_analytics.exceptions import InvalidModeError, MissingParameterError
from staff_analytics.identity.resolver import IdentityResolver
from staff_analytics.ingestion.pagination import fetch_report_rows
from staff_analytics.ingestion.rows import ALL_METRICS, Metric
from staff_analytics.ingestion.source import DateRange, Dimension, ReportingClient, ReportQuery
from staff_analytics.transformation.aggregation import AggregationEngine, IdentityMode
from staff_analytics.transformation.merge import (
    MergeResult,
    SourceFailure,
    SourceLeaderboard,
    merge_leaderboards,
)
from staff_analytics.transformation.ranking import RankingMetric, rank_entities

logger = structlog.get_logger(__name__)


class ReportMode(str, Enum):
    """Caller-facing identity modes"""
    ALIAS = "alias"
    EMPLOYEE = "employee"

    @classmethod
    def parse(cls, value: Any, default: Optional[str] = None) -> "ReportMode":
        """
        Parse a caller-supplied mode, falling back to ``default`` when empty.

        Raises:
            InvalidModeError: for anything but alias/employee
        """
        if isinstance(value, cls):
            return value
        raw = value or default or cls.ALIAS.value
        try:
            return cls(str(raw).lower())
        except ValueError:
            raise InvalidModeError(raw) from None


class LeaderboardService:
    """
    Builds per-source and cross-source leaderboards.

    Example:
        service = LeaderboardService(client)
        board = await service.source_leaderboard("123456", ReportMode.ALIAS)
        merged = await service.global_leaderboard(settings.reporting.sites)
    """

    def __init__(
        self,
        client: ReportingClient,
        settings: Optional[ReportingSettings] = None,
    ):
        self.client = client
        self.settings = settings or get_settings().reporting

    def date_range(self, start: Optional[str] = None, end: Optional[str] = None) -> DateRange:
        """Date range with configured defaults for missing bounds"""
        return DateRange(
            start=start or self.settings.default_start_date,
            end=end or self.settings.default_end_date,
        )

    def resolver_for(self, property_id: str) -> IdentityResolver:
        return IdentityResolver.for_source(self.settings.alias_map, property_id)

    def identity_mode(self, property_id: str, mode: Union[ReportMode, str]) -> IdentityMode:
        """Concrete identity mode for a source"""
        mode = ReportMode.parse(mode, self.settings.default_mode)
        if mode is ReportMode.EMPLOYEE:
            return IdentityMode.EMPLOYEE
        if self.settings.uses_title_aliases(property_id):
            return IdentityMode.TITLE_ALIAS
        return IdentityMode.PATH_ALIAS

    def leaderboard_query(
        self,
        property_id: str,
        identity_mode: IdentityMode,
        metric: RankingMetric,
        date_range: DateRange,
    ) -> ReportQuery:
        """Unfiltered query feeding a source leaderboard"""
        if identity_mode is IdentityMode.EMPLOYEE:
            dimensions = (self.settings.employee_dimension,)
            order_by = Metric(metric.value)
        elif identity_mode is IdentityMode.TITLE_ALIAS:
            dimensions = (Dimension.PAGE_TITLE.value, Dimension.SCREEN_CLASS.value)
            order_by = Metric.SCREEN_PAGE_VIEWS
        else:
            dimensions = (Dimension.PAGE_PATH.value,)
            order_by = Metric.SCREEN_PAGE_VIEWS

        return ReportQuery(
            property_id=normalize_property_id(property_id),
            dimensions=dimensions,
            metrics=ALL_METRICS,
            date_range=date_range,
            order_by=order_by,
        )

    async def source_leaderboard(
        self,
        property_id: str,
        mode: Union[ReportMode, str, None] = None,
        metric: Union[RankingMetric, str] = RankingMetric.SCREEN_PAGE_VIEWS,
        date_range: Optional[DateRange] = None,
        label: Optional[str] = None,
    ) -> SourceLeaderboard:
        """
        Leaderboard for a single source.

        Raises:
            MissingParameterError: if ``property_id`` is empty
            RowSourceError: if the source cannot be fetched
        """
        if not property_id:
            raise MissingParameterError("propertyId")

        property_id = normalize_property_id(property_id)
        metric = RankingMetric.parse(metric)
        identity_mode = self.identity_mode(property_id, mode)
        resolver = self.resolver_for(property_id)
        query = self.leaderboard_query(property_id, identity_mode, metric, date_range or self.date_range())

        rows = await fetch_report_rows(self.client, query, self.settings.page_size)

        engine = AggregationEngine(
            resolver=resolver,
            mode=identity_mode,
            observer=logger.bind(property_id=property_id).debug,
        )
        result = engine.aggregate(rows)
        leaderboard = rank_entities(result.entities, metric)

        logger.info(
            "Source leaderboard built",
            property_id=property_id,
            mode=identity_mode.value,
            metric=metric.value,
            rows=result.stats.input_rows,
            rows_dropped=result.stats.rows_dropped,
            entities=leaderboard.total_entities,
        )

        return SourceLeaderboard(
            property_id=property_id,
            label=label or property_id,
            leaderboard=leaderboard,
            resolver=resolver,
        )

    async def _collect(
        self,
        site: SiteProperty,
        mode: Union[ReportMode, str, None],
        metric: RankingMetric,
        date_range: DateRange,
    ) -> Union[SourceLeaderboard, SourceFailure]:
        try:
            return await self.source_leaderboard(site.id, mode, metric, date_range, label=site.label)
        except Exception as e:
            logger.warning(
                "Skipping source in merged leaderboard",
                property_id=site.id,
                label=site.label,
                error=str(e),
            )
            return SourceFailure(property_id=site.id, label=site.label, error=str(e) or type(e).__name__)

    async def global_leaderboard(
        self,
        sites: Sequence[SiteProperty],
        mode: Union[ReportMode, str, None] = None,
        metric: Union[RankingMetric, str] = RankingMetric.SCREEN_PAGE_VIEWS,
        date_range: Optional[DateRange] = None,
    ) -> MergeResult:
        """
        Merge every site's leaderboard into one.

        Sources are fetched concurrently, each with its own accumulator. A
        failing source is skipped and reported in ``MergeResult.failures``.
        """
        mode = ReportMode.parse(mode, self.settings.default_mode)
        metric = RankingMetric.parse(metric)
        date_range = date_range or self.date_range()

        outcomes = await asyncio.gather(
            *(self._collect(site, mode, metric, date_range) for site in sites)
        )

        sources: List[SourceLeaderboard] = []
        failures: List[SourceFailure] = []
        for outcome in outcomes:
            if isinstance(outcome, SourceFailure):
                failures.append(outcome)
            else:
                sources.append(outcome)

        leaderboard = merge_leaderboards(sources, metric)

        logger.info(
            "Merged leaderboard built",
            sources=len(sources),
            failed_sources=len(failures),
            entities=leaderboard.total_entities,
            metric=metric.value,
        )

        return MergeResult(leaderboard=leaderboard, failures=failures)

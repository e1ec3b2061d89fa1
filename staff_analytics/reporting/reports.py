"""
Entity Reports

Drill-down report for one employee: per-page breakdown, request totals,
unfiltered site totals for percentage context, and the employee's standing on
the full (unfiltered) source leaderboard.
"""

from dataclasses import dataclass
from typing import List, Optional, Union

import structlog

from staff_analytics.config import normalize_property_id
from staff_analytics.exceptions import MissingParameterError
from staff_analytics.ingestion.pagination import fetch_report_rows, fetch_totals_row
from staff_analytics.ingestion.rows import DETAIL_METRICS, SITE_TOTAL_METRICS
from staff_analytics.ingestion.source import DateRange, Dimension, DimensionFilter, MatchType, ReportQuery
from staff_analytics.transformation.aggregation import AggregatedEntity, IdentityMode, PageBreakdown, aggregate_by_page
from staff_analytics.transformation.ranking import RankingMetric
from .leaderboards import LeaderboardService, ReportMode

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SiteTotals:
    active_users: float = 0.0
    screen_page_views: float = 0.0


@dataclass(frozen=True)
class RankSnapshot:
    position: int
    total_entities: int
    metric: RankingMetric


@dataclass(frozen=True)
class EntityReport:
    """Detail report for one canonical identity"""
    identity: str
    alias: Optional[str]
    totals: AggregatedEntity
    site_totals: SiteTotals
    pages: List[PageBreakdown]
    rank: RankSnapshot


class EntityReportBuilder:
    """
    Builds entity reports on top of a ``LeaderboardService``.

    Example:
        builder = EntityReportBuilder(service)
        report = await builder.alias_report("123456", "bebe")
    """

    def __init__(self, service: LeaderboardService):
        self.service = service

    async def _site_totals(self, property_id: str, date_range: DateRange) -> SiteTotals:
        query = ReportQuery(
            property_id=property_id,
            dimensions=(),
            metrics=SITE_TOTAL_METRICS,
            date_range=date_range,
        )
        row = await fetch_totals_row(self.service.client, query)
        return SiteTotals(active_users=row.active_users, screen_page_views=row.screen_page_views)

    async def _build(
        self,
        property_id: str,
        identity: str,
        alias: Optional[str],
        detail_query: ReportQuery,
        mode: ReportMode,
        metric: RankingMetric,
        date_range: DateRange,
    ) -> EntityReport:
        rows = await fetch_report_rows(self.service.client, detail_query, self.service.settings.page_size)
        pages, totals = aggregate_by_page(rows, identity)

        site_totals = await self._site_totals(property_id, date_range)

        # Standing among all entities, not a count of this entity's rows
        source = await self.service.source_leaderboard(property_id, mode, metric, date_range)
        leaderboard = source.leaderboard

        logger.info(
            "Entity report built",
            property_id=property_id,
            identity=identity,
            pages=len(pages),
            rank=leaderboard.rank_of(identity),
        )

        return EntityReport(
            identity=identity,
            alias=alias,
            totals=totals,
            site_totals=site_totals,
            pages=pages,
            rank=RankSnapshot(
                position=leaderboard.rank_of(identity),
                total_entities=leaderboard.total_entities,
                metric=metric,
            ),
        )

    async def employee_report(
        self,
        property_id: str,
        employee_id: str,
        date_range: Optional[DateRange] = None,
        metric: Union[RankingMetric, str] = RankingMetric.SCREEN_PAGE_VIEWS,
    ) -> EntityReport:
        """
        Report for an employee tracked through the employee dimension.

        Rows are matched exactly on the employee dimension.
        """
        if not property_id:
            raise MissingParameterError("propertyId")
        if not employee_id:
            raise MissingParameterError("employeeId")

        property_id = normalize_property_id(property_id)
        metric = RankingMetric.parse(metric)
        date_range = date_range or self.service.date_range()
        identity = self.service.resolver_for(property_id).resolve(employee_id)

        query = ReportQuery(
            property_id=property_id,
            dimensions=(Dimension.PAGE_PATH.value, Dimension.SCREEN_CLASS.value),
            metrics=DETAIL_METRICS,
            date_range=date_range,
            dimension_filter=DimensionFilter(
                field=self.service.settings.employee_dimension,
                value=employee_id,
                match_type=MatchType.EXACT,
            ),
        )

        return await self._build(property_id, identity, None, query, ReportMode.EMPLOYEE, metric, date_range)

    async def alias_report(
        self,
        property_id: str,
        alias: str,
        date_range: Optional[DateRange] = None,
        metric: Union[RankingMetric, str] = RankingMetric.SCREEN_PAGE_VIEWS,
    ) -> EntityReport:
        """
        Report for an employee identified by an alias embedded in pages.

        ``alias`` may also be a canonical employee id; its registered alias is
        then used to filter pages. Pages are matched by substring since the
        alias is only part of the path or title.
        """
        if not property_id:
            raise MissingParameterError("propertyId")
        if not alias:
            raise MissingParameterError("alias")

        property_id = normalize_property_id(property_id)
        metric = RankingMetric.parse(metric)
        date_range = date_range or self.service.date_range()
        resolver = self.service.resolver_for(property_id)

        if alias in resolver.allow_list:
            filter_alias = alias
        else:
            filter_alias = resolver.alias_for(alias) or alias
        identity = resolver.resolve(filter_alias)

        if self.service.identity_mode(property_id, ReportMode.ALIAS) is IdentityMode.TITLE_ALIAS:
            dimensions = (Dimension.PAGE_TITLE.value, Dimension.SCREEN_CLASS.value)
            filter_field = Dimension.PAGE_TITLE.value
        else:
            dimensions = (Dimension.PAGE_PATH.value, Dimension.SCREEN_CLASS.value)
            filter_field = Dimension.PAGE_PATH.value

        query = ReportQuery(
            property_id=property_id,
            dimensions=dimensions,
            metrics=DETAIL_METRICS,
            date_range=date_range,
            dimension_filter=DimensionFilter(
                field=filter_field,
                value=filter_alias,
                match_type=MatchType.CONTAINS,
            ),
        )

        return await self._build(property_id, identity, filter_alias, query, ReportMode.ALIAS, metric, date_range)

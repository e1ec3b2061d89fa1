"""
Aggregation Engine

Groups resolved rows by canonical identity (or by page, for entity reports)
and sums their metrics with Polars. Derived ratios are computed from the sums
after grouping:

- views_per_active_user = screen_page_views / active_users
- average_engagement_time = engagement_duration / active_users

Both are 0 when active_users is 0.

Rows whose identity cannot be extracted, or whose alias is not on the source's
allow-list, are dropped entirely and counted in ``AggregationStats``. The sum
of ``screen_page_views`` over the output therefore equals the sum over the
rows that were kept.
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import polars as pl

from staff_analytics.identity.aliases import extract_alias_from_path, find_alias_in_title, match_order
from staff_analytics.identity.resolver import IdentityResolver
from staff_analytics.ingestion.rows import SUM_COLUMNS, MetricRow

KEY_COLUMN = "key"

FRAME_SCHEMA: Dict[str, Any] = {KEY_COLUMN: pl.Utf8, **{column: pl.Float64 for column in SUM_COLUMNS}}

Observer = Callable[..., None]


def _null_observer(event: str, **fields: Any) -> None:
    return None


class IdentityMode(str, Enum):
    """Where a row's identity comes from"""
    EMPLOYEE = "employee"
    PATH_ALIAS = "path_alias"
    TITLE_ALIAS = "title_alias"


@dataclass(frozen=True)
class AggregatedEntity:
    """Summed metrics for one canonical identity"""
    identity: str
    active_users: float = 0.0
    sessions: float = 0.0
    screen_page_views: float = 0.0
    engagement_duration: float = 0.0
    event_count: float = 0.0
    conversions: float = 0.0
    total_revenue: float = 0.0
    views_per_active_user: float = 0.0
    average_engagement_time: float = 0.0


@dataclass(frozen=True)
class PageBreakdown:
    """Summed metrics for one page of an entity report"""
    page: str
    active_users: float = 0.0
    sessions: float = 0.0
    screen_page_views: float = 0.0
    engagement_duration: float = 0.0
    views_per_active_user: float = 0.0
    average_engagement_time: float = 0.0


@dataclass
class AggregationStats:
    """Row accounting for one aggregation pass"""
    input_rows: int
    aggregated_rows: int = 0
    dropped_no_identity: int = 0
    dropped_not_allowed: int = 0
    entities: int = 0

    @property
    def rows_dropped(self) -> int:
        return self.dropped_no_identity + self.dropped_not_allowed


@dataclass(frozen=True)
class AggregationResult:
    entities: Tuple[AggregatedEntity, ...]
    stats: AggregationStats


def build_frame(keys: Sequence[str], rows: Sequence[MetricRow]) -> pl.DataFrame:
    """Frame of one key per row plus every summable metric"""
    data: Dict[str, List[Any]] = {KEY_COLUMN: list(keys)}
    for column in SUM_COLUMNS:
        data[column] = [getattr(row, column) for row in rows]
    return pl.DataFrame(data, schema=FRAME_SCHEMA)


def with_ratios(frame: pl.DataFrame) -> pl.DataFrame:
    """Add the derived ratios, guarding against zero active users"""
    has_users = pl.col("active_users") > 0
    return frame.with_columns(
        pl.when(has_users)
        .then(pl.col("screen_page_views") / pl.col("active_users"))
        .otherwise(0.0)
        .alias("views_per_active_user"),
        pl.when(has_users)
        .then(pl.col("engagement_duration") / pl.col("active_users"))
        .otherwise(0.0)
        .alias("average_engagement_time"),
    )


def summarize_frame(frame: pl.DataFrame) -> pl.DataFrame:
    """Sum metrics per key (first-seen key order) and add ratios"""
    summed = frame.group_by(KEY_COLUMN, maintain_order=True).agg(
        [pl.col(column).sum() for column in SUM_COLUMNS]
    )
    return with_ratios(summed)


def entities_from_frame(frame: pl.DataFrame) -> Tuple[AggregatedEntity, ...]:
    entities = []
    for record in frame.iter_rows(named=True):
        identity = record.pop(KEY_COLUMN)
        entities.append(AggregatedEntity(identity=identity, **record))
    return tuple(entities)


def totals_from_rows(identity: str, rows: Sequence[MetricRow]) -> AggregatedEntity:
    """Collapse every row into a single entity"""
    summarized = summarize_frame(build_frame([identity] * len(rows), rows))
    if summarized.is_empty():
        return AggregatedEntity(identity=identity)
    return entities_from_frame(summarized)[0]


class AggregationEngine:
    """
    Groups one source's rows by canonical identity.

    Example:
        engine = AggregationEngine(resolver, IdentityMode.PATH_ALIAS)
        result = engine.aggregate(rows)
        result.entities  # tuple of AggregatedEntity
    """

    def __init__(
        self,
        resolver: Optional[IdentityResolver] = None,
        mode: IdentityMode = IdentityMode.EMPLOYEE,
        observer: Optional[Observer] = None,
    ):
        self.resolver = resolver or IdentityResolver()
        self.mode = mode
        self.observer = observer or _null_observer
        self._title_aliases = match_order(self.resolver.allow_list)

    def extract_key(self, row: MetricRow) -> str:
        """Raw identity key for a row; ``""`` when none can be found"""
        if self.mode is IdentityMode.PATH_ALIAS:
            return extract_alias_from_path(row.dimension(0))
        if self.mode is IdentityMode.TITLE_ALIAS:
            return find_alias_in_title(row.dimension(0), row.dimension(1), self._title_aliases)
        return row.dimension(0)

    def aggregate(self, rows: Sequence[MetricRow]) -> AggregationResult:
        """Resolve, filter and sum ``rows`` into one entity per identity"""
        stats = AggregationStats(input_rows=len(rows))
        keys: List[str] = []
        kept: List[MetricRow] = []

        for row in rows:
            key = self.extract_key(row)
            if not key:
                stats.dropped_no_identity += 1
                continue
            if self.mode is IdentityMode.PATH_ALIAS and not self.resolver.is_allowed(key):
                stats.dropped_not_allowed += 1
                continue
            keys.append(self.resolver.resolve(key))
            kept.append(row)

        entities = entities_from_frame(summarize_frame(build_frame(keys, kept)))
        stats.aggregated_rows = len(kept)
        stats.entities = len(entities)

        self.observer("aggregation_completed", mode=self.mode.value, **asdict(stats))

        return AggregationResult(entities=entities, stats=stats)


def aggregate_by_page(
    rows: Sequence[MetricRow],
    identity: str,
) -> Tuple[List[PageBreakdown], AggregatedEntity]:
    """
    Per-page breakdown for one entity's rows.

    Returns:
        Pages sorted by screen_page_views descending (ties by page key), and
        the request-scoped totals across all pages
    """
    summarized = summarize_frame(build_frame([row.dimension(0) for row in rows], rows))
    ordered = summarized.sort(
        ["screen_page_views", KEY_COLUMN],
        descending=[True, False],
    )

    pages = [
        PageBreakdown(
            page=record[KEY_COLUMN],
            active_users=record["active_users"],
            sessions=record["sessions"],
            screen_page_views=record["screen_page_views"],
            engagement_duration=record["engagement_duration"],
            views_per_active_user=record["views_per_active_user"],
            average_engagement_time=record["average_engagement_time"],
        )
        for record in ordered.iter_rows(named=True)
    ]

    return pages, totals_from_rows(identity, rows)

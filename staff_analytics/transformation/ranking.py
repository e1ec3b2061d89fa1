"""
Ranking Engine

Orders aggregated entities by one metric and assigns 1-based ranks by sorted
position. Ties on the metric are broken by identity in ascending lexical
order, so ranking is deterministic regardless of aggregation order.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

from staff_analytics.exceptions import InvalidRankingMetricError
from .aggregation import AggregatedEntity

RANK_NOT_FOUND = -1


class RankingMetric(str, Enum):
    """Metrics a leaderboard can be ordered by"""
    ACTIVE_USERS = "activeUsers"
    SESSIONS = "sessions"
    SCREEN_PAGE_VIEWS = "screenPageViews"

    @property
    def column(self) -> str:
        return _RANKING_COLUMNS[self]

    @classmethod
    def parse(cls, value: Any) -> "RankingMetric":
        """
        Parse a caller-supplied metric name.

        Raises:
            InvalidRankingMetricError: for anything but the three ranking metrics
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidRankingMetricError(value) from None


_RANKING_COLUMNS: Dict[RankingMetric, str] = {
    RankingMetric.ACTIVE_USERS: "active_users",
    RankingMetric.SESSIONS: "sessions",
    RankingMetric.SCREEN_PAGE_VIEWS: "screen_page_views",
}


@dataclass(frozen=True)
class LeaderboardEntry:
    """An entity with its position in a ranking pass"""
    entity: AggregatedEntity
    rank: int
    metric: RankingMetric

    @property
    def identity(self) -> str:
        return self.entity.identity

    @property
    def value(self) -> float:
        """The ranked metric's value"""
        return getattr(self.entity, self.metric.column)


@dataclass(frozen=True)
class Leaderboard:
    entries: Tuple[LeaderboardEntry, ...]
    metric: RankingMetric

    @property
    def total_entities(self) -> int:
        return len(self.entries)

    @property
    def entities(self) -> Tuple[AggregatedEntity, ...]:
        return tuple(entry.entity for entry in self.entries)

    def rank_of(self, identity: str) -> int:
        """Rank of ``identity``, or ``RANK_NOT_FOUND`` when it is not ranked"""
        for entry in self.entries:
            if entry.identity == identity:
                return entry.rank
        return RANK_NOT_FOUND

    def get(self, identity: str) -> Optional[LeaderboardEntry]:
        for entry in self.entries:
            if entry.identity == identity:
                return entry
        return None

    def top(self, limit: Optional[int] = None) -> Tuple[LeaderboardEntry, ...]:
        """First ``limit`` entries (all when ``limit`` is None)"""
        if limit is None:
            return self.entries
        return self.entries[:max(limit, 0)]


def rank_entities(entities: Iterable[AggregatedEntity], metric: Any) -> Leaderboard:
    """
    Rank entities by ``metric`` descending.

    Each call produces a fresh leaderboard; nothing is re-ranked in place.
    """
    metric = RankingMetric.parse(metric)
    column = metric.column

    ordered = sorted(entities, key=lambda entity: (-getattr(entity, column), entity.identity))
    entries = tuple(
        LeaderboardEntry(entity=entity, rank=position, metric=metric)
        for position, entity in enumerate(ordered, start=1)
    )
    return Leaderboard(entries=entries, metric=metric)

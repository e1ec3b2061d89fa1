"""
Data Transformation Module
"""
from .aggregation import (
    AggregatedEntity,
    AggregationEngine,
    AggregationResult,
    AggregationStats,
    IdentityMode,
    PageBreakdown,
    aggregate_by_page,
)
from .merge import MergeResult, SourceFailure, SourceLeaderboard, merge_leaderboards
from .ranking import RANK_NOT_FOUND, Leaderboard, LeaderboardEntry, RankingMetric, rank_entities

__all__ = [
    "AggregatedEntity",
    "AggregationEngine",
    "AggregationResult",
    "AggregationStats",
    "IdentityMode",
    "PageBreakdown",
    "aggregate_by_page",
    "MergeResult",
    "SourceFailure",
    "SourceLeaderboard",
    "merge_leaderboards",
    "RANK_NOT_FOUND",
    "Leaderboard",
    "LeaderboardEntry",
    "RankingMetric",
    "rank_entities",
]

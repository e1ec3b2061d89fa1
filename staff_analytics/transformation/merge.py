"""
Cross-Source Merge

Combines per-source leaderboards into one global leaderboard. Each entry is
re-resolved with its own source's alias table so an alias on one site and the
employee id on another collapse to the same identity. Raw sums are merged and
the ratios are recomputed from the merged sums; per-source ratios are never
averaged.
"""

from dataclasses import dataclass
from typing import List, Sequence

import polars as pl

from staff_analytics.identity.resolver import IdentityResolver
from staff_analytics.ingestion.rows import SUM_COLUMNS
from .aggregation import FRAME_SCHEMA, KEY_COLUMN, entities_from_frame, summarize_frame
from .ranking import Leaderboard, RankingMetric, rank_entities


@dataclass(frozen=True)
class SourceLeaderboard:
    """One source's ranked leaderboard and the resolver it was built with"""
    property_id: str
    label: str
    leaderboard: Leaderboard
    resolver: IdentityResolver


@dataclass(frozen=True)
class SourceFailure:
    """A source skipped during a merge"""
    property_id: str
    label: str
    error: str


@dataclass(frozen=True)
class MergeResult:
    leaderboard: Leaderboard
    failures: List[SourceFailure]

    @property
    def is_partial(self) -> bool:
        return bool(self.failures)


def _source_frame(source: SourceLeaderboard) -> pl.DataFrame:
    entities = source.leaderboard.entities
    data = {KEY_COLUMN: [source.resolver.resolve(entity.identity) for entity in entities]}
    for column in SUM_COLUMNS:
        data[column] = [getattr(entity, column) for entity in entities]
    return pl.DataFrame(data, schema=FRAME_SCHEMA)


def merge_leaderboards(sources: Sequence[SourceLeaderboard], metric: RankingMetric) -> Leaderboard:
    """
    Merge source leaderboards and rank the result once.

    Source leaderboards are left untouched.
    """
    frames = [_source_frame(source) for source in sources]
    if frames:
        combined = pl.concat(frames, how="vertical")
    else:
        combined = pl.DataFrame(schema=FRAME_SCHEMA)

    return rank_entities(entities_from_frame(summarize_frame(combined)), metric)

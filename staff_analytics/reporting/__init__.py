"""
Leaderboard and Report Pipelines
"""
from .leaderboards import LeaderboardService, ReportMode
from .reports import EntityReport, EntityReportBuilder, RankSnapshot, SiteTotals

__all__ = [
    "LeaderboardService",
    "ReportMode",
    "EntityReport",
    "EntityReportBuilder",
    "RankSnapshot",
    "SiteTotals",
]

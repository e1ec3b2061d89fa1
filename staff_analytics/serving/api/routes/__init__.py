"""
API Routes Module
"""
from .health import router as health_router
from .leaderboard import router as leaderboard_router
from .reports import router as reports_router
from .sites import router as sites_router

__all__ = [
    "health_router",
    "leaderboard_router",
    "reports_router",
    "sites_router",
]

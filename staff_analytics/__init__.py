"""
Staff Analytics Leaderboards

Per-employee leaderboards and detail reports built from paginated
page/event analytics rows.
"""

__version__ = "1.0.0"

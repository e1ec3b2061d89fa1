"""
Data Ingestion Module
"""
from .pagination import PAGE_SIZE, fetch_all_rows, fetch_report_rows, fetch_totals_row
from .rows import Metric, MetricRow, parse_metric_value, parse_rows
from .source import DateRange, Dimension, DimensionFilter, MatchType, ReportingClient, ReportQuery

__all__ = [
    "PAGE_SIZE",
    "fetch_all_rows",
    "fetch_report_rows",
    "fetch_totals_row",
    "Metric",
    "MetricRow",
    "parse_metric_value",
    "parse_rows",
    "DateRange",
    "Dimension",
    "DimensionFilter",
    "MatchType",
    "ReportingClient",
    "ReportQuery",
]

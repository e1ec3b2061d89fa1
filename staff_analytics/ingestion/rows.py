"""
Metric Rows

Typed view of the raw rows returned by the reporting API. Raw rows carry
``dimensionValues`` and ``metricValues`` as ordered sequences; values may be
plain strings or ``{"value": ...}`` mappings. Parsing is permissive: missing
dimensions become ``""`` and missing or unparsable metrics become ``0``.
"""

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

_NON_NUMERIC = re.compile(r"[^\d.]")


class Metric(str, Enum):
    """Reporting API metric names"""
    ACTIVE_USERS = "activeUsers"
    SESSIONS = "sessions"
    SCREEN_PAGE_VIEWS = "screenPageViews"
    ENGAGEMENT_DURATION = "userEngagementDuration"
    EVENT_COUNT = "eventCount"
    CONVERSIONS = "conversions"
    TOTAL_REVENUE = "totalRevenue"

    @property
    def column(self) -> str:
        """Column name used in frames and dataclasses"""
        return METRIC_COLUMNS[self]


METRIC_COLUMNS: Dict[Metric, str] = {
    Metric.ACTIVE_USERS: "active_users",
    Metric.SESSIONS: "sessions",
    Metric.SCREEN_PAGE_VIEWS: "screen_page_views",
    Metric.ENGAGEMENT_DURATION: "engagement_duration",
    Metric.EVENT_COUNT: "event_count",
    Metric.CONVERSIONS: "conversions",
    Metric.TOTAL_REVENUE: "total_revenue",
}

SUM_COLUMNS: Tuple[str, ...] = tuple(METRIC_COLUMNS.values())

ALL_METRICS: Tuple[Metric, ...] = tuple(Metric)
DETAIL_METRICS: Tuple[Metric, ...] = (
    Metric.ACTIVE_USERS,
    Metric.SESSIONS,
    Metric.SCREEN_PAGE_VIEWS,
    Metric.ENGAGEMENT_DURATION,
)
SITE_TOTAL_METRICS: Tuple[Metric, ...] = (Metric.ACTIVE_USERS, Metric.SCREEN_PAGE_VIEWS)


def parse_metric_value(value: Any) -> float:
    """
    Parse a metric value string into a float.

    Unit suffixes are stripped (``"123.45s"`` -> ``123.45``) and a leading
    minus sign is kept, so refunds stay negative. Anything that still fails to
    parse, or is not finite, counts as 0.
    """
    if value is None or value == "":
        return 0.0
    text = str(value).strip()
    cleaned = _NON_NUMERIC.sub("", text)
    try:
        number = float(cleaned)
    except ValueError:
        return 0.0
    if text.startswith("-"):
        number = -number
    return number if math.isfinite(number) else 0.0



def _slot_value(values: Sequence[Any], index: int) -> Optional[Any]:
    if index >= len(values):
        return None
    slot = values[index]
    if isinstance(slot, Mapping):
        return slot.get("value")
    return slot


@dataclass(frozen=True)
class MetricRow:
    """One raw observation: dimension values plus the fixed metric set"""
    dimensions: Tuple[str, ...]
    active_users: float = 0.0
    sessions: float = 0.0
    screen_page_views: float = 0.0
    engagement_duration: float = 0.0
    event_count: float = 0.0
    conversions: float = 0.0
    total_revenue: float = 0.0

    def dimension(self, index: int) -> str:
        """Dimension value at ``index``, or ``""`` when the slot is missing"""
        return self.dimensions[index] if index < len(self.dimensions) else ""

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any], metrics: Sequence[Metric]) -> "MetricRow":
        """
        Build a row from a raw API row.

        Args:
            raw: Mapping with ``dimensionValues`` and ``metricValues``
            metrics: Metric order of the query that produced the row
        """
        dimension_values = raw.get("dimensionValues") or []
        metric_values = raw.get("metricValues") or []

        dimensions = tuple(
            "" if value is None else str(value)
            for value in (_slot_value(dimension_values, i) for i in range(len(dimension_values)))
        )
        parsed = {
            metric.column: parse_metric_value(_slot_value(metric_values, i))
            for i, metric in enumerate(metrics)
        }
        return cls(dimensions=dimensions, **parsed)


def parse_rows(raw_rows: Sequence[Mapping[str, Any]], metrics: Sequence[Metric]) -> List[MetricRow]:
    """Parse a page of raw rows"""
    return [MetricRow.from_raw(raw, metrics) for raw in raw_rows]

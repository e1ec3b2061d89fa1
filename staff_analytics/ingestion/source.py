"""
Row source contract.

The reporting API client itself (credentials, transport, request rendering)
lives outside this package. Anything implementing ``ReportingClient`` can be
plugged into the pipeline.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Protocol, Sequence, Tuple, runtime_checkable

from .rows import Metric


class MatchType(str, Enum):
    """String filter match types"""
    EXACT = "EXACT"
    CONTAINS = "CONTAINS"


class Dimension(str, Enum):
    """Reporting API dimensions used by the pipeline"""
    PAGE_PATH = "pagePathPlusQueryString"
    PAGE_TITLE = "pageTitle"
    SCREEN_CLASS = "unifiedScreenClass"


@dataclass(frozen=True)
class DateRange:
    start: str = "30daysAgo"
    end: str = "today"


@dataclass(frozen=True)
class DimensionFilter:
    field: str
    value: str
    match_type: MatchType = MatchType.EXACT
    case_sensitive: bool = False

    def matches(self, value: str) -> bool:
        """Evaluate the filter locally, with the reporting API's case rules"""
        expected, actual = self.value, value or ""
        if not self.case_sensitive:
            expected, actual = expected.lower(), actual.lower()
        if self.match_type == MatchType.CONTAINS:
            return expected in actual
        return expected == actual


@dataclass(frozen=True)
class ReportQuery:
    """A single report request against one property"""
    property_id: str
    dimensions: Tuple[str, ...]
    metrics: Tuple[Metric, ...]
    date_range: DateRange = field(default_factory=DateRange)
    dimension_filter: Optional[DimensionFilter] = None
    order_by: Optional[Metric] = None


@runtime_checkable
class ReportingClient(Protocol):
    """External row source"""

    async def run_report(
        self,
        query: ReportQuery,
        offset: int,
        limit: int,
    ) -> Sequence[Mapping[str, Any]]:
        """Return one page of raw rows for ``query``"""
        ...

"""
Test Suite Configuration
"""
import json
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import pytest

from staff_analytics.config import Settings
from staff_analytics.config.settings import ReportingSettings
from staff_analytics.ingestion.source import ReportQuery
from staff_analytics.reporting import EntityReportBuilder, LeaderboardService

PATH = "pagePathPlusQueryString"
TITLE = "pageTitle"
SCREEN = "unifiedScreenClass"
EMPLOYEE_DIMENSION = "customUser:employee_id"


def fake_row(
    dimensions: Sequence[str],
    attributes: Optional[Mapping[str, str]] = None,
    **metrics: float,
) -> Dict[str, Any]:
    """Canned row: dimension values, metric values by API name, filterable attributes"""
    return {"dimensions": list(dimensions), "metrics": metrics, "attributes": dict(attributes or {})}


class FakeReportingClient:
    """
    In-memory reporting API.

    Rows are registered per (property, dimensions) and rendered in the metric
    order of each query. Filters are evaluated against the row's dimensions or
    its attributes.
    """

    def __init__(self):
        self.reports: Dict[Tuple[str, Tuple[str, ...]], List[Dict[str, Any]]] = {}
        self.totals: Dict[str, Dict[str, float]] = {}
        self.failing: Dict[str, Exception] = {}
        self.calls: List[Tuple[ReportQuery, int, int]] = []

    def add_rows(self, property_id: str, dimensions: Iterable[str], rows: List[Dict[str, Any]]) -> None:
        self.reports.setdefault((property_id, tuple(dimensions)), []).extend(rows)

    def set_totals(self, property_id: str, **metrics: float) -> None:
        self.totals[property_id] = metrics

    def fail(self, property_id: str, error: Optional[Exception] = None) -> None:
        self.failing[property_id] = error or ConnectionError(f"property {property_id} unavailable")

    def _matches(self, query: ReportQuery, row: Dict[str, Any]) -> bool:
        dimension_filter = query.dimension_filter
        if dimension_filter is None:
            return True
        if dimension_filter.field in query.dimensions:
            value = row["dimensions"][query.dimensions.index(dimension_filter.field)]
        else:
            value = row["attributes"].get(dimension_filter.field, "")
        return dimension_filter.matches(value)

    def _render(self, query: ReportQuery, row: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "dimensionValues": [{"value": value} for value in row["dimensions"]],
            "metricValues": [{"value": str(row["metrics"].get(metric.value, 0))} for metric in query.metrics],
        }

    async def run_report(self, query: ReportQuery, offset: int, limit: int) -> List[Dict[str, Any]]:
        self.calls.append((query, offset, limit))

        if query.property_id in self.failing:
            raise self.failing[query.property_id]

        if not query.dimensions:
            totals = self.totals.get(query.property_id)
            if totals is None:
                return []
            return [self._render(query, {"dimensions": [], "metrics": totals})][:limit]

        rows = [
            row for row in self.reports.get((query.property_id, tuple(query.dimensions)), [])
            if self._matches(query, row)
        ]
        return [self._render(query, row) for row in rows[offset:offset + limit]]


ALIAS_MAP = {
    "111": {"bebe": "linh", "beo": "nam"},
    "333": {"bebe": "linh", "be": "bao"},
}


@pytest.fixture
def reporting_settings() -> ReportingSettings:
    """Four sites: path aliases (111, 222), title aliases (333), employee dimension (444)"""
    return ReportingSettings(
        GA4_SITES="alpha:111,beta:222,gamma:333,delta:444",
        GA4_EMPLOYEE_DIMENSION=EMPLOYEE_DIMENSION,
        ALIAS_MAP=json.dumps(ALIAS_MAP),
        DEFAULT_ALIAS_MAP=json.dumps({"222": "linh"}),
        DEFAULT_MODE="alias",
        TITLE_ALIAS_PROPERTIES=["333"],
        REPORT_PAGE_SIZE=100000,
    )


@pytest.fixture
def test_settings(reporting_settings) -> Settings:
    """Create test settings"""
    return Settings(
        app_env="testing",
        debug=True,
        reporting=reporting_settings,
    )


@pytest.fixture
def fake_client() -> FakeReportingClient:
    """Reporting client loaded with rows for every test site"""
    client = FakeReportingClient()

    # alpha: path aliases with an allow-list
    client.add_rows("111", [PATH], [
        fake_row(["/posts/a/long-path-bebe/"], activeUsers=10, sessions=12, screenPageViews=60, userEngagementDuration=300),
        fake_row(["/posts/b/other-bebe?utm=x"], activeUsers=5, sessions=6, screenPageViews=40, userEngagementDuration=100),
        fake_row(["/posts/c/story-beo/"], activeUsers=8, sessions=9, screenPageViews=30, userEngagementDuration=160),
        fake_row(["/posts/d/random-zzz/"], activeUsers=3, sessions=3, screenPageViews=20, userEngagementDuration=30),
        fake_row(["/"], activeUsers=50, sessions=55, screenPageViews=500, userEngagementDuration=900),
    ])
    client.add_rows("111", [PATH, SCREEN], [
        fake_row(["/posts/a/long-path-bebe/", "Home"], activeUsers=10, sessions=12, screenPageViews=60, userEngagementDuration=300),
        fake_row(["/posts/b/other-bebe?utm=x", "Home"], activeUsers=5, sessions=6, screenPageViews=40, userEngagementDuration=100),
        fake_row(["/posts/c/story-beo/", "Home"], activeUsers=8, sessions=9, screenPageViews=30, userEngagementDuration=160),
    ])
    client.set_totals("111", activeUsers=200, screenPageViews=2000)

    # beta: path aliases, no alias table
    client.add_rows("222", [PATH], [
        fake_row(["/x/y-linh"], activeUsers=5, sessions=5, screenPageViews=20, userEngagementDuration=50),
        fake_row(["/x/z-nam"], activeUsers=2, sessions=2, screenPageViews=10, userEngagementDuration=10),
        fake_row(["/x/q-bebe"], activeUsers=1, sessions=1, screenPageViews=5, userEngagementDuration=5),
    ])

    # gamma: aliases in page titles
    client.add_rows("333", [TITLE, SCREEN], [
        fake_row(["Best of BEBE Q3", "Home"], activeUsers=4, sessions=4, screenPageViews=12, userEngagementDuration=40),
        fake_row(["Be happy", "Article"], activeUsers=2, sessions=2, screenPageViews=6, userEngagementDuration=10),
        fake_row(["Nothing here", "Home"], activeUsers=1, sessions=1, screenPageViews=3, userEngagementDuration=3),
    ])

    # delta: employee dimension
    client.add_rows("444", [EMPLOYEE_DIMENSION], [
        fake_row(["linh"], activeUsers=7, sessions=8, screenPageViews=70, userEngagementDuration=140),
        fake_row(["nam"], activeUsers=3, sessions=4, screenPageViews=90, userEngagementDuration=30),
        fake_row([""], activeUsers=1, sessions=1, screenPageViews=1, userEngagementDuration=1),
    ])
    client.add_rows("444", [PATH, SCREEN], [
        fake_row(["/a", "Home"], {EMPLOYEE_DIMENSION: "linh"}, activeUsers=3, sessions=3, screenPageViews=30, userEngagementDuration=60),
        fake_row(["/b", "Home"], {EMPLOYEE_DIMENSION: "linh"}, activeUsers=2, sessions=2, screenPageViews=50, userEngagementDuration=20),
        fake_row(["/a", "Article"], {EMPLOYEE_DIMENSION: "linh"}, activeUsers=1, sessions=1, screenPageViews=10, userEngagementDuration=40),
        fake_row(["/c", "Home"], {EMPLOYEE_DIMENSION: "nam"}, activeUsers=9, sessions=9, screenPageViews=99, userEngagementDuration=90),
    ])
    client.set_totals("444", activeUsers=100, screenPageViews=1000)

    return client


@pytest.fixture
def service(fake_client, reporting_settings) -> LeaderboardService:
    return LeaderboardService(fake_client, reporting_settings)


@pytest.fixture
def report_builder(service) -> EntityReportBuilder:
    return EntityReportBuilder(service)

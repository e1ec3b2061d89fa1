"""
Unit Tests - Ingestion
"""
import pytest

from staff_analytics.exceptions import RowSourceError
from staff_analytics.ingestion import (
    Metric,
    MetricRow,
    ReportQuery,
    fetch_all_rows,
    fetch_report_rows,
    fetch_totals_row,
    parse_metric_value,
)
from staff_analytics.ingestion.rows import ALL_METRICS, DETAIL_METRICS


class PagedSource:
    """Serves a fixed row list page by page and records offsets"""

    def __init__(self, total_rows: int):
        self.rows = list(range(total_rows))
        self.offsets = []

    async def __call__(self, offset: int, limit: int):
        self.offsets.append(offset)
        return self.rows[offset:offset + limit]


class TestParseMetricValue:
    """Tests for metric value parsing"""

    def test_plain_number(self):
        assert parse_metric_value("42") == 42.0

    def test_strips_unit_suffix(self):
        assert parse_metric_value("123.45s") == 123.45

    def test_keeps_leading_minus(self):
        assert parse_metric_value("-12.5") == -12.5
        assert parse_metric_value("-3s") == -3.0
        assert parse_metric_value("-") == 0.0

    def test_missing_and_empty_are_zero(self):
        assert parse_metric_value(None) == 0.0
        assert parse_metric_value("") == 0.0

    def test_unparsable_is_zero(self):
        assert parse_metric_value("n/a") == 0.0
        assert parse_metric_value("1.2.3") == 0.0


class TestMetricRow:
    """Tests for raw row parsing"""

    def test_from_raw_maps_metrics_by_query_order(self):
        raw = {
            "dimensionValues": [{"value": "/posts/x-bebe"}, {"value": "Home"}],
            "metricValues": [{"value": "3"}, {"value": "4"}, {"value": "10"}, {"value": "12.5s"}],
        }

        row = MetricRow.from_raw(raw, DETAIL_METRICS)

        assert row.dimensions == ("/posts/x-bebe", "Home")
        assert row.active_users == 3
        assert row.sessions == 4
        assert row.screen_page_views == 10
        assert row.engagement_duration == 12.5
        assert row.total_revenue == 0

    def test_from_raw_accepts_plain_strings(self):
        raw = {"dimensionValues": ["linh"], "metricValues": ["7"]}

        row = MetricRow.from_raw(raw, [Metric.SCREEN_PAGE_VIEWS])

        assert row.dimensions == ("linh",)
        assert row.screen_page_views == 7

    def test_missing_slots_default(self):
        row = MetricRow.from_raw({}, ALL_METRICS)

        assert row.dimensions == ()
        assert row.dimension(0) == ""
        assert row.active_users == 0
        assert row.conversions == 0


class TestFetchAllRows:
    """Tests for pagination termination"""

    @pytest.mark.asyncio
    async def test_stops_on_short_page(self):
        source = PagedSource(7)

        rows = await fetch_all_rows(source, page_size=3)

        assert rows == list(range(7))
        assert source.offsets == [0, 3, 6]

    @pytest.mark.asyncio
    async def test_exact_multiple_costs_one_empty_request(self):
        source = PagedSource(6)

        rows = await fetch_all_rows(source, page_size=3)

        assert len(rows) == 6
        assert source.offsets == [0, 3, 6]

    @pytest.mark.asyncio
    async def test_empty_source(self):
        source = PagedSource(0)

        rows = await fetch_all_rows(source, page_size=3)

        assert rows == []
        assert source.offsets == [0]


class TestFetchReportRows:
    """Tests for fetching through a reporting client"""

    @pytest.mark.asyncio
    async def test_parses_rows(self, fake_client):
        query = ReportQuery(property_id="222", dimensions=("pagePathPlusQueryString",), metrics=ALL_METRICS)

        rows = await fetch_report_rows(fake_client, query, page_size=2)

        assert [row.dimension(0) for row in rows] == ["/x/y-linh", "/x/z-nam", "/x/q-bebe"]
        assert [offset for _, offset, _ in fake_client.calls] == [0, 2]

    @pytest.mark.asyncio
    async def test_client_errors_become_row_source_errors(self, fake_client):
        fake_client.fail("222")
        query = ReportQuery(property_id="222", dimensions=("pagePathPlusQueryString",), metrics=ALL_METRICS)

        with pytest.raises(RowSourceError) as exc_info:
            await fetch_report_rows(fake_client, query)

        assert exc_info.value.property_id == "222"
        assert isinstance(exc_info.value.cause, ConnectionError)
        assert "unavailable" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_totals_row_defaults_to_zero(self, fake_client):
        query = ReportQuery(property_id="222", dimensions=(), metrics=(Metric.ACTIVE_USERS, Metric.SCREEN_PAGE_VIEWS))

        row = await fetch_totals_row(fake_client, query)

        assert row.active_users == 0
        assert row.screen_page_views == 0

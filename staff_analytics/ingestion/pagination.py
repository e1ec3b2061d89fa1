"""
Paginated Report Fetching

Drains a reporting source page by page into an in-memory row set.

The reporting API does not give a reliable total count, so paging continues
while the last page came back exactly full. A result whose size is an exact
multiple of the page size therefore costs one extra, empty request.
"""

from functools import partial
from typing import Any, Awaitable, Callable, List, Mapping, Sequence, TypeVar

import structlog

from staff_analytics.exceptions import RowSourceError
from .rows import MetricRow, parse_rows
from .source import ReportingClient, ReportQuery

logger = structlog.get_logger(__name__)

PAGE_SIZE = 100000

T = TypeVar("T")

PageFetcher = Callable[[int, int], Awaitable[Sequence[T]]]


async def fetch_all_rows(fetch_page: PageFetcher, page_size: int = PAGE_SIZE) -> List[T]:
    """
    Accumulate pages until one comes back shorter than ``page_size``.

    Args:
        fetch_page: Coroutine function taking ``(offset, limit)``
        page_size: Rows requested per page

    Returns:
        All rows, in page order
    """
    rows: List[T] = []
    offset = 0

    while True:
        page = await fetch_page(offset, page_size)
        rows.extend(page)
        if len(page) != page_size:
            break
        offset += page_size

    return rows


def _error_details(error: BaseException) -> Any:
    """Upstream detail payload, when the client error carries one"""
    response = getattr(error, "response", None)
    data = getattr(response, "data", None)
    if data is not None:
        return data
    details = getattr(error, "errors", None) or getattr(error, "details", None)
    # gRPC errors expose details() as a method
    if callable(details):
        details = details()
    return details or None



async def _run_report(
    client: ReportingClient,
    query: ReportQuery,
    offset: int,
    limit: int,
) -> Sequence[Mapping[str, Any]]:
    try:
        return await client.run_report(query, offset, limit)
    except Exception as e:
        raise RowSourceError(query.property_id, e, details=_error_details(e)) from e


async def fetch_report_rows(
    client: ReportingClient,
    query: ReportQuery,
    page_size: int = PAGE_SIZE,
) -> List[MetricRow]:
    """
    Fetch every row for ``query`` and parse it.

    Raises:
        RowSourceError: if any page request fails
    """
    raw_rows = await fetch_all_rows(partial(_run_report, client, query), page_size)

    logger.debug(
        "Report rows fetched",
        property_id=query.property_id,
        dimensions=list(query.dimensions),
        rows=len(raw_rows),
    )

    return parse_rows(raw_rows, query.metrics)


async def fetch_totals_row(client: ReportingClient, query: ReportQuery) -> MetricRow:
    """Fetch a single totals row (zero-dimension query); all zero when empty"""
    raw_rows = await _run_report(client, query, 0, 1)
    if not raw_rows:
        return MetricRow(dimensions=())
    return MetricRow.from_raw(raw_rows[0], query.metrics)

"""
Employee Report Endpoints
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
import structlog

from staff_analytics.config import Settings
from staff_analytics.exceptions import MissingParameterError
from staff_analytics.reporting import EntityReportBuilder, ReportMode
from ..dependencies import get_app_settings, get_report_builder, resolve_site
from ..schemas import ReportResponse

router = APIRouter()
logger = structlog.get_logger(__name__)


@router.get("/report", response_model=ReportResponse)
async def get_report(
    property_id: Optional[str] = Query(None, alias="propertyId"),
    employee_id: Optional[str] = Query(None, alias="employeeId"),
    alias: Optional[str] = Query(None),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    order_metric: str = Query("screenPageViews", alias="orderMetric"),
    mode: Optional[str] = Query(None),
    settings: Settings = Depends(get_app_settings),
    builder: EntityReportBuilder = Depends(get_report_builder),
) -> ReportResponse:
    """
    Detail report for one employee.

    Alias mode takes ``alias``; employee mode takes ``employeeId``.
    """
    site = resolve_site(settings, property_id)
    report_mode = ReportMode.parse(mode, settings.reporting.default_mode)
    date_range = builder.service.date_range(start_date, end_date)

    logger.info("Report requested", property_id=site.id, mode=report_mode.value)

    if report_mode is ReportMode.ALIAS:
        if not alias:
            raise MissingParameterError("alias")
        report = await builder.alias_report(site.id, alias, date_range, order_metric)
    else:
        if not employee_id:
            raise MissingParameterError("employeeId")
        report = await builder.employee_report(site.id, employee_id, date_range, order_metric)

    return ReportResponse.from_report(report)

"""
FastAPI dependencies.

The reporting client is attached to ``app.state`` by ``create_api_app``; building
it (credentials, transport) happens outside this package.
"""

from typing import Optional

from fastapi import Depends, Request

from staff_analytics.config import Settings, SiteProperty, find_site, normalize_property_id
from staff_analytics.exceptions import MissingParameterError, ReportingClientUnavailableError, UnknownSourceError
from staff_analytics.ingestion.source import ReportingClient
from staff_analytics.reporting import EntityReportBuilder, LeaderboardService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_reporting_client(request: Request) -> ReportingClient:
    client: Optional[ReportingClient] = getattr(request.app.state, "reporting_client", None)
    if client is None:
        raise ReportingClientUnavailableError()
    return client


def get_leaderboard_service(
    client: ReportingClient = Depends(get_reporting_client),
    settings: Settings = Depends(get_app_settings),
) -> LeaderboardService:
    return LeaderboardService(client, settings.reporting)


def get_report_builder(
    service: LeaderboardService = Depends(get_leaderboard_service),
) -> EntityReportBuilder:
    return EntityReportBuilder(service)


def resolve_site(settings: Settings, property_id: Optional[str]) -> SiteProperty:
    """
    Site for a requested property id.

    With no configured sites any property id is accepted as-is.

    Raises:
        MissingParameterError: if ``property_id`` is empty
        UnknownSourceError: if sites are configured and none matches
    """
    if not property_id:
        raise MissingParameterError("propertyId")

    sites = settings.reporting.sites
    if not sites:
        normalized = normalize_property_id(property_id)
        return SiteProperty(label=normalized, id=normalized)

    site = find_site(sites, property_id)
    if site is None:
        raise UnknownSourceError(property_id)
    return site

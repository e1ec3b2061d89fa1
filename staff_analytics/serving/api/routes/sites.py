"""
Site and Alias Configuration Endpoints
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
import structlog

from staff_analytics.config import Settings, normalize_property_id
from staff_analytics.identity.resolver import IdentityResolver
from ..dependencies import get_app_settings
from ..schemas import AliasMapResponse, DefaultAliasResponse, SiteModel, SitesResponse

router = APIRouter()
logger = structlog.get_logger(__name__)


@router.get("/sites", response_model=SitesResponse)
async def list_sites(settings: Settings = Depends(get_app_settings)) -> SitesResponse:
    """Configured reporting sources."""
    return SitesResponse(
        sites=[SiteModel(label=site.label, id=site.id) for site in settings.reporting.sites]
    )


@router.get("/aliasMap", response_model=AliasMapResponse)
async def get_alias_map(settings: Settings = Depends(get_app_settings)) -> AliasMapResponse:
    """Loaded alias tables, per source."""
    alias_map = settings.reporting.alias_map
    logger.debug("Alias map requested", sources=len(alias_map))
    return AliasMapResponse(alias_map=alias_map)


@router.get("/defaultAlias", response_model=DefaultAliasResponse)
async def get_default_alias(
    property_id: Optional[str] = Query(None, alias="propertyId"),
    settings: Settings = Depends(get_app_settings),
) -> DefaultAliasResponse:
    """
    Alias to preselect for a property.

    The configured default when there is one, otherwise the first alias
    registered for the property, otherwise an empty string.
    """
    if not property_id:
        return DefaultAliasResponse(alias="")

    reporting = settings.reporting
    configured = reporting.default_alias_map.get(normalize_property_id(property_id))
    if configured:
        return DefaultAliasResponse(alias=configured)

    resolver = IdentityResolver.for_source(reporting.alias_map, property_id)
    first = next(iter(resolver.aliases), "")
    return DefaultAliasResponse(alias=first)

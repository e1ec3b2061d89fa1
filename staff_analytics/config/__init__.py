"""
Staff Analytics Leaderboards
Configuration Module
"""
from .aliases import AliasMap, load_alias_map, load_default_alias_map
from .settings import Settings, get_settings
from .sites import SiteProperty, find_site, normalize_property_id, parse_sites

__all__ = [
    "AliasMap",
    "load_alias_map",
    "load_default_alias_map",
    "Settings",
    "get_settings",
    "SiteProperty",
    "find_site",
    "normalize_property_id",
    "parse_sites",
]

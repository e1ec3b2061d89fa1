"""
Alias map loading.

The alias map is read once at startup from JSON of the form
``{"<propertyId>": {"<alias>": "<employeeId>"}}``. Configuration problems
never fail the process: a malformed document means no aliases at all, and a
malformed entry means no aliases for that one source.
"""

import json
from typing import Any, Dict, Optional

import structlog

from .sites import normalize_property_id

logger = structlog.get_logger(__name__)

AliasMap = Dict[str, Dict[str, str]]


def _parse_json_object(raw: Optional[str], setting: str) -> Dict[str, Any]:
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except ValueError as e:
        logger.warning("Ignoring malformed JSON setting", setting=setting, error=str(e))
        return {}
    if not isinstance(parsed, dict):
        logger.warning("Ignoring non-object JSON setting", setting=setting, type=type(parsed).__name__)
        return {}
    return parsed


def load_alias_map(raw: Optional[str]) -> AliasMap:
    """Parse ``ALIAS_MAP`` into per-source alias tables"""
    alias_map: AliasMap = {}

    for property_id, entries in _parse_json_object(raw, "ALIAS_MAP").items():
        if not isinstance(entries, dict):
            logger.warning("Ignoring alias entry that is not an object", property_id=property_id)
            continue

        aliases = {
            str(alias): str(employee)
            for alias, employee in entries.items()
            if alias and isinstance(employee, (str, int))
        }
        skipped = len(entries) - len(aliases)
        if skipped:
            logger.warning("Skipped malformed aliases", property_id=property_id, skipped=skipped)

        alias_map[normalize_property_id(str(property_id))] = aliases

    return alias_map


def load_default_alias_map(raw: Optional[str]) -> Dict[str, str]:
    """Parse ``DEFAULT_ALIAS_MAP`` (propertyId -> alias)"""
    return {
        normalize_property_id(str(property_id)): str(alias)
        for property_id, alias in _parse_json_object(raw, "DEFAULT_ALIAS_MAP").items()
        if isinstance(alias, str) and alias
    }

"""
Site (property) configuration parsing.

Sites are declared as a comma separated list, e.g.
``blog:123456,shop(789012),news: properties/345678``.
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from staff_analytics.exceptions import ConfigurationError

_PAREN_PATTERN = re.compile(r"^(.*?)\((\d+)\)$")
_DIGITS_PATTERN = re.compile(r"\d+")


@dataclass(frozen=True)
class SiteProperty:
    """One reporting source"""
    label: str
    id: str


def normalize_property_id(property_id: Optional[str]) -> str:
    """Strip a ``properties/`` prefix and keep the numeric id."""
    cleaned = (property_id or "").strip()
    if cleaned.startswith("properties/"):
        cleaned = cleaned[len("properties/"):].strip()
    match = _DIGITS_PATTERN.search(cleaned)
    return match.group(0) if match else cleaned


def parse_sites(raw: Optional[str]) -> List[SiteProperty]:
    """
    Parse the site list setting.

    Supports ``label:id``, ``label(id)`` and ``label: properties/id``. An entry
    without an id uses its label as the id.

    Raises:
        ConfigurationError: if an entry has no label
    """
    if not raw:
        return []

    sites = []
    for chunk in raw.split(","):
        pair = chunk.strip()
        if not pair:
            continue

        label, property_id = pair, ""
        if ":" in pair:
            label, _, property_id = pair.partition(":")
            label = label.strip()
            property_id = property_id.strip()
        elif "(" in pair and ")" in pair:
            match = _PAREN_PATTERN.match(pair)
            if match:
                label = match.group(1).strip()
                property_id = match.group(2).strip()

        if not label:
            raise ConfigurationError('GA4_SITES must be formatted as "label:propertyId,label2:propertyId2"')

        sites.append(SiteProperty(label=label, id=normalize_property_id(property_id or label)))

    return sites


def find_site(sites: List[SiteProperty], property_id: str) -> Optional[SiteProperty]:
    """Look up a configured site by (normalized) property id"""
    normalized = normalize_property_id(property_id)
    for site in sites:
        if site.id == normalized:
            return site
    return None

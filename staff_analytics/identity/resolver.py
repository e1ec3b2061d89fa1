"""
Identity resolution against a single source's alias table.
"""

from typing import FrozenSet, Mapping, Optional

from staff_analytics.config.aliases import AliasMap
from staff_analytics.config.sites import normalize_property_id


class IdentityResolver:
    """
    Collapses aliases to canonical employee identities for one source.

    Resolution is one-directional: a registered alias maps to its employee,
    anything else is already canonical and is returned unchanged.

    Example:
        resolver = IdentityResolver.for_source(alias_map, "123456")
        resolver.resolve("bebe")  # "linh"
    """

    def __init__(self, aliases: Optional[Mapping[str, str]] = None):
        self._aliases = dict(aliases or {})
        self._allow_list = frozenset(self._aliases)

    @classmethod
    def for_source(cls, alias_map: AliasMap, property_id: str) -> "IdentityResolver":
        """Resolver for one property; empty when the property has no aliases"""
        return cls(alias_map.get(normalize_property_id(property_id)))

    @property
    def aliases(self) -> Mapping[str, str]:
        return dict(self._aliases)

    @property
    def allow_list(self) -> FrozenSet[str]:
        """Registered aliases"""
        return self._allow_list

    @property
    def enforces_allow_list(self) -> bool:
        """Only registered aliases count when the source has any"""
        return bool(self._allow_list)

    def is_allowed(self, alias: str) -> bool:
        return not self.enforces_allow_list or alias in self._allow_list

    def resolve(self, key: str) -> str:
        """Canonical identity for an alias or an employee id"""
        return self._aliases.get(key, key)

    def alias_for(self, identity: str) -> Optional[str]:
        """
        Reverse lookup for display purposes.

        Scans the alias table for the first alias mapped to ``identity``. This
        is not identity resolution; several aliases may share an employee.
        """
        for alias, employee in self._aliases.items():
            if employee == identity:
                return alias
        return None

    def __repr__(self) -> str:
        return f"IdentityResolver(aliases={len(self._aliases)})"

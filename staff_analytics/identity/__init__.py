"""
Identity Module
"""
from .aliases import extract_alias_from_path, extract_alias_from_title, find_alias_in_title, match_order
from .resolver import IdentityResolver

__all__ = [
    "extract_alias_from_path",
    "extract_alias_from_title",
    "find_alias_in_title",
    "match_order",
    "IdentityResolver",
]

"""
Alias extraction.

An alias is a short token standing in for an employee. Path-based sources end
their URLs with it (``/posts/foo/long-path-bebe/`` -> ``bebe``); title-based
sources mention it somewhere in the page title or screen class, so it can only
be found by matching against the source's registered aliases.

Both extractors return ``""`` when no alias is found; callers drop such rows.
"""

from typing import Iterable, List, Sequence


def extract_alias_from_path(page: str) -> str:
    """Return the alias at the end of a page path, or ``""``."""
    path_only = page.split("?", 1)[0].split("#", 1)[0]
    segments = [segment for segment in path_only.split("/") if segment]
    if not segments:
        return ""

    last_segment = segments[-1]
    if "-" in last_segment:
        return last_segment.rsplit("-", 1)[1] or last_segment
    return last_segment


def match_order(aliases: Iterable[str]) -> List[str]:
    """
    Order in which title matching tries aliases.

    Longest first, so a specific alias is never shadowed by a shorter alias it
    contains; equal lengths fall back to lexical order.
    """
    return sorted((alias for alias in set(aliases) if alias), key=lambda alias: (-len(alias), alias))


def find_alias_in_title(title: str, screen_class: str, ordered_aliases: Sequence[str]) -> str:
    """
    Return the first of ``ordered_aliases`` contained in the title/screen class.

    Aliases are tried in the given order; pass the result of ``match_order``.
    """
    combined = f"{title} {screen_class}".lower()
    for alias in ordered_aliases:
        if alias.lower() in combined:
            return alias
    return ""


def extract_alias_from_title(title: str, screen_class: str, allowed_aliases: Iterable[str]) -> str:
    """Return the first allow-listed alias contained in the title/screen class, or ``""``."""
    return find_alias_in_title(title, screen_class, match_order(allowed_aliases))

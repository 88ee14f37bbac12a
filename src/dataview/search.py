"""Free-text search across record fields and the recent-search history."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Iterator, Sequence

from .accessors import Accessor, make_accessor

logger = logging.getLogger(__name__)

Predicate = Callable[[Any], bool]

DEFAULT_RECENT_LIMIT = 5


def _match_all(record: Any) -> bool:
    return True


def build_matcher(query: str, field_extractors: Sequence[str | Accessor]) -> Predicate:
    """Predicate that is true when ANY extractor's value contains *query*.

    Matching is case-insensitive and null-safe. A blank query matches
    every record without touching the extractors.
    """
    if not query or not query.strip():
        return _match_all

    needle = query.lower()
    extractors = [make_accessor(f) for f in field_extractors]

    def matches(record: Any) -> bool:
        for extract in extractors:
            value = extract(record)
            if value is not None and needle in str(value).lower():
                return True
        return False

    return matches


def suggest(query: str, candidates: Iterable[str]) -> list[str]:
    """Candidates containing *query* (case-insensitive), minus exact matches."""
    q = (query or "").lower()
    return [c for c in candidates if q in c.lower() and c.lower() != q]


class RecentSearches:
    """Most-recent-first, de-duplicated, capped list of committed queries.

    A query already in the list is NOT moved to the front when searched
    again; only novel queries change the history.
    """

    def __init__(self, initial: Iterable[str] = (), limit: int = DEFAULT_RECENT_LIMIT) -> None:
        self.limit = max(1, int(limit))
        self._items: list[str] = []
        for q in initial:
            q = (q or "").strip()
            if q and q not in self._items and len(self._items) < self.limit:
                self._items.append(q)

    def commit(self, query: str) -> bool:
        """Record *query*; returns True if the history changed."""
        q = (query or "").strip()
        if not q or q in self._items:
            return False
        self._items.insert(0, q)
        del self._items[self.limit:]
        logger.debug("Recent searches now %s", self._items)
        return True

    def clear(self) -> None:
        self._items.clear()

    @property
    def items(self) -> list[str]:
        return list(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, query: object) -> bool:
        return query in self._items

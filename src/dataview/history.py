"""diskcache-backed persistence of recent searches, one list per view."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import diskcache

from .search import DEFAULT_RECENT_LIMIT

logger = logging.getLogger(__name__)

_KEY_PREFIX = "recent:"


class RecentSearchStore:
    """Persistent store for the recent-search lists of named views.

    The engine keeps its history in memory; callers that want it to survive
    restarts load it into a DataView and save it back after a search.
    """

    def __init__(self, cache_dir: str | Path, limit: int = DEFAULT_RECENT_LIMIT) -> None:
        self.cache_dir = Path(cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self.limit = limit
        self._cache = diskcache.Cache(str(self.cache_dir))

    def _key(self, view: str) -> str:
        return f"{_KEY_PREFIX}{view}"

    def load(self, view: str) -> list[str]:
        stored: Any = self._cache.get(self._key(view), default=[])
        if not isinstance(stored, list):
            logger.warning("Discarding malformed search history for view %r", view)
            return []
        return [s for s in stored if isinstance(s, str)][: self.limit]

    def save(self, view: str, searches: list[str]) -> None:
        self._cache.set(self._key(view), list(searches)[: self.limit])

    def views(self) -> list[str]:
        return sorted(
            k[len(_KEY_PREFIX):] for k in self._cache.iterkeys()
            if isinstance(k, str) and k.startswith(_KEY_PREFIX)
        )

    def clear(self, view: str | None = None) -> None:
        if view is None:
            self._cache.clear()
        else:
            self._cache.delete(self._key(view))

    def close(self) -> None:
        self._cache.close()

    def __enter__(self) -> "RecentSearchStore":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

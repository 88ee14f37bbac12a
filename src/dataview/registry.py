"""Immutable registry of the filters offered by one list view."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterable, Iterator

from .models import FilterOption


class FilterRegistry:
    """Ordered, read-only collection of FilterOption keyed by id.

    Shared across renders; constructed once per list view. Duplicate ids
    are rejected at construction time.
    """

    def __init__(self, options: Iterable[FilterOption | dict[str, Any]] = ()) -> None:
        parsed = [
            o if isinstance(o, FilterOption) else FilterOption.model_validate(o)
            for o in options
        ]
        by_id: dict[str, FilterOption] = {}
        for option in parsed:
            if option.id in by_id:
                raise ValueError(f"duplicate filter id: {option.id!r}")
            by_id[option.id] = option
        self._options = tuple(parsed)
        self._by_id = MappingProxyType(by_id)

    def get(self, filter_id: str) -> FilterOption | None:
        return self._by_id.get(filter_id)

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(self._by_id)

    def __contains__(self, filter_id: object) -> bool:
        return filter_id in self._by_id

    def __iter__(self) -> Iterator[FilterOption]:
        return iter(self._options)

    def __len__(self) -> int:
        return len(self._options)

    def __repr__(self) -> str:
        return f"FilterRegistry({list(self.ids)!r})"

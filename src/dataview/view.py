"""List view orchestrator: search -> filter -> sort -> paginate.

One ``DataView`` per list screen. It owns the filter state, sort config,
page state and recent-search history for that screen and re-runs the whole
pipeline synchronously after every committed change, then publishes a
``ViewSnapshot`` to its subscribers (the render boundary).

State machine::

    IDLE --open_filters()/set_filter()--> EDITING
    EDITING --apply_filters()--> APPLYING --> IDLE
    EDITING --cancel_filters()--> CANCELLING --> IDLE
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping, Sequence

from .accessors import Accessor
from .filter_state import FilterStateStore
from .models import (
    FilterOption,
    FilterType,
    PageState,
    SortConfig,
    SortDirection,
    ViewConfig,
    ViewMode,
    ViewSnapshot,
)
from .pagination import coerce_positive_int, page_window, paginate
from .predicates import compile_filters
from .registry import FilterRegistry
from .search import DEFAULT_RECENT_LIMIT, RecentSearches, build_matcher, suggest
from .sorting import next_sort, sort_records

logger = logging.getLogger(__name__)

Listener = Callable[[ViewSnapshot], None]


class DataView:
    """Search/filter/sort/paginate engine bound to one list view.

    Callable search fields, filter accessors and sort resolvers may assume
    well-formed rows: a lookup error they raise (KeyError, TypeError, ...)
    is read as a missing value.
    """

    def __init__(
        self,
        records: Iterable[Any] = (),
        filters: FilterRegistry | Iterable[FilterOption | dict[str, Any]] = (),
        search_fields: Sequence[str | Accessor] = (),
        sort_resolvers: Mapping[str, Callable[[Any], Any]] | None = None,
        page_size: int = 10,
        default_sort: SortConfig | None = None,
        recent_searches: Iterable[str] = (),
        recent_limit: int = DEFAULT_RECENT_LIMIT,
        suggestions: Iterable[str] = (),
    ) -> None:
        self._registry = filters if isinstance(filters, FilterRegistry) else FilterRegistry(filters)
        self._filters = FilterStateStore(self._registry)
        self._search_fields = list(search_fields)
        self._resolvers = dict(sort_resolvers or {})
        self._recent = RecentSearches(recent_searches, limit=recent_limit)
        self._suggestions = list(suggestions)

        self._records: list[Any] = list(records)
        self._query = ""
        self._sort = default_sort
        self._page = 1
        self._page_size = coerce_positive_int(page_size)
        self._mode = ViewMode.IDLE

        self._listeners: list[Listener] = []
        self._filtered: list[Any] = []
        self._snapshot = self._recompute()

    @classmethod
    def from_config(cls, config: ViewConfig, records: Iterable[Any] = (), **kwargs: Any) -> "DataView":
        kwargs.setdefault("filters", config.filters)
        kwargs.setdefault("search_fields", config.search_fields)
        kwargs.setdefault("default_sort", config.default_sort)
        if config.page_size:
            kwargs.setdefault("page_size", config.page_size)
        return cls(records, **kwargs)

    # =====================================================================
    # Read access
    # =====================================================================

    @property
    def snapshot(self) -> ViewSnapshot:
        return self._snapshot

    @property
    def registry(self) -> FilterRegistry:
        return self._registry

    @property
    def filter_state(self) -> FilterStateStore:
        return self._filters

    @property
    def mode(self) -> ViewMode:
        return self._mode

    @property
    def query(self) -> str:
        return self._query

    @property
    def sort(self) -> SortConfig | None:
        return self._sort

    @property
    def recent_searches(self) -> list[str]:
        return self._recent.items

    @property
    def page_state(self) -> PageState:
        return PageState(
            current_page=self._snapshot.current_page,
            items_per_page=self._page_size,
            total_items=self._snapshot.total_items,
        )

    def filtered_rows(self) -> list[Any]:
        """Every row after search, filters and sort (not paginated)."""
        return list(self._filtered)

    def suggestions(self, query: str) -> list[str]:
        """Recent searches and configured suggestions that extend *query*."""
        seen: list[str] = []
        for candidate in [*self._recent, *self._suggestions]:
            if candidate not in seen:
                seen.append(candidate)
        return suggest(query, seen)

    # =====================================================================
    # Render boundary
    # =====================================================================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with every republished snapshot; returns an unsubscribe."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # =====================================================================
    # Data source
    # =====================================================================

    def set_records(self, records: Iterable[Any]) -> ViewSnapshot:
        """Replace the dataset (e.g. after a fetch); returns to page 1."""
        self._records = list(records)
        self._page = 1
        return self._publish()

    # =====================================================================
    # Filter panel
    # =====================================================================

    def open_filters(self) -> None:
        if self._mode is ViewMode.IDLE:
            self._filters.cancel()
            self._set_mode(ViewMode.EDITING)

    def set_filter(self, filter_id: str, value: Any) -> bool:
        self.open_filters()
        return self._filters.set_draft(filter_id, value)

    def toggle_filter_option(self, filter_id: str, value: Any) -> bool:
        """Checkbox-style toggle of one option of a select or multiselect filter."""
        self.open_filters()
        option = self._registry.get(filter_id)
        if option is not None and option.type is FilterType.SELECT:
            return self._filters.toggle_select_value(filter_id, value)
        return self._filters.toggle_multiselect_value(filter_id, value)

    def toggle_filter_flag(self, filter_id: str) -> bool:
        self.open_filters()
        return self._filters.toggle_boolean(filter_id)

    def apply_filters(self) -> ViewSnapshot:
        """Commit the draft; the published snapshot is already back in IDLE."""
        self._set_mode(ViewMode.APPLYING)
        self._filters.apply()
        self._page = 1
        self._mode = ViewMode.IDLE
        return self._publish()

    def cancel_filters(self) -> None:
        self._set_mode(ViewMode.CANCELLING)
        self._filters.cancel()
        self._set_mode(ViewMode.IDLE)

    def reset_filters(self) -> ViewSnapshot:
        """Clear every filter and the search query; shows the whole dataset again."""
        self._filters.reset_all()
        self._query = ""
        self._page = 1
        return self._publish()

    # =====================================================================
    # Search
    # =====================================================================

    def search(self, query: str) -> ViewSnapshot:
        """Commit *query*: record it in the history and filter by it."""
        self._query = query or ""
        self._recent.commit(self._query)
        self._page = 1
        return self._publish()

    def clear_search(self) -> ViewSnapshot:
        self._query = ""
        self._page = 1
        return self._publish()

    # =====================================================================
    # Sort
    # =====================================================================

    def sort_by(self, key: str) -> ViewSnapshot:
        """Header click: same key flips direction, a new key sorts ascending."""
        self._sort = next_sort(self._sort, key)
        return self._publish()

    def set_sort(self, key: str, direction: SortDirection | str = SortDirection.ASC) -> ViewSnapshot:
        desc = str(getattr(direction, "value", direction)).lower() == SortDirection.DESC.value
        self._sort = SortConfig(key=key, direction=SortDirection.DESC if desc else SortDirection.ASC)
        return self._publish()

    def clear_sort(self) -> ViewSnapshot:
        self._sort = None
        return self._publish()

    # =====================================================================
    # Paging
    # =====================================================================

    def go_to_page(self, page: Any) -> ViewSnapshot:
        self._page = coerce_positive_int(page)
        return self._publish()

    def next_page(self) -> ViewSnapshot:
        return self.go_to_page(self._snapshot.current_page + 1)

    def previous_page(self) -> ViewSnapshot:
        return self.go_to_page(self._snapshot.current_page - 1)

    def set_page_size(self, page_size: Any) -> ViewSnapshot:
        self._page_size = coerce_positive_int(page_size)
        self._page = 1
        return self._publish()

    # =====================================================================
    # Pipeline
    # =====================================================================

    def _recompute(self) -> ViewSnapshot:
        matcher = build_matcher(self._query, self._search_fields)
        predicate = compile_filters(self._registry, self._filters.applied)

        searched = [r for r in self._records if matcher(r)]
        filtered = [r for r in searched if predicate(r)]
        ordered = sort_records(filtered, self._sort, self._resolvers)
        page = paginate(ordered, self._page, self._page_size)

        self._page = page.page
        self._filtered = ordered
        logger.debug(
            "Recomputed view: %d records -> %d searched -> %d filtered, page %d/%d",
            len(self._records), len(searched), len(filtered), page.page, page.total_pages,
        )
        return ViewSnapshot(
            displayed_rows=page.items,
            total_items=page.total_items,
            total_pages=page.total_pages,
            current_page=page.page,
            page_size=page.page_size,
            active_filter_count=self._filters.active_count,
            recent_searches=self._recent.items,
            start_item=page.start_item,
            end_item=page.end_item,
            page_numbers=page_window(page.page, page.total_pages),
            query=self._query,
            sort=self._sort,
            mode=self._mode,
        )

    def _set_mode(self, mode: ViewMode) -> None:
        # Mode changes alone do not recompute or notify listeners
        self._mode = mode
        self._snapshot = self._snapshot.model_copy(update={"mode": mode})

    def _publish(self) -> ViewSnapshot:
        self._snapshot = self._recompute()
        for listener in list(self._listeners):
            listener(self._snapshot)
        return self._snapshot

"""dataview: the search / filter / sort / paginate engine behind list views.

Build one ``DataView`` per list screen from its records, filter registry and
search fields, then drive it with user intent (search, filters, sort clicks,
page changes) and render its ``snapshot``.
"""

from .filter_state import FilterStateStore
from .models import (
    ColumnSpec,
    FilterOption,
    FilterState,
    FilterType,
    PageState,
    RangeValue,
    SelectOption,
    SortConfig,
    SortDirection,
    ViewConfig,
    ViewMode,
    ViewSnapshot,
)
from .pagination import Page, page_window, paginate
from .predicates import compile_filter, compile_filters
from .registry import FilterRegistry
from .search import RecentSearches, build_matcher, suggest
from .sorting import build_comparator, sort_records
from .view import DataView

__all__ = [
    "ColumnSpec",
    "DataView",
    "FilterOption",
    "FilterRegistry",
    "FilterState",
    "FilterStateStore",
    "FilterType",
    "Page",
    "PageState",
    "RangeValue",
    "RecentSearches",
    "SelectOption",
    "SortConfig",
    "SortDirection",
    "ViewConfig",
    "ViewMode",
    "ViewSnapshot",
    "build_comparator",
    "build_matcher",
    "compile_filter",
    "compile_filters",
    "page_window",
    "paginate",
    "sort_records",
    "suggest",
]

"""Page slicing with clamping, plus the page-number strip for the UI."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Sequence

DEFAULT_PAGE_SIZE_OPTIONS = (10, 25, 50, 100)
MAX_PAGE_LINKS = 5


def coerce_positive_int(value: Any, floor: int = 1) -> int:
    """Clamp *value* to an int >= *floor*; garbage (None, NaN, "abc") -> *floor*."""
    if isinstance(value, bool):
        return floor
    try:
        number = float(value)
    except (TypeError, ValueError):
        return floor
    if math.isnan(number):
        return floor
    if math.isinf(number):
        return floor if number < 0 else 2 ** 31 - 1
    return max(floor, int(number))


@dataclass
class Page:
    """One page of a filtered/sorted result set."""
    items: list[Any] = field(default_factory=list)
    page: int = 1
    page_size: int = 10
    total_pages: int = 1
    total_items: int = 0

    @property
    def start_item(self) -> int:
        """1-based index of the first row shown (0 when empty)."""
        if not self.items:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def end_item(self) -> int:
        if not self.items:
            return 0
        return self.start_item + len(self.items) - 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1


def total_pages_for(total_items: int, page_size: int) -> int:
    return max(1, math.ceil(total_items / page_size))


def paginate(items: Sequence[Any], page: Any, page_size: Any) -> Page:
    """Slice *items* for *page*, clamping page into [1, total_pages].

    Never raises: an empty sequence yields an empty page 1 of 1, and
    invalid page / page size values are floored to 1.
    """
    size = coerce_positive_int(page_size)
    total = len(items)
    pages = total_pages_for(total, size)
    current = min(coerce_positive_int(page), pages)
    start = (current - 1) * size
    return Page(
        items=list(items[start:start + size]),
        page=current,
        page_size=size,
        total_pages=pages,
        total_items=total,
    )


def page_window(current: int, total: int, max_pages: int = MAX_PAGE_LINKS) -> list[int | None]:
    """Page numbers to show in a pager; None marks an ellipsis.

    All pages when they fit, otherwise the first and last page around a
    three-page window that follows *current*.
    """
    total = max(1, total)
    current = min(max(1, current), total)
    if total <= max_pages:
        return list(range(1, total + 1))
    if current <= 3:
        return [1, 2, 3, 4, None, total]
    if current >= total - 2:
        return [1, None, total - 3, total - 2, total - 1, total]
    return [1, None, current - 1, current, current + 1, None, total]

"""Draft / applied filter state for one list view.

The draft generation is what the operator is editing in an open filter
panel; the applied generation is what the pipeline actually filters with.
Nothing here recomputes results -- the orchestrator does that after
``apply()`` or ``reset_all()``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any, Callable

from .accessors import parse_date, parse_number
from .models import FilterOption, FilterState, FilterType, RangeValue
from .registry import FilterRegistry

logger = logging.getLogger(__name__)

_TRUTHY = {"true", "1", "yes", "on"}


def empty_value(option: FilterOption) -> Any:
    """Type-appropriate "unset" value for *option*."""
    match option.type:
        case FilterType.MULTISELECT:
            return frozenset()
        case FilterType.DATE | FilterType.DATERANGE:
            return None
        case FilterType.BOOLEAN:
            return False
        case _:
            return ""


def is_unset(value: Any) -> bool:
    """Whether *value* counts as "no filter" under the per-type unset rule."""
    if value is None:
        return True
    if isinstance(value, bool):
        return not value
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, RangeValue):
        return value.is_empty
    if isinstance(value, (set, frozenset, list, tuple)):
        return len(value) == 0
    return False


def count_active(values: Mapping[str, Any]) -> int:
    return sum(1 for v in values.values() if not is_unset(v))


def _to_range(value: Any) -> RangeValue | None:
    if isinstance(value, RangeValue):
        return value
    if isinstance(value, Mapping):
        if "from" in value or "to" in value:
            return RangeValue.model_validate(dict(value))
        return RangeValue(start=value.get("start"), end=value.get("end"))
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return RangeValue(start=value[0], end=value[1])
    return None


def _usable_range(rng: RangeValue, parse: Callable[[Any], Any]) -> RangeValue | None:
    """Drop bounds *parse* rejects; None when no bound is left."""
    start = rng.start if parse(rng.start) is not None else None
    end = rng.end if parse(rng.end) is not None else None
    if start is None and end is None:
        return None
    return RangeValue(start=start, end=end)


def normalize_value(option: FilterOption, value: Any) -> Any:
    """Coerce *value* into the shape expected for *option*'s type.

    Unusable input becomes the type-empty value rather than raising, so a
    value counts as active exactly when it can narrow the result set.
    """
    if value is None:
        return empty_value(option)

    match option.type:
        case FilterType.SELECT | FilterType.TEXT:
            return value if isinstance(value, str) else str(value)

        case FilterType.MULTISELECT:
            if isinstance(value, str):
                return frozenset({value})
            if isinstance(value, Iterable):
                try:
                    return frozenset(value)
                except TypeError:
                    pass

        case FilterType.DATE:
            if isinstance(value, date):
                return value.isoformat()[:10]
            if isinstance(value, str):
                if not value.strip():
                    return None
                if parse_date(value) is not None:
                    return value.strip()

        case FilterType.DATERANGE:
            rng = _to_range(value)
            if rng is not None:
                usable = _usable_range(rng, parse_date)
                if usable is not None or rng.is_empty:
                    return usable

        case FilterType.NUMBER:
            if option.range_filter:
                if isinstance(value, str) and not value.strip():
                    return ""
                rng = _to_range(value)
                if rng is not None:
                    usable = _usable_range(rng, parse_number)
                    if usable is not None:
                        return usable
                    if rng.is_empty:
                        return ""
            elif isinstance(value, (str, int, float)) and not isinstance(value, bool):
                return value if isinstance(value, str) else str(value)

        case FilterType.BOOLEAN:
            if isinstance(value, str):
                return value.strip().lower() in _TRUTHY
            return bool(value)

    logger.debug("Discarding value %r for %s filter %r", value, option.type.value, option.id)
    return empty_value(option)


class FilterStateStore:
    """Holds the draft and applied filter values for a registry."""

    def __init__(self, registry: FilterRegistry) -> None:
        self._registry = registry
        initial = {o.id: self._initial_value(o) for o in registry}
        self._applied: dict[str, Any] = dict(initial)
        self._draft: dict[str, Any] = dict(initial)
        self._active_count = count_active(self._applied)

    @staticmethod
    def _initial_value(option: FilterOption) -> Any:
        if option.default_value is not None:
            return normalize_value(option, option.default_value)
        return empty_value(option)

    # -- Read access ---------------------------------------------------------

    @property
    def registry(self) -> FilterRegistry:
        return self._registry

    @property
    def draft(self) -> dict[str, Any]:
        return dict(self._draft)

    @property
    def applied(self) -> dict[str, Any]:
        return dict(self._applied)

    @property
    def active_count(self) -> int:
        return self._active_count

    @property
    def is_dirty(self) -> bool:
        return self._draft != self._applied

    def snapshot(self) -> FilterState:
        return FilterState(draft=self.draft, applied=self.applied, active_count=self._active_count)

    # -- Draft edits (never touch applied) -----------------------------------

    def _option(self, filter_id: str, *types: FilterType) -> FilterOption | None:
        option = self._registry.get(filter_id)
        if option is None:
            logger.debug("Ignoring unknown filter id %r", filter_id)
            return None
        if types and option.type not in types:
            logger.debug("Filter %r is %s, not %s", filter_id, option.type.value,
                         "/".join(t.value for t in types))
            return None
        return option

    def set_draft(self, filter_id: str, value: Any) -> bool:
        """Set the draft value of one filter. Returns False for unknown ids."""
        option = self._option(filter_id)
        if option is None:
            return False
        self._draft[filter_id] = normalize_value(option, value)
        return True

    def toggle_multiselect_value(self, filter_id: str, value: Any) -> bool:
        option = self._option(filter_id, FilterType.MULTISELECT)
        if option is None:
            return False
        current = self._draft.get(filter_id) or frozenset()
        try:
            self._draft[filter_id] = current - {value} if value in current else current | {value}
        except TypeError:
            logger.debug("Unhashable multiselect value %r for %r", value, filter_id)
            return False
        return True

    def toggle_select_value(self, filter_id: str, value: str) -> bool:
        """Select *value*, or unset the filter if it is already selected."""
        option = self._option(filter_id, FilterType.SELECT)
        if option is None:
            return False
        self._draft[filter_id] = "" if self._draft.get(filter_id) == value else value
        return True

    def toggle_boolean(self, filter_id: str) -> bool:
        option = self._option(filter_id, FilterType.BOOLEAN)
        if option is None:
            return False
        self._draft[filter_id] = not bool(self._draft.get(filter_id))
        return True

    # -- Commit / rollback ---------------------------------------------------

    def apply(self) -> dict[str, Any]:
        """Copy draft -> applied and recount active filters."""
        self._applied = dict(self._draft)
        self._active_count = count_active(self._applied)
        logger.debug("Applied filters: %d active", self._active_count)
        return self.applied

    def cancel(self) -> None:
        """Discard the draft by resetting it to the applied state."""
        self._draft = dict(self._applied)

    def reset_all(self) -> None:
        """Clear both generations to each filter's type-empty value."""
        cleared = {o.id: empty_value(o) for o in self._registry}
        self._draft = dict(cleared)
        self._applied = dict(cleared)
        self._active_count = 0

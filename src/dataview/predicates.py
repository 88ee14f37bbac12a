"""Compile applied filter values into a single record predicate.

Each FilterType has exactly one compilation branch; the match below is
exhaustive over the enum, so adding a type without a branch fails loudly
instead of silently passing every record. Unset values compile to
``always_true`` and are dropped from the conjunction.

Dirty record data never raises here: unparseable dates become the Unix
epoch (1970-01-01) and non-numeric values fail numeric ranges.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from typing import Any, Callable, assert_never

from .accessors import make_accessor, parse_date, parse_number, resolve_path
from .filter_state import is_unset, normalize_value
from .models import FilterOption, FilterType, RangeValue
from .registry import FilterRegistry

logger = logging.getLogger(__name__)

Predicate = Callable[[Any], bool]

EPOCH_DAY = date(1970, 1, 1)


def always_true(record: Any) -> bool:
    return True


def record_day(value: Any) -> date:
    """Calendar day of a record value; unparseable values map to the epoch."""
    return parse_date(value) or EPOCH_DAY


def _text(value: Any) -> str:
    return "" if value is None else str(value).lower()


def _getter(option: FilterOption) -> Callable[[Any], Any]:
    if option.accessor is not None:
        return make_accessor(option.accessor)
    key = option.key
    return lambda record: resolve_path(record, key)


# ---------------------------------------------------------------------------
# Per-type compilation
# ---------------------------------------------------------------------------

def _member_of(selected: frozenset) -> Callable[[Any], bool]:
    def check(value: Any) -> bool:
        try:
            return value in selected
        except TypeError:  # unhashable record value
            return False
    return check


def _number_range(get: Callable[[Any], Any], rng: RangeValue) -> Predicate:
    lo = parse_number(rng.start)
    hi = parse_number(rng.end)
    if lo is None and hi is None:
        return always_true

    def predicate(record: Any) -> bool:
        n = parse_number(get(record))
        if n is None:
            return False
        return (lo is None or lo <= n) and (hi is None or n <= hi)

    return predicate


def _date_range(get: Callable[[Any], Any], rng: RangeValue) -> Predicate:
    lo = parse_date(rng.start)
    hi = parse_date(rng.end)
    if lo is None and hi is None:
        return always_true

    def predicate(record: Any) -> bool:
        day = record_day(get(record))
        return (lo is None or lo <= day) and (hi is None or day <= hi)

    return predicate


def compile_filter(option: FilterOption, raw_value: Any) -> Predicate:
    """Predicate for a single filter; ``always_true`` when the value is unset."""
    value = normalize_value(option, raw_value)
    if is_unset(value):
        return always_true

    get = _getter(option)

    match option.type:
        case FilterType.SELECT:
            return lambda record: get(record) == value

        case FilterType.MULTISELECT:
            check = _member_of(frozenset(value))
            return lambda record: check(get(record))

        case FilterType.TEXT:
            needle = value.strip().lower()
            return lambda record: needle in _text(get(record))

        case FilterType.NUMBER:
            if isinstance(value, RangeValue):
                return _number_range(get, value)
            needle = str(value).strip().lower()
            return lambda record: needle in _text(get(record))

        case FilterType.DATE:
            target = parse_date(value)
            if target is None:
                logger.debug("Unparseable date %r for filter %r ignored", value, option.id)
                return always_true
            return lambda record: record_day(get(record)) == target

        case FilterType.DATERANGE:
            return _date_range(get, value)

        case FilterType.BOOLEAN:
            return lambda record: get(record) is True

        case _:
            assert_never(option.type)


def compile_filters(registry: FilterRegistry, applied: Mapping[str, Any]) -> Predicate:
    """AND of every active filter in *applied*; pass-through when none are active.

    Ids not present in *registry* are ignored. *applied* is not modified.
    """
    predicates: list[Predicate] = []
    for filter_id, raw_value in applied.items():
        option = registry.get(filter_id)
        if option is None:
            logger.debug("Applied value for unknown filter %r ignored", filter_id)
            continue
        predicate = compile_filter(option, raw_value)
        if predicate is not always_true:
            predicates.append(predicate)

    if not predicates:
        return always_true
    if len(predicates) == 1:
        return predicates[0]
    return lambda record: all(p(record) for p in predicates)

"""Tests for the predicate compiler."""

import copy
from datetime import date
from itertools import combinations

import pytest

from dataview.models import FilterOption, FilterType, SelectOption
from dataview.predicates import (
    always_true,
    compile_filter,
    compile_filters,
    parse_date,
    parse_number,
    record_day,
)
from dataview.registry import FilterRegistry


def _select(fid, values, **kw):
    return FilterOption(id=fid, label=fid, type=FilterType.SELECT,
                        options=[SelectOption(value=v, label=v) for v in values], **kw)


def _multi(fid, values, **kw):
    return FilterOption(id=fid, label=fid, type=FilterType.MULTISELECT,
                        options=[SelectOption(value=v, label=v) for v in values], **kw)


@pytest.fixture
def registry():
    return FilterRegistry([
        _select("status", ["pending", "approved", "rejected"]),
        _multi("method", ["card", "bank", "mobile"], field="paymentMethod.name"),
        FilterOption(id="requester", label="Requester", type=FilterType.TEXT),
        FilterOption(id="reference", label="Reference", type=FilterType.NUMBER),
        FilterOption(id="amount", label="Amount", type=FilterType.NUMBER, range=True),
        FilterOption(id="requested", label="Requested on", type=FilterType.DATE, field="requested_at"),
        FilterOption(id="period", label="Period", type=FilterType.DATERANGE, field="requested_at"),
        FilterOption(id="urgent", label="Urgent", type=FilterType.BOOLEAN),
    ])


@pytest.fixture
def withdrawals():
    return [
        {"id": 1, "status": "pending", "paymentMethod": {"name": "card"}, "requester": "John Smith",
         "reference": 10045, "amount": 150.0, "requested_at": "2024-03-05T09:30:00Z", "urgent": True},
        {"id": 2, "status": "approved", "paymentMethod": {"name": "bank"}, "requester": "Alice Johnson",
         "reference": 20011, "amount": 2500, "requested_at": "2024-03-20", "urgent": False},
        {"id": 3, "status": "rejected", "paymentMethod": {"name": "mobile"}, "requester": "Bob Stone",
         "reference": 30099, "amount": "75.50", "requested_at": "2024-04-01T00:00:00", "urgent": 1},
        {"id": 4, "status": "pending", "paymentMethod": None, "requester": None,
         "reference": None, "amount": "n/a", "requested_at": "not a date", "urgent": None},
    ]


def _ids(records, predicate):
    return [r["id"] for r in records if predicate(r)]


class TestHelpers:
    def test_parse_date(self):
        assert parse_date("2024-03-05T09:30:00Z") == date(2024, 3, 5)
        assert parse_date("2024-03-05") == date(2024, 3, 5)
        assert parse_date(date(2024, 1, 2)) == date(2024, 1, 2)
        assert parse_date("garbage") is None
        assert parse_date(None) is None

    def test_record_day_falls_back_to_epoch(self):
        assert record_day("garbage") == date(1970, 1, 1)
        assert record_day(12345) == date(1970, 1, 1)

    def test_parse_number(self):
        assert parse_number("1,250.5") == 1250.5
        assert parse_number(3) == 3.0
        assert parse_number(True) is None
        assert parse_number("abc") is None
        assert parse_number(float("nan")) is None


class TestSingleFilters:
    def test_select(self, registry, withdrawals):
        p = compile_filter(registry.get("status"), "pending")
        assert _ids(withdrawals, p) == [1, 4]

    def test_select_unset_passes_everything(self, registry):
        assert compile_filter(registry.get("status"), "") is always_true

    def test_multiselect_on_nested_field(self, registry, withdrawals):
        p = compile_filter(registry.get("method"), {"card", "mobile"})
        assert _ids(withdrawals, p) == [1, 3]

    def test_multiselect_empty_set_passes(self, registry):
        assert compile_filter(registry.get("method"), set()) is always_true

    def test_text_is_case_insensitive_substring(self, registry, withdrawals):
        p = compile_filter(registry.get("requester"), "JOHN")
        assert _ids(withdrawals, p) == [1, 2]

    def test_number_without_range_is_substring(self, registry, withdrawals):
        p = compile_filter(registry.get("reference"), "00")
        assert _ids(withdrawals, p) == [1, 2, 3]

    def test_number_range_inclusive(self, registry, withdrawals):
        p = compile_filter(registry.get("amount"), {"from": 75.5, "to": 2500})
        assert _ids(withdrawals, p) == [1, 2, 3]

    def test_number_range_open_ended(self, registry, withdrawals):
        assert _ids(withdrawals, compile_filter(registry.get("amount"), {"from": 100})) == [1, 2]
        assert _ids(withdrawals, compile_filter(registry.get("amount"), {"to": "100"})) == [3]

    def test_number_range_unparseable_bounds_are_open(self, registry):
        assert compile_filter(registry.get("amount"), {"from": "abc", "to": ""}) is always_true

    def test_date_exact_day(self, registry, withdrawals):
        p = compile_filter(registry.get("requested"), "2024-03-05")
        assert _ids(withdrawals, p) == [1]

    def test_daterange_inclusive(self, registry, withdrawals):
        p = compile_filter(registry.get("period"), {"from": "2024-03-05", "to": "2024-03-20"})
        assert _ids(withdrawals, p) == [1, 2]

    def test_invalid_record_date_is_epoch(self, registry, withdrawals):
        period = registry.get("period")
        from_only = compile_filter(period, {"from": "2024-01-01"})
        to_only = compile_filter(period, {"to": "2024-03-31"})
        both = compile_filter(period, {"from": "2024-01-01", "to": "2024-12-31"})
        assert 4 not in _ids(withdrawals, from_only)
        assert 4 in _ids(withdrawals, to_only)
        assert 4 not in _ids(withdrawals, both)

    def test_boolean_false_does_not_filter(self, registry):
        assert compile_filter(registry.get("urgent"), False) is always_true

    def test_boolean_true_requires_exact_true(self, registry, withdrawals):
        p = compile_filter(registry.get("urgent"), True)
        assert _ids(withdrawals, p) == [1]

    def test_accessor_wins_over_field(self, withdrawals):
        option = _select("tier", ["big", "small"], field="does.not.exist",
                         accessor=lambda r: "big" if (r.get("reference") or 0) > 20000 else "small")
        assert _ids(withdrawals, compile_filter(option, "big")) == [2, 3]


class TestComposition:
    ACTIVE = {
        "status": "pending",
        "method": {"card", "bank"},
        "requester": "o",
        "amount": {"from": 100},
        "period": {"to": "2024-03-31"},
        "urgent": True,
    }

    def test_empty_applied_is_pass_through(self, registry, withdrawals):
        assert compile_filters(registry, {}) is always_true
        assert compile_filters(registry, {"status": "", "urgent": False}) is always_true

    def test_unknown_ids_are_ignored(self, registry, withdrawals):
        p = compile_filters(registry, {"nope": "x", "status": "approved"})
        assert _ids(withdrawals, p) == [2]

    def test_and_across_every_subset(self, registry, withdrawals):
        ids = list(self.ACTIVE)
        for size in range(1, len(ids) + 1):
            for subset in combinations(ids, size):
                applied = {k: self.ACTIVE[k] for k in subset}
                combined = compile_filters(registry, applied)
                singles = [compile_filter(registry.get(k), v) for k, v in applied.items()]
                for record in withdrawals:
                    assert combined(record) == all(p(record) for p in singles)

    def test_does_not_mutate_applied(self, registry, withdrawals):
        applied = {"method": {"card"}, "period": {"from": "2024-01-01"}}
        before = copy.deepcopy(applied)
        p = compile_filters(registry, applied)
        [p(r) for r in withdrawals]
        assert applied == before

    def test_dirty_records_never_raise(self, registry):
        dirty = [{}, {"paymentMethod": "card"}, {"amount": [1, 2]}, {"paymentMethod": {"name": ["x"]}},
                 {"requested_at": 5}, None]
        p = compile_filters(registry, self.ACTIVE)
        for record in dirty:
            assert p(record) is False

"""Tests for the draft/applied filter state store."""

import pytest

from dataview.filter_state import (
    FilterStateStore,
    count_active,
    empty_value,
    is_unset,
    normalize_value,
)
from dataview.models import FilterOption, FilterType, RangeValue, SelectOption
from dataview.registry import FilterRegistry


@pytest.fixture
def registry():
    return FilterRegistry([
        FilterOption(id="status", label="Status", type=FilterType.SELECT,
                     options=[SelectOption(value="active", label="Active"),
                              SelectOption(value="inactive", label="Inactive")]),
        FilterOption(id="method", label="Method", type=FilterType.MULTISELECT,
                     options=[SelectOption(value=v, label=v) for v in ("card", "bank", "mobile")]),
        FilterOption(id="day", label="Day", type=FilterType.DATE),
        FilterOption(id="created", label="Created", type=FilterType.DATERANGE),
        FilterOption(id="name", label="Name", type=FilterType.TEXT),
        FilterOption(id="amount", label="Amount", type=FilterType.NUMBER, range=True),
        FilterOption(id="verified", label="Verified", type=FilterType.BOOLEAN),
    ])


@pytest.fixture
def store(registry):
    return FilterStateStore(registry)


class TestUnsetRule:
    def test_empty_values_per_type(self, registry):
        values = {o.id: empty_value(o) for o in registry}
        assert values == {
            "status": "",
            "method": frozenset(),
            "day": None,
            "created": None,
            "name": "",
            "amount": "",
            "verified": False,
        }
        assert all(is_unset(v) for v in values.values())

    def test_set_values_are_active(self):
        assert not is_unset("active")
        assert not is_unset(frozenset({"card"}))
        assert not is_unset(True)
        assert not is_unset(RangeValue(start="2024-01-01"))

    def test_blank_strings_and_empty_ranges_are_unset(self):
        assert is_unset("   ")
        assert is_unset(RangeValue())
        assert is_unset(RangeValue(start="", end=None))

    def test_count_active(self):
        assert count_active({"a": "", "b": "x", "c": frozenset({"1"}), "d": False}) == 2


class TestNormalization:
    def test_multiselect_iterables_become_frozensets(self, registry):
        option = registry.get("method")
        assert normalize_value(option, ["card", "bank"]) == frozenset({"card", "bank"})
        assert normalize_value(option, "card") == frozenset({"card"})

    def test_range_from_mapping(self, registry):
        value = normalize_value(registry.get("created"), {"from": "2024-01-01"})
        assert isinstance(value, RangeValue)
        assert value.start == "2024-01-01"
        assert value.end is None

    def test_garbage_becomes_empty_value(self, registry):
        assert normalize_value(registry.get("created"), 42) is None
        assert normalize_value(registry.get("method"), 42) == frozenset()

    def test_boolean_strings(self, registry):
        option = registry.get("verified")
        assert normalize_value(option, "true") is True
        assert normalize_value(option, "no") is False

    def test_unparseable_bounds_are_dropped(self, registry):
        amount = registry.get("amount")
        assert normalize_value(amount, {"from": "abc", "to": "n/a"}) == ""
        assert normalize_value(amount, {"from": "abc", "to": "100"}) == RangeValue(end="100")
        created = registry.get("created")
        assert normalize_value(created, {"from": "garbage"}) is None
        assert normalize_value(created, {"from": "garbage", "to": "2024-02-01"}) == RangeValue(end="2024-02-01")

    def test_unparseable_date_is_empty(self, registry):
        assert normalize_value(registry.get("day"), "not a date") is None
        assert normalize_value(registry.get("day"), " 2024-03-05 ") == "2024-03-05"

    def test_unusable_values_are_not_counted_active(self, store):
        store.set_draft("amount", {"from": "abc"})
        store.set_draft("created", {"to": "later"})
        store.set_draft("day", "someday")
        store.apply()
        assert store.active_count == 0


class TestDraftEdits:
    def test_initial_state_is_empty(self, store):
        assert store.active_count == 0
        assert store.draft == store.applied
        assert not store.is_dirty

    def test_set_draft_leaves_applied_alone(self, store):
        assert store.set_draft("status", "active")
        assert store.draft["status"] == "active"
        assert store.applied["status"] == ""
        assert store.active_count == 0
        assert store.is_dirty

    def test_unknown_id_is_noop(self, store):
        before = store.draft
        assert not store.set_draft("nope", "x")
        assert not store.toggle_boolean("nope")
        assert not store.toggle_multiselect_value("nope", "x")
        assert store.draft == before

    def test_toggle_multiselect_adds_and_removes(self, store):
        store.toggle_multiselect_value("method", "card")
        store.toggle_multiselect_value("method", "bank")
        assert store.draft["method"] == frozenset({"card", "bank"})
        store.toggle_multiselect_value("method", "card")
        assert store.draft["method"] == frozenset({"bank"})

    def test_toggle_multiselect_on_wrong_type_is_noop(self, store):
        assert not store.toggle_multiselect_value("status", "active")
        assert store.draft["status"] == ""

    def test_toggle_boolean(self, store):
        store.toggle_boolean("verified")
        assert store.draft["verified"] is True
        store.toggle_boolean("verified")
        assert store.draft["verified"] is False

    def test_toggle_select_value_unsets_on_second_click(self, store):
        store.toggle_select_value("status", "active")
        assert store.draft["status"] == "active"
        store.toggle_select_value("status", "active")
        assert store.draft["status"] == ""


class TestCommit:
    def test_apply_copies_draft_and_counts(self, store):
        store.set_draft("status", "active")
        store.toggle_multiselect_value("method", "card")
        store.set_draft("name", "  ")
        applied = store.apply()
        assert applied["status"] == "active"
        assert store.active_count == 2
        assert not store.is_dirty

    def test_cancel_restores_applied(self, store):
        store.set_draft("status", "active")
        store.apply()
        store.set_draft("status", "inactive")
        store.toggle_boolean("verified")
        store.cancel()
        assert store.draft == store.applied
        assert store.draft["status"] == "active"
        assert store.active_count == 1

    def test_reset_all_clears_both_generations(self, store, registry):
        store.set_draft("status", "active")
        store.set_draft("created", {"from": "2024-01-01", "to": "2024-02-01"})
        store.apply()
        store.set_draft("name", "john")
        store.reset_all()
        empty = {o.id: empty_value(o) for o in registry}
        assert store.draft == empty
        assert store.applied == empty
        assert store.active_count == 0

    def test_snapshot(self, store):
        store.set_draft("verified", True)
        store.apply()
        snap = store.snapshot()
        assert snap.active_count == 1
        assert snap.applied["verified"] is True


class TestDefaults:
    def test_default_value_seeds_both_generations(self):
        registry = FilterRegistry([
            FilterOption(id="status", label="Status", type=FilterType.SELECT,
                         options=[SelectOption(value="active", label="Active")],
                         defaultValue="active"),
        ])
        store = FilterStateStore(registry)
        assert store.applied["status"] == "active"
        assert store.active_count == 1
        store.reset_all()
        assert store.applied["status"] == ""


class TestRegistry:
    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValueError):
            FilterRegistry([
                FilterOption(id="a", label="A", type=FilterType.TEXT),
                FilterOption(id="a", label="A again", type=FilterType.TEXT),
            ])

    def test_select_requires_options(self):
        with pytest.raises(ValueError):
            FilterOption(id="s", label="S", type=FilterType.SELECT)

    def test_accepts_plain_dicts(self):
        registry = FilterRegistry([{"id": "q", "label": "Q", "type": "text"}])
        assert "q" in registry
        assert registry.get("q").type is FilterType.TEXT
        assert registry.ids == ("q",)

"""Pydantic models for dataview list views."""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FilterType(str, Enum):
    SELECT = "select"
    MULTISELECT = "multiselect"
    DATE = "date"
    DATERANGE = "daterange"
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


class ViewMode(str, Enum):
    IDLE = "idle"
    EDITING = "editing"          # filter panel open, draft may differ
    APPLYING = "applying"        # transient
    CANCELLING = "cancelling"    # transient


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


class SelectOption(BaseModel):
    """One choice of a select/multiselect filter."""
    model_config = ConfigDict(frozen=True)

    value: str
    label: str


class RangeValue(BaseModel):
    """Two-sided bound used by daterange and numeric range filters.

    Either side may be absent, which makes the range open-ended on that side.
    Serialized with the ``from`` / ``to`` keys.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    start: Any = Field(default=None, alias="from")
    end: Any = Field(default=None, alias="to")

    @property
    def is_empty(self) -> bool:
        return _is_blank(self.start) and _is_blank(self.end)


class FilterOption(BaseModel):
    """Static description of one filter in a list view's registry."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    label: str
    type: FilterType
    options: list[SelectOption] = Field(default_factory=list)
    default_value: Any = Field(default=None, alias="defaultValue")
    field: str | None = None                     # dot-path into the record, defaults to id
    range_filter: bool = Field(default=False, alias="range")
    accessor: Callable[[Any], Any] | None = Field(default=None, exclude=True)

    @model_validator(mode="after")
    def _check_options(self) -> "FilterOption":
        if self.type in (FilterType.SELECT, FilterType.MULTISELECT) and not self.options:
            raise ValueError(f"filter {self.id!r} of type {self.type.value} requires options")
        if self.range_filter and self.type is not FilterType.NUMBER:
            raise ValueError(f"filter {self.id!r}: only number filters can be ranges")
        return self

    @property
    def key(self) -> str:
        return self.field or self.id


class SortConfig(BaseModel):
    """Current sort column and direction."""
    model_config = ConfigDict(frozen=True)

    key: str
    direction: SortDirection = SortDirection.ASC

    def toggled(self, key: str) -> "SortConfig":
        """Result of a header click on *key*: same key flips, new key starts ascending."""
        if key == self.key:
            return SortConfig(key=key, direction=self.direction.flipped())
        return SortConfig(key=key, direction=SortDirection.ASC)


class FilterState(BaseModel):
    """Draft and applied generations of filter values."""
    draft: dict[str, Any] = Field(default_factory=dict)
    applied: dict[str, Any] = Field(default_factory=dict)
    active_count: int = Field(default=0, ge=0)


class PageState(BaseModel):
    current_page: int = Field(default=1, ge=1)
    items_per_page: int = Field(default=10, gt=0)
    total_items: int = Field(default=0, ge=0)


class ViewSnapshot(BaseModel):
    """Everything the render boundary needs after one pipeline run."""
    displayed_rows: list[Any] = Field(default_factory=list)
    total_items: int = 0
    total_pages: int = 1
    current_page: int = 1
    page_size: int = 10
    active_filter_count: int = 0
    recent_searches: list[str] = Field(default_factory=list)
    start_item: int = 0
    end_item: int = 0
    page_numbers: list[int | None] = Field(default_factory=list)
    query: str = ""
    sort: SortConfig | None = None
    mode: ViewMode = ViewMode.IDLE


class ColumnSpec(BaseModel):
    """A displayed/exported column: dot-path key plus header text."""
    key: str
    header: str = ""

    @property
    def title(self) -> str:
        return self.header or self.key


class ViewConfig(BaseModel):
    """Declarative description of one list view, loaded from JSON by the CLI."""
    name: str = "default"
    filters: list[FilterOption] = Field(default_factory=list)
    search_fields: list[str] = Field(default_factory=list)
    columns: list[ColumnSpec] = Field(default_factory=list)
    default_sort: SortConfig | None = None
    page_size: int | None = Field(default=None, gt=0)

"""Filter, sort and paginate pipeline shared by the players, teams and events views."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from math import ceil
from typing import Any, Generic, TypeVar

from domain.errors import InvalidArgumentError
from domain.protocol import EntityKind, FieldKind, SortDirection

T = TypeVar("T")

ALL_SENTINEL = "all"
DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class FieldSpec:
    """How one named field is read, searched, filtered and sorted."""

    name: str
    kind: FieldKind
    getter: Callable[[Any], Any]
    default_direction: SortDirection = SortDirection.ASC
    sortable: bool = True
    searchable: bool = False
    filter_getter: Callable[[Any], Any] | None = None

    @property
    def filterable(self) -> bool:
        return self.filter_getter is not None


@dataclass(frozen=True)
class RecordSchema:
    """Field registry for one entity kind."""

    entity: EntityKind
    fields: tuple[FieldSpec, ...]
    default_sort_field: str

    def __post_init__(self) -> None:
        names = [spec.name for spec in self.fields]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate field names in {self.entity.value} schema: {names}")
        if self.default_sort_field not in names:
            raise ValueError(
                f"default_sort_field '{self.default_sort_field}' is not a "
                f"{self.entity.value} field"
            )

    def field(self, name: str) -> FieldSpec:
        for spec in self.fields:
            if spec.name == name:
                return spec
        available = ", ".join(spec.name for spec in self.fields)
        raise InvalidArgumentError(
            f"Unknown {self.entity.value} field '{name}'. Available: {available}"
        )

    def sort_field(self, name: str) -> FieldSpec:
        spec = self.field(name)
        if not spec.sortable:
            raise InvalidArgumentError(f"{self.entity.value} field '{name}' is not sortable")
        return spec

    def filter_field(self, name: str) -> FieldSpec:
        spec = self.field(name)
        if not spec.filterable:
            raise InvalidArgumentError(f"{self.entity.value} field '{name}' is not filterable")
        return spec

    def search_fields(self) -> tuple[FieldSpec, ...]:
        return tuple(spec for spec in self.fields if spec.searchable)

    def sortable_names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields if spec.sortable)

    def filterable_names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields if spec.filterable)


@dataclass(frozen=True)
class FilterCriteria:
    search_text: str = ""
    category_filters: Mapping[str, Any] = field(default_factory=dict)

    def active_filters(self) -> dict[str, Any]:
        """Category filters with the "no filter" sentinels dropped."""
        return {
            name: value
            for name, value in self.category_filters.items()
            if not _is_sentinel(value)
        }


@dataclass(frozen=True)
class PageResult(Generic[T]):
    page_records: list[T]
    total_count: int
    total_pages: int
    page_index: int
    page_size: int

    @property
    def is_empty(self) -> bool:
        return self.total_count == 0

    @property
    def has_next(self) -> bool:
        return self.page_index + 1 < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page_index > 0


@dataclass(frozen=True)
class ViewState:
    """Serializable search/filter/sort/page settings for one view.

    Any transition that changes what the result set contains or how it is
    ordered sends the view back to the first page.
    """

    search_text: str = ""
    category_filters: Mapping[str, Any] = field(default_factory=dict)
    sort_field: str | None = None
    sort_direction: SortDirection | None = None
    page_index: int = 0
    page_size: int = DEFAULT_PAGE_SIZE

    def criteria(self) -> FilterCriteria:
        return FilterCriteria(
            search_text=self.search_text,
            category_filters=dict(self.category_filters),
        )

    def with_search(self, search_text: str) -> ViewState:
        return replace(self, search_text=search_text, page_index=0)

    def with_filter(self, name: str, value: Any) -> ViewState:
        filters = dict(self.category_filters)
        if _is_sentinel(value):
            filters.pop(name, None)
        else:
            filters[name] = value
        return replace(self, category_filters=filters, page_index=0)

    def with_sort(self, name: str, schema: RecordSchema) -> ViewState:
        current_field, current_direction = resolve_sort(self, schema)
        field_name, direction = toggle_sort(current_field, current_direction, name, schema)
        return replace(self, sort_field=field_name, sort_direction=direction, page_index=0)

    def with_page(self, page_index: int) -> ViewState:
        return replace(self, page_index=page_index)

    def with_page_size(self, page_size: int) -> ViewState:
        _validate_page_size(page_size)
        return replace(self, page_size=page_size, page_index=0)

    def as_dict(self) -> dict[str, Any]:
        return {
            "search_text": self.search_text,
            "category_filters": {
                name: _filter_token(value) for name, value in self.category_filters.items()
            },
            "sort_field": self.sort_field,
            "sort_direction": None if self.sort_direction is None else self.sort_direction.value,
            "page_index": self.page_index,
            "page_size": self.page_size,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ViewState:
        direction = data.get("sort_direction")
        return cls(
            search_text=str(data.get("search_text") or ""),
            category_filters=dict(data.get("category_filters") or {}),
            sort_field=data.get("sort_field"),
            sort_direction=None if direction is None else _coerce_direction(direction),
            page_index=int(data.get("page_index", 0)),
            page_size=int(data.get("page_size", DEFAULT_PAGE_SIZE)),
        )


def _is_sentinel(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        stripped = value.strip()
        return not stripped or stripped.lower() == ALL_SENTINEL
    return False


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _filter_token(value: Any) -> str | None:
    if value is None:
        return None
    return _text(value)


def _coerce_direction(direction: SortDirection | str) -> SortDirection:
    if isinstance(direction, SortDirection):
        return direction
    try:
        return SortDirection(str(direction).lower())
    except ValueError as exc:
        raise InvalidArgumentError(
            f"Unsupported sort direction '{direction}'. Choose one of: asc, desc."
        ) from exc


def _validate_page_size(page_size: int) -> None:
    if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size < 1:
        raise InvalidArgumentError(f"page_size must be a positive integer, got {page_size!r}")


def filter_records(
    records: Iterable[T],
    criteria: FilterCriteria,
    schema: RecordSchema,
) -> list[T]:
    """Keep records matching the search text and every category filter, in input order."""
    for name in criteria.category_filters:
        schema.filter_field(name)

    needle = criteria.search_text.strip().casefold()
    search_specs = schema.search_fields()
    filters = [
        (schema.filter_field(name).filter_getter, _filter_token(value))
        for name, value in criteria.active_filters().items()
    ]

    def matches(record: T) -> bool:
        if needle and not any(
            needle in _text(spec.getter(record)).casefold() for spec in search_specs
        ):
            return False
        for getter, token in filters:
            if _filter_token(getter(record)) != token:
                return False
        return True

    return [record for record in records if matches(record)]


def _sort_key(spec: FieldSpec) -> Callable[[Any], Any]:
    if spec.kind is FieldKind.NUMERIC:
        return lambda record: float(spec.getter(record) or 0)
    if spec.kind is FieldKind.DATE:
        return spec.getter
    return lambda record: _text(spec.getter(record)).casefold()


def sort_records(
    records: Iterable[T],
    field_name: str,
    direction: SortDirection | str,
    schema: RecordSchema,
) -> list[T]:
    """Stable, type-aware sort; relation and date fields keep missing values last."""
    spec = schema.sort_field(field_name)
    reverse = _coerce_direction(direction) is SortDirection.DESC
    key = _sort_key(spec)

    if spec.kind in (FieldKind.RELATION, FieldKind.DATE):
        present: list[T] = []
        missing: list[T] = []
        for record in records:
            (missing if spec.getter(record) is None else present).append(record)
        return sorted(present, key=key, reverse=reverse) + missing

    return sorted(records, key=key, reverse=reverse)


def paginate(records: Sequence[T], page_index: int, page_size: int) -> PageResult[T]:
    """Slice one zero-based page, clamping out-of-range indices."""
    _validate_page_size(page_size)
    total_count = len(records)
    total_pages = ceil(total_count / page_size)
    if total_pages == 0:
        return PageResult(
            page_records=[],
            total_count=0,
            total_pages=0,
            page_index=0,
            page_size=page_size,
        )

    effective_index = min(max(page_index, 0), total_pages - 1)
    start = effective_index * page_size
    return PageResult(
        page_records=list(records[start:start + page_size]),
        total_count=total_count,
        total_pages=total_pages,
        page_index=effective_index,
        page_size=page_size,
    )


def resolve_sort(state: ViewState, schema: RecordSchema) -> tuple[str, SortDirection]:
    """Effective sort field and direction, falling back to the schema defaults."""
    field_name = state.sort_field or schema.default_sort_field
    spec = schema.sort_field(field_name)
    if state.sort_direction is None:
        return field_name, spec.default_direction
    return field_name, _coerce_direction(state.sort_direction)


def toggle_sort(
    current_field: str,
    current_direction: SortDirection,
    requested_field: str,
    schema: RecordSchema,
) -> tuple[str, SortDirection]:
    """Flip direction on the current field, or switch to a new field's default."""
    spec = schema.sort_field(requested_field)
    if requested_field == current_field:
        return requested_field, current_direction.flipped()
    return requested_field, spec.default_direction


def run_pipeline(
    records: Iterable[T],
    state: ViewState,
    schema: RecordSchema,
) -> PageResult[T]:
    """Filter, sort and paginate ``records`` for one view state."""
    filtered = filter_records(records, state.criteria(), schema)
    field_name, direction = resolve_sort(state, schema)
    ordered = sort_records(filtered, field_name, direction, schema)
    return paginate(ordered, state.page_index, state.page_size)


__all__ = [
    "ALL_SENTINEL",
    "DEFAULT_PAGE_SIZE",
    "FieldSpec",
    "FilterCriteria",
    "PageResult",
    "RecordSchema",
    "ViewState",
    "filter_records",
    "paginate",
    "resolve_sort",
    "run_pipeline",
    "sort_records",
    "toggle_sort",
]

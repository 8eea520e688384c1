"""Filter and sort derivation for the dashboard tables.

All view state lives in an explicit, serializable `ViewState`; the
visible rows are a pure function of the rows, that state and the
category resolver.

Example:
    >>> state = ViewState().select_group("ENERGY").sorted_by("pe_ratio", SortDirection.DESCEND)
    >>> visible = visible_industries(rows, state, resolver)
"""

from collections.abc import Callable, Iterable, Mapping, Sequence
from enum import Enum
from operator import itemgetter
from typing import Any, NamedTuple, Self, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .models.recommendations import AggregatedRow
from .models.rows import METRIC_COLUMNS, CategorizedRow
from .parser import parse_number
from .taxonomy.resolver import CategoryResolver

RowT = TypeVar("RowT", bound=BaseModel)

# Columns compared as text, case-insensitively
TEXT_COLUMNS = frozenset({"name", "display_name", "key"})

# Columns compared by element count
COUNT_COLUMNS = frozenset({"contributors", "contributor_count"})

CATEGORY_COLUMN = "category"


class SortDirection(str, Enum):
    """Direction of the single-column sort."""

    ASCEND = "ascend"
    DESCEND = "descend"


class ViewState(BaseModel):
    """Current selection, filters and sort of a table.

    A sub-group only has meaning inside its group: selecting a group
    always clears the sub-group.

    Attributes:
        selected_group: Industry group filter; None shows every row.
        selected_sub_group: Sub-group filter within the selected group.
        column_filters: Allowed values per column; rows must match every column.
        sort_column: Column to sort by; None keeps the source order.
        sort_direction: Sort direction.
    """

    model_config = ConfigDict(frozen=True)

    selected_group: str | None = None
    selected_sub_group: str | None = None
    column_filters: dict[str, tuple[str, ...]] = Field(default_factory=dict)
    sort_column: str | None = None
    sort_direction: SortDirection = SortDirection.ASCEND

    @model_validator(mode="after")
    def _sub_group_needs_group(self) -> Self:
        if self.selected_sub_group is not None and self.selected_group is None:
            msg = "A sub-group can only be selected inside a group"
            raise ValueError(msg)
        return self

    def select_group(self, group: str | None) -> Self:
        """Select a group (None for all) and reset the sub-group."""
        return self.model_copy(update={"selected_group": group, "selected_sub_group": None})

    def select_sub_group(self, sub_group: str | None) -> Self:
        """Select a sub-group of the current group (None for the whole group).

        Raises:
            ValueError: If no group is selected.
        """
        if sub_group is not None and self.selected_group is None:
            msg = "Select a group before selecting a sub-group"
            raise ValueError(msg)
        return self.model_copy(update={"selected_sub_group": sub_group})

    def with_column_filter(self, column: str, values: Iterable[str] | None) -> Self:
        """Restrict a column to the given values; None or empty removes the filter."""
        filters = dict(self.column_filters)
        allowed = tuple(values or ())
        if allowed:
            filters[column] = allowed
        else:
            filters.pop(column, None)
        return self.model_copy(update={"column_filters": filters})

    def sorted_by(
        self, column: str | None, direction: SortDirection = SortDirection.ASCEND
    ) -> Self:
        """Sort by a column; None restores the source order."""
        return self.model_copy(update={"sort_column": column, "sort_direction": direction})

    def cleared(self) -> Self:
        """Drop the group selection and every column filter, keeping the sort."""
        return self.model_copy(
            update={"selected_group": None, "selected_sub_group": None, "column_filters": {}}
        )


# =============================================================================
# SORTING
# =============================================================================


def _sort_key(column: str, resolver: CategoryResolver | None) -> Callable[[Any], Any]:
    """Return a key function; a None key means "no value"."""
    if column in METRIC_COLUMNS:
        return lambda row: parse_number(getattr(row, column))
    if column == "company_count":
        return lambda row: row.company_count
    if column in TEXT_COLUMNS:
        return lambda row: getattr(row, column).casefold()
    if column in COUNT_COLUMNS:
        return lambda row: len(row.contributors)
    if column == CATEGORY_COLUMN:
        if resolver is None:
            msg = "Sorting by category requires a resolver"
            raise ValueError(msg)
        return lambda row: (
            None if row.group is None else resolver.category_sort_key(row.group, row.sub_group)
        )
    msg = f"Unknown sort column: {column!r}"
    raise ValueError(msg)


def sort_rows(
    rows: Iterable[RowT],
    column: str,
    direction: SortDirection = SortDirection.ASCEND,
    resolver: CategoryResolver | None = None,
) -> list[RowT]:
    """Stable single-column sort.

    Rows without a value in the column (e.g. "-" in a metric column)
    follow every valued row in both directions, in their input order.

    Args:
        rows: Rows to sort.
        column: Column name.
        direction: Sort direction.
        resolver: Needed for the "category" column.

    Returns:
        A new sorted list.

    Raises:
        ValueError: If the column cannot be sorted.
    """
    key = _sort_key(column, resolver)
    keyed = [(key(row), row) for row in rows]
    valued = [pair for pair in keyed if pair[0] is not None]
    missing = [row for value, row in keyed if value is None]
    valued.sort(key=itemgetter(0), reverse=direction is SortDirection.DESCEND)
    return [row for _, row in valued] + missing


# =============================================================================
# FILTERING
# =============================================================================


def _matches(value: Any, allowed: Sequence[str]) -> bool:
    if isinstance(value, (list, tuple, set, frozenset)):
        return any(item in allowed for item in value)
    return value in allowed


def apply_column_filters(
    rows: Iterable[RowT], column_filters: Mapping[str, Sequence[str]]
) -> list[RowT]:
    """Keep rows matching every column filter.

    A list-valued column (e.g. contributors) matches when any element is allowed.
    """
    return [
        row
        for row in rows
        if all(_matches(getattr(row, column, None), allowed) for column, allowed in column_filters.items())
    ]


def _finish(
    rows: list[RowT], state: ViewState, resolver: CategoryResolver | None
) -> list[RowT]:
    rows = apply_column_filters(rows, state.column_filters)
    if state.sort_column:
        rows = sort_rows(rows, state.sort_column, state.sort_direction, resolver)
    return rows


def visible_industries(
    rows: Sequence[CategorizedRow], state: ViewState, resolver: CategoryResolver
) -> list[CategorizedRow]:
    """Derive the visible industry rows.

    With no group selected every row is visible, uncategorized ones
    included. A group narrows to its industries, a sub-group further to
    the sub-group's industries. Column filters then intersect, and the
    single-column sort applies last.

    Args:
        rows: Categorized rows in document order.
        state: Current view state.
        resolver: Category resolver.

    Returns:
        Visible rows, in display order.
    """
    if state.selected_group is None:
        visible = list(rows)
    else:
        industries = resolver.industries_of(state.selected_group, state.selected_sub_group)
        visible = [row for row in rows if row.name in industries]
    return _finish(visible, state, resolver)


def visible_recommendations(
    rows: Sequence[AggregatedRow], state: ViewState, resolver: CategoryResolver | None = None
) -> list[AggregatedRow]:
    """Derive the visible recommendation rows.

    Group and sub-group filter on each row's resolved category; a
    "contributors" column filter keeps rows any allowed contributor wrote.

    Args:
        rows: Aggregated rows, already ordered by category.
        state: Current view state.
        resolver: Needed only when sorting by category.

    Returns:
        Visible rows, in display order.
    """
    visible = list(rows)
    if state.selected_group is not None:
        visible = [row for row in visible if row.group == state.selected_group]
        if state.selected_sub_group is not None:
            visible = [row for row in visible if row.sub_group == state.selected_sub_group]
    return _finish(visible, state, resolver)


# =============================================================================
# COUNTS
# =============================================================================


class GroupCount(NamedTuple):
    """Rows and attached stocks under one group."""

    industries: int
    stocks: int


def group_counts(rows: Iterable[AggregatedRow]) -> dict[str, GroupCount]:
    """Count aggregated rows and their related stocks per group.

    Uncategorized rows are not counted.
    """
    counts: dict[str, GroupCount] = {}
    for row in rows:
        if row.group is None:
            continue
        current = counts.get(row.group, GroupCount(0, 0))
        counts[row.group] = GroupCount(current.industries + 1, current.stocks + len(row.related))
    return counts


def total_stocks(rows: Iterable[AggregatedRow]) -> int:
    """Number of related stocks across all rows."""
    return sum(len(row.related) for row in rows)

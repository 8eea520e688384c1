"""Tests for view state, filtering and sorting."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from screener_dashboard.models.recommendations import AggregatedRow
from screener_dashboard.models.rows import CategorizedRow
from screener_dashboard.parser import extract_rows
from screener_dashboard.taxonomy.resolver import CategoryResolver
from screener_dashboard.view import (
    SortDirection,
    ViewState,
    apply_column_filters,
    group_counts,
    sort_rows,
    total_stocks,
    visible_industries,
    visible_recommendations,
)


@pytest.fixture
def rows(resolver: CategoryResolver, energy_market_html: str) -> list[CategorizedRow]:
    return resolver.categorize(extract_rows(energy_market_html))


def _names(rows: list) -> list[str]:
    return [row.name for row in rows]


class TestViewState:
    """Tests for ViewState transitions."""

    def test_select_group_resets_sub_group(self) -> None:
        state = ViewState().select_group("ENERGY").select_sub_group("Power")
        switched = state.select_group("FINANCIAL")
        assert switched.selected_group == "FINANCIAL"
        assert switched.selected_sub_group is None

    def test_reselecting_same_group_resets_sub_group(self) -> None:
        state = ViewState().select_group("ENERGY").select_sub_group("Power")
        assert state.select_group("ENERGY").selected_sub_group is None

    def test_sub_group_requires_group(self) -> None:
        with pytest.raises(ValueError, match="group"):
            ViewState().select_sub_group("Power")

    def test_constructor_rejects_orphan_sub_group(self) -> None:
        with pytest.raises(ValidationError):
            ViewState(selected_sub_group="Power")

    def test_state_is_immutable(self) -> None:
        state = ViewState()
        with pytest.raises(ValidationError):
            state.selected_group = "ENERGY"  # type: ignore[misc]

    def test_column_filter_set_and_cleared(self) -> None:
        state = ViewState().with_column_filter("contributors", ["Priya"])
        assert state.column_filters == {"contributors": ("Priya",)}
        assert state.with_column_filter("contributors", []).column_filters == {}

    def test_cleared_keeps_sort(self) -> None:
        state = (
            ViewState()
            .select_group("ENERGY")
            .with_column_filter("name", ["Power Generation"])
            .sorted_by("pe_ratio", SortDirection.DESCEND)
        )
        cleared = state.cleared()
        assert cleared.selected_group is None
        assert cleared.column_filters == {}
        assert cleared.sort_column == "pe_ratio"
        assert cleared.sort_direction is SortDirection.DESCEND

    def test_serializable(self) -> None:
        state = ViewState().select_group("ENERGY").sorted_by("name")
        assert ViewState.model_validate_json(state.model_dump_json()) == state


class TestVisibleIndustries:
    """Tests for group and sub-group narrowing."""

    def test_no_group_shows_everything(
        self, rows: list[CategorizedRow], resolver: CategoryResolver
    ) -> None:
        visible = visible_industries(rows, ViewState(), resolver)
        assert _names(visible) == _names(rows)

    def test_group(self, rows: list[CategorizedRow], resolver: CategoryResolver) -> None:
        visible = visible_industries(rows, ViewState().select_group("ENERGY"), resolver)
        assert _names(visible) == ["Power Generation", "Refineries & Marketing"]

    def test_sub_group(self, rows: list[CategorizedRow], resolver: CategoryResolver) -> None:
        state = ViewState().select_group("ENERGY").select_sub_group("Oil & Gas")
        assert _names(visible_industries(rows, state, resolver)) == ["Refineries & Marketing"]

    def test_sub_group_is_subset_of_group(
        self, rows: list[CategorizedRow], resolver: CategoryResolver
    ) -> None:
        group_state = ViewState().select_group("ENERGY")
        whole = set(_names(visible_industries(rows, group_state, resolver)))
        for sub_group in resolver.sub_groups_of("ENERGY"):
            part = visible_industries(rows, group_state.select_sub_group(sub_group), resolver)
            assert set(_names(part)) <= whole

    def test_column_filter_intersects(
        self, rows: list[CategorizedRow], resolver: CategoryResolver
    ) -> None:
        state = ViewState().select_group("ENERGY").with_column_filter("name", ["Power Generation"])
        assert _names(visible_industries(rows, state, resolver)) == ["Power Generation"]

    def test_derivation_is_pure(self, rows: list[CategorizedRow], resolver: CategoryResolver) -> None:
        state = ViewState().select_group("ENERGY").sorted_by("pe_ratio")
        before = list(rows)
        assert visible_industries(rows, state, resolver) == visible_industries(rows, state, resolver)
        assert rows == before


class TestSortRows:
    """Tests for the single-column sort."""

    def test_numeric_ascending(self, rows: list[CategorizedRow]) -> None:
        ordered = sort_rows(rows, "market_cap")
        assert _names(ordered) == [
            "Unknown Industry",
            "Power Generation",
            "Refineries & Marketing",
            "Private Sector Bank",
        ]

    def test_missing_values_last_ascending(self, rows: list[CategorizedRow]) -> None:
        """Unknown Industry has no P/E."""
        ordered = sort_rows(rows, "pe_ratio")
        assert _names(ordered)[-1] == "Unknown Industry"
        assert _names(ordered)[:3] == [
            "Refineries & Marketing",
            "Private Sector Bank",
            "Power Generation",
        ]

    def test_missing_values_last_descending(self, rows: list[CategorizedRow]) -> None:
        ordered = sort_rows(rows, "pe_ratio", SortDirection.DESCEND)
        assert _names(ordered)[0] == "Power Generation"
        assert _names(ordered)[-1] == "Unknown Industry"

    def test_missing_values_keep_input_order(self, rows: list[CategorizedRow]) -> None:
        """Two rows lack an operating margin."""
        for direction in SortDirection:
            ordered = sort_rows(rows, "operating_margin", direction)
            assert _names(ordered)[-2:] == ["Unknown Industry", "Private Sector Bank"]

    def test_signed_percentages(self, rows: list[CategorizedRow]) -> None:
        ordered = sort_rows(rows, "one_year_return")
        assert _names(ordered) == [
            "Unknown Industry",
            "Private Sector Bank",
            "Refineries & Marketing",
            "Power Generation",
        ]

    def test_text_column_case_insensitive(self, rows: list[CategorizedRow]) -> None:
        ordered = sort_rows(rows, "name", SortDirection.DESCEND)
        assert _names(ordered)[0] == "Unknown Industry"

    def test_stable_for_ties(self, resolver: CategoryResolver) -> None:
        tied = resolver.categorize(
            extract_rows(
                "<table>"
                + "".join(
                    f"<tr><td></td><td><a href='/{name}'>{name}</a></td><td>3</td>"
                    + "<td>1</td>" * 7
                    + "</tr>"
                    for name in ("B", "A", "C")
                )
                + "</table>"
            )
        )
        assert _names(sort_rows(tied, "company_count")) == ["B", "A", "C"]
        assert _names(sort_rows(tied, "company_count", SortDirection.DESCEND)) == ["B", "A", "C"]

    def test_category_puts_unknown_last(
        self, rows: list[CategorizedRow], resolver: CategoryResolver
    ) -> None:
        for direction in SortDirection:
            ordered = sort_rows(rows, "category", direction, resolver)
            assert _names(ordered)[-1] == "Unknown Industry"

    def test_category_ascending_order(
        self, rows: list[CategorizedRow], resolver: CategoryResolver
    ) -> None:
        ordered = sort_rows(rows, "category", resolver=resolver)
        assert _names(ordered) == [
            "Private Sector Bank",
            "Power Generation",
            "Refineries & Marketing",
            "Unknown Industry",
        ]

    def test_category_needs_resolver(self, rows: list[CategorizedRow]) -> None:
        with pytest.raises(ValueError, match="resolver"):
            sort_rows(rows, "category")

    def test_unknown_column(self, rows: list[CategorizedRow]) -> None:
        with pytest.raises(ValueError, match="Unknown sort column"):
            sort_rows(rows, "volume")


def _recommendation(
    key: str, group: str | None, sub_group: str | None, contributors: list[str], related: int = 0
) -> AggregatedRow:
    return AggregatedRow(
        key=key,
        display_name=key,
        group=group,
        sub_group=sub_group,
        contributors=contributors,
        related=[AggregatedRow(key=f"{key}-{i}", display_name=f"{key}-{i}") for i in range(related)],
    )


@pytest.fixture
def recommendations() -> list[AggregatedRow]:
    return [
        _recommendation("Private Sector Bank", "FINANCIAL", "Banks", ["Rahul"]),
        _recommendation("Power Generation", "ENERGY", "Power", ["Ankur", "Priya"], related=2),
        _recommendation("RELIANCE", "ENERGY", "Oil & Gas", ["Priya"]),
        _recommendation("Mystery", None, None, ["Ankur"], related=1),
    ]


class TestVisibleRecommendations:
    """Tests for recommendation filtering and counts."""

    def test_group_filter(self, recommendations: list[AggregatedRow]) -> None:
        visible = visible_recommendations(recommendations, ViewState().select_group("ENERGY"))
        assert [row.key for row in visible] == ["Power Generation", "RELIANCE"]

    def test_sub_group_filter(self, recommendations: list[AggregatedRow]) -> None:
        state = ViewState().select_group("ENERGY").select_sub_group("Power")
        assert [row.key for row in visible_recommendations(recommendations, state)] == [
            "Power Generation"
        ]

    def test_contributor_filter_any_match(self, recommendations: list[AggregatedRow]) -> None:
        state = ViewState().with_column_filter("contributors", ["Priya"])
        assert [row.key for row in visible_recommendations(recommendations, state)] == [
            "Power Generation",
            "RELIANCE",
        ]

    def test_contributor_and_group_intersect(self, recommendations: list[AggregatedRow]) -> None:
        state = ViewState().select_group("ENERGY").with_column_filter("contributors", ["Ankur"])
        assert [row.key for row in visible_recommendations(recommendations, state)] == [
            "Power Generation"
        ]

    def test_sort_by_contributor_count(self, recommendations: list[AggregatedRow]) -> None:
        state = ViewState().sorted_by("contributors", SortDirection.DESCEND)
        assert visible_recommendations(recommendations, state)[0].key == "Power Generation"

    def test_apply_column_filters_scalar(self, recommendations: list[AggregatedRow]) -> None:
        kept = apply_column_filters(recommendations, {"group": ["FINANCIAL"]})
        assert [row.key for row in kept] == ["Private Sector Bank"]

    def test_group_counts_skip_uncategorized(self, recommendations: list[AggregatedRow]) -> None:
        counts = group_counts(recommendations)
        assert counts == {"FINANCIAL": (1, 0), "ENERGY": (2, 2)}
        assert counts["ENERGY"].stocks == 2

    def test_total_stocks(self, recommendations: list[AggregatedRow]) -> None:
        assert total_stocks(recommendations) == 3

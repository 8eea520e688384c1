"""Pytest configuration and shared test fixtures.

This module provides fixtures for testing the Screener dashboard,
including sample market page markup, a small taxonomy, and
recommendation datasets.
"""

from __future__ import annotations

from typing import Any

import pytest

from screener_dashboard.models.recommendations import RecommendationDataset
from screener_dashboard.taxonomy.resolver import CategoryResolver
from screener_dashboard.taxonomy.sectors import freeze_taxonomy

# =============================================================================
# HTML CONTENT FIXTURES
# =============================================================================


def market_row(
    name: str,
    href: str | None = None,
    count: str = "5",
    metrics: tuple[str, ...] = ("120", "80", "15", "12%", "-", "22%", "9%"),
) -> str:
    """Build one market table row with the ten cells the page uses."""
    href = href if href is not None else f"/market/{name.replace(' ', '-')}/"
    cells = ["1", f"<a href='{href}'>{name}</a>", count, *metrics]
    return "<tr>" + "".join(f"<td>{cell}</td>" for cell in cells) + "</tr>"


def market_page(*rows: str) -> str:
    """Wrap rows in a market table with a header row."""
    header = (
        "<tr><th>S.No</th><th>Industry</th><th>Companies</th><th>Market Cap</th>"
        "<th>Median Cap</th><th>P/E</th><th>Sales Growth</th><th>OPM</th>"
        "<th>ROCE</th><th>1Y Return</th></tr>"
    )
    return f"<html><body><h1>Industry</h1><table>{header}{''.join(rows)}</table></body></html>"


@pytest.fixture
def sample_market_html() -> str:
    """Provide a market page with a header, one data row and one short row.

    Returns:
        HTML where only the "Alpha" row carries data.
    """
    short_row = "<tr><td>2</td><td><a href='/y'>Beta</a></td><td>3</td></tr>"
    return market_page(
        "<tr><td></td><td><a href='/x'>Alpha</a></td><td>5</td><td>120</td><td>80</td>"
        "<td>15</td><td>12%</td><td>-</td><td>22%</td><td>9%</td></tr>",
        short_row,
    )


@pytest.fixture
def energy_market_html() -> str:
    """Provide a market page with mapped and unmapped industries.

    Returns:
        HTML with two ENERGY industries, one bank, and one unknown industry.
    """
    return market_page(
        market_row("Unknown Industry", metrics=("10", "1", "-", "1%", "-", "3%", "-4%")),
        market_row("Power Generation", metrics=("900", "40", "18", "8%", "30%", "12%", "25%")),
        market_row("Private Sector Bank", metrics=("5,000", "90", "14", "11%", "-", "16%", "-2%")),
        market_row("Refineries & Marketing", metrics=("2,100", "60", "9", "3%", "7%", "9%", "5%")),
    )


# =============================================================================
# TAXONOMY FIXTURES
# =============================================================================


@pytest.fixture
def small_taxonomy() -> Any:
    """Provide a two-group taxonomy.

    Returns:
        Frozen taxonomy with ENERGY (two sub-groups) and FINANCIAL.
    """
    return freeze_taxonomy(
        {
            "FINANCIAL": {"Banks": ("Private Sector Bank", "Public Sector Bank")},
            "ENERGY": {
                "Power": ("Power Generation",),
                "Oil & Gas": ("Refineries & Marketing", "Oil Exploration & Production"),
            },
        }
    )


@pytest.fixture
def resolver(small_taxonomy: Any) -> CategoryResolver:
    """Provide a resolver over the small taxonomy, FINANCIAL shown first."""
    return CategoryResolver(small_taxonomy, group_order=("FINANCIAL", "ENERGY"))


@pytest.fixture
def full_resolver() -> CategoryResolver:
    """Provide a resolver over the bundled taxonomy."""
    return CategoryResolver()


# =============================================================================
# RECOMMENDATION FIXTURES
# =============================================================================


@pytest.fixture
def two_contributor_dataset() -> RecommendationDataset:
    """Provide a dataset where two contributors recommend RELIANCE.

    Returns:
        Dataset with a shared stock target and a shared sector target.
    """
    return RecommendationDataset.model_validate(
        {
            "Ankur": [
                {"type": "stock", "target": "RELIANCE", "note": "Retail carries it"},
                {
                    "type": "sector",
                    "target": "Power Generation",
                    "note": "Demand outruns supply",
                    "related_entities": [{"name": "Azad Engineering", "note": "Turbines"}],
                },
            ],
            "Priya": [
                {"type": "stock", "target": "RELIANCE", "note": "New energy capex"},
                {"type": "sector", "target": "Unknown Industry", "note": "Speculative"},
                {"type": "sector", "target": "Private Sector Bank", "note": "Credit costs bottoming"},
            ],
        }
    )


@pytest.fixture
def legacy_dataset_raw() -> dict[str, list[dict[str, Any]]]:
    """Provide a dataset mixing both legacy schemas.

    Returns:
        Raw decoded JSON as older files stored it.
    """
    return {
        "Ankur": [
            {
                "industry": "Aerospace & Defense",
                "thesis": "Order books at highs",
                "stocks": [{"name": "MTAR Technologies", "thesis": "Precision parts"}],
            },
            {"industry": "Tea & Coffee", "thesis": "Exports compounding", "stocks": None},
        ],
        "Priya": [
            {"type": "stock", "key": "RELIANCE", "thesis": "New energy capex"},
        ],
    }

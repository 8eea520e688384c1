"""Row models for the market industry table.

Metric fields keep the display string exactly as scraped; numeric
interpretation happens only inside sort comparators.
"""

from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field, computed_field

from screener_dashboard.config import MISSING_VALUE

# Display columns holding numbers rendered as text (with "," and "%")
METRIC_COLUMNS: tuple[str, ...] = (
    "market_cap",
    "median_cap",
    "pe_ratio",
    "sales_growth",
    "operating_margin",
    "return_on_capital",
    "one_year_return",
)


class Category(NamedTuple):
    """Resolved position of a name in the taxonomy.

    Both fields are None for names the taxonomy does not list.
    """

    group: str | None = None
    sub_group: str | None = None

    @property
    def is_mapped(self) -> bool:
        """Whether the name resolved to a taxonomy entry."""
        return self.group is not None


class ExtractedRow(BaseModel):
    """One industry row scraped from the market page.

    Attributes:
        name: Industry name (the anchor text of the second cell).
        source_url: Absolute link to the industry page.
        company_count: Number of listed companies in the industry.
        market_cap: Total market capitalisation, as displayed.
        median_cap: Median market capitalisation, as displayed.
        pe_ratio: Price to earnings, as displayed.
        sales_growth: Sales growth percentage, as displayed.
        operating_margin: Operating profit margin, as displayed.
        return_on_capital: Return on capital employed, as displayed.
        one_year_return: One year price return, as displayed.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Industry name")
    source_url: str = Field(description="Absolute industry page URL")
    company_count: int = Field(default=0, ge=0, description="Listed companies")
    market_cap: str = Field(default=MISSING_VALUE)
    median_cap: str = Field(default=MISSING_VALUE)
    pe_ratio: str = Field(default=MISSING_VALUE)
    sales_growth: str = Field(default=MISSING_VALUE)
    operating_margin: str = Field(default=MISSING_VALUE)
    return_on_capital: str = Field(default=MISSING_VALUE)
    one_year_return: str = Field(default=MISSING_VALUE)


class CategorizedRow(ExtractedRow):
    """An extracted row annotated with its taxonomy position.

    Recomputed from the extracted rows whenever they or the taxonomy
    change; never persisted.
    """

    group: str | None = Field(default=None, description="Industry group")
    sub_group: str | None = Field(default=None, description="Sub-group within the group")

    @computed_field
    @property
    def is_categorized(self) -> bool:
        """Whether the row matched a taxonomy leaf."""
        return self.group is not None

    @property
    def category(self) -> Category:
        """The row's (group, sub_group) pair."""
        return Category(self.group, self.sub_group)

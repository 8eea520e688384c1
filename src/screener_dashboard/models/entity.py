"""Entity registry record model."""

from pydantic import BaseModel, ConfigDict, Field


class EntityRecord(BaseModel):
    """Descriptive metadata for a listed company.

    Attributes:
        symbol: Short exchange identifier (registry key).
        display_name: Human readable company name.
        source_url: Company page on the data source.
        leaf_category: Industry the company is classified under.
        group: Declared industry group, when known.
        sub_group: Declared sub-group, when known.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str = Field(description="Exchange symbol")
    display_name: str = Field(description="Company name")
    source_url: str | None = Field(default=None, description="Company page URL")
    leaf_category: str | None = Field(default=None, description="Industry name")
    group: str | None = Field(default=None, description="Industry group")
    sub_group: str | None = Field(default=None, description="Sub-group")

"""Recommendation dataset and aggregated table models.

The dataset is keyed by contributor; each contributor lists entries in
the order they were published. Aggregated rows are keyed by target and
collect every contributor's note about that target.
"""

from collections.abc import Iterator
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, RootModel, computed_field


class EntryType(str, Enum):
    """What a recommendation entry is about."""

    SECTOR = "sector"
    STOCK = "stock"


class RelatedEntity(BaseModel):
    """A stock mentioned alongside a recommendation.

    Attributes:
        name: Display name of the stock.
        note: The contributor's note on that stock.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1, description="Stock display name")
    note: str = Field(default="", description="Contributor note")


class RecommendationEntry(BaseModel):
    """One recommendation published by a contributor.

    Attributes:
        type: Whether the target is an industry or a single stock.
        target: Industry name (sector entries) or exchange symbol (stock entries).
        note: The contributor's thesis.
        related_entities: Stocks the contributor picked within the target.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: EntryType = Field(description="Target kind")
    target: str = Field(min_length=1, description="Target key")
    note: str = Field(default="", description="Contributor thesis")
    related_entities: list[RelatedEntity] = Field(default_factory=list)


class RecommendationDataset(RootModel[dict[str, list[RecommendationEntry]]]):
    """All recommendations, keyed by contributor in publication order."""

    @property
    def contributors(self) -> list[str]:
        """Contributor names in dataset order."""
        return list(self.root)

    def iter_entries(self) -> Iterator[tuple[str, RecommendationEntry]]:
        """Yield (contributor, entry) pairs in dataset order."""
        for contributor, entries in self.root.items():
            for entry in entries:
                yield contributor, entry


class AggregatedRow(BaseModel):
    """All contributors' notes on a single target.

    Attributes:
        key: Target key (industry name, symbol, or related stock name).
        kind: Target kind; None for related stocks.
        display_name: Name shown in the table.
        source_url: Link to the target on the data source, when known.
        group: Resolved industry group.
        sub_group: Resolved sub-group.
        contributors: Contributors in first-seen order, without duplicates.
        notes: Latest note per contributor.
        related: Aggregated related stocks, in first-seen order.
    """

    key: str
    kind: EntryType | None = None
    display_name: str
    source_url: str | None = None
    group: str | None = None
    sub_group: str | None = None
    contributors: list[str] = Field(default_factory=list)
    notes: dict[str, str] = Field(default_factory=dict)
    related: list["AggregatedRow"] = Field(default_factory=list)

    @computed_field
    @property
    def contributor_count(self) -> int:
        """Number of distinct contributors."""
        return len(self.contributors)

    def note_for(self, contributor: str) -> str | None:
        """Return the contributor's note on this target, if any."""
        return self.notes.get(contributor)

    def add_note(self, contributor: str, note: str) -> None:
        """Record a contributor's note; the latest note for a contributor wins."""
        if contributor not in self.contributors:
            self.contributors.append(contributor)
        self.notes[contributor] = note

"""Reverse lookups over the industry taxonomy.

The resolver is built once from the taxonomy and shared by every view:
it maps an industry name to its (group, sub-group) pair and provides
the display ranks used for category ordering.

Example:
    >>> resolver = CategoryResolver()
    >>> resolver.resolve("Power Generation")
    Category(group='ENERGY', sub_group='Power')
    >>> resolver.resolve("Unknown Industry")
    Category(group=None, sub_group=None)
"""

from collections.abc import Iterable, Sequence
import sys
from typing import Protocol

from rapidfuzz import fuzz, process
import structlog

from screener_dashboard.exceptions import TaxonomyError
from screener_dashboard.models.entity import EntityRecord
from screener_dashboard.models.rows import CategorizedRow, Category, ExtractedRow
from screener_dashboard.taxonomy.sectors import GROUP_ORDER, TAXONOMY, Taxonomy

logger = structlog.get_logger(__name__)

# Rank given to anything outside the taxonomy; sorts after every mapped entry
UNRANKED = sys.maxsize

# Minimum fuzzy score for a suggestion to be worth logging
SUGGESTION_THRESHOLD = 80


class Named(Protocol):
    """Anything carrying an industry name."""

    name: str


class CategoryResolver:
    """Reverse index from industry name to taxonomy position.

    Attributes:
        taxonomy: The group -> sub-group -> industries mapping.
        group_order: Display order of groups.
    """

    def __init__(
        self,
        taxonomy: Taxonomy = TAXONOMY,
        group_order: Sequence[str] = GROUP_ORDER,
    ) -> None:
        """Build the reverse indices.

        Args:
            taxonomy: The group -> sub-group -> industries mapping.
            group_order: Display order of groups.

        Raises:
            TaxonomyError: If an industry is listed under more than one sub-group.
        """
        self.taxonomy = taxonomy
        self.group_order = tuple(group_order)

        owners: dict[str, list[tuple[str, str]]] = {}
        self._sub_group_rank: dict[tuple[str, str], int] = {}
        for group, sub_groups in taxonomy.items():
            for index, (sub_group, industries) in enumerate(sub_groups.items()):
                self._sub_group_rank[(group, sub_group)] = index
                for industry in industries:
                    owners.setdefault(industry, []).append((group, sub_group))

        for industry, pairs in owners.items():
            if len(pairs) > 1:
                raise TaxonomyError(industry, pairs)

        self._leaf_index: dict[str, Category] = {
            industry: Category(*pairs[0]) for industry, pairs in owners.items()
        }
        self._group_rank: dict[str, int] = {
            group: index for index, group in enumerate(self.group_order)
        }

        ordered, listed = set(self.group_order), set(taxonomy)
        if ordered != listed:
            logger.warning(
                "Group order does not match taxonomy groups",
                missing_from_order=sorted(listed - ordered),
                unknown_in_order=sorted(ordered - listed),
            )

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def resolve(self, name: str) -> Category:
        """Return the (group, sub_group) of an industry name.

        Unlisted names resolve to an empty Category rather than failing.
        """
        return self._leaf_index.get(name, Category())

    def resolve_entity(self, entity: EntityRecord) -> Category:
        """Return a company's category.

        A declared group wins; otherwise the declared industry is resolved
        through the taxonomy.
        """
        if entity.group:
            return Category(entity.group, entity.sub_group)
        if entity.leaf_category:
            return self.resolve(entity.leaf_category)
        return Category()

    def suggest(self, name: str) -> str | None:
        """Return the closest known industry name, if any is close enough."""
        if not name or not self._leaf_index:
            return None
        match = process.extractOne(name, self._leaf_index.keys(), scorer=fuzz.ratio)
        if match and match[1] >= SUGGESTION_THRESHOLD:
            return match[0]
        return None

    def groups(self) -> list[str]:
        """Groups in display order, followed by any unordered taxonomy groups."""
        extra = [group for group in self.taxonomy if group not in self._group_rank]
        return [group for group in self.group_order if group in self.taxonomy] + extra

    def sub_groups_of(self, group: str) -> list[str]:
        """Sub-groups of a group in taxonomy order (empty for unknown groups)."""
        return list(self.taxonomy.get(group, {}))

    def industries_of(self, group: str, sub_group: str | None = None) -> frozenset[str]:
        """Return the industry names under a group or one of its sub-groups.

        Args:
            group: Industry group.
            sub_group: Optional sub-group; when omitted, all sub-groups are unioned.

        Returns:
            Set of industry names (empty for unknown group or sub-group).
        """
        sub_groups = self.taxonomy.get(group, {})
        if sub_group is not None:
            return frozenset(sub_groups.get(sub_group, ()))
        return frozenset(industry for industries in sub_groups.values() for industry in industries)

    def count_matching(
        self, rows: Iterable[Named], group: str, sub_group: str | None = None
    ) -> int:
        """Count rows whose name falls under the group (and sub-group)."""
        industries = self.industries_of(group, sub_group)
        return sum(1 for row in rows if row.name in industries)

    # -------------------------------------------------------------------------
    # Ordering
    # -------------------------------------------------------------------------

    def group_rank(self, group: str | None) -> int:
        """Display position of a group; unknown groups rank last."""
        if group is None:
            return UNRANKED
        return self._group_rank.get(group, UNRANKED)

    def sub_group_rank(self, group: str | None, sub_group: str | None) -> int:
        """Position of a sub-group within its group; unknown pairs rank last."""
        if group is None or sub_group is None:
            return UNRANKED
        return self._sub_group_rank.get((group, sub_group), UNRANKED)

    def category_sort_key(self, group: str | None, sub_group: str | None) -> tuple[int, int]:
        """Sort key placing rows by group order, then sub-group order."""
        return (self.group_rank(group), self.sub_group_rank(group, sub_group))

    # -------------------------------------------------------------------------
    # Annotation
    # -------------------------------------------------------------------------

    def categorize(self, rows: Iterable[ExtractedRow]) -> list[CategorizedRow]:
        """Annotate extracted rows with their category.

        Unmatched rows are kept, uncategorized.

        Args:
            rows: Rows in document order.

        Returns:
            Categorized rows in the same order.
        """
        categorized = []
        unmatched = 0
        for row in rows:
            category = self.resolve(row.name)
            if not category.is_mapped:
                unmatched += 1
                logger.debug(
                    "Industry not in taxonomy",
                    industry=row.name,
                    suggestion=self.suggest(row.name),
                )
            categorized.append(
                CategorizedRow(
                    **row.model_dump(include=set(ExtractedRow.model_fields)),
                    group=category.group,
                    sub_group=category.sub_group,
                )
            )
        if unmatched:
            logger.info(
                "Uncategorized industries", count=unmatched, total=len(categorized)
            )
        return categorized

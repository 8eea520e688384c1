"""Aggregation of contributor recommendations into a per-target table.

Every contributor's entries are folded into one row per target. A
contributor appears once per target, in first-seen order; when a
contributor lists the same target twice, the later note replaces the
earlier one. Related stocks are folded the same way, one level down.
"""

from collections.abc import Iterable, Mapping

import structlog

from screener_dashboard.models.entity import EntityRecord
from screener_dashboard.models.recommendations import (
    AggregatedRow,
    EntryType,
    RecommendationDataset,
)
from screener_dashboard.models.rows import Category
from screener_dashboard.taxonomy.entities import ENTITY_REGISTRY, find_entity_by_name
from screener_dashboard.taxonomy.resolver import CategoryResolver

logger = structlog.get_logger(__name__)


TargetKey = tuple[EntryType, str]


def aggregate(dataset: RecommendationDataset) -> dict[TargetKey, AggregatedRow]:
    """Fold the dataset into one row per target kind and key.

    Args:
        dataset: Recommendations keyed by contributor.

    Returns:
        Rows keyed by (kind, target), in first-seen order. A sector and a
        stock sharing a target string stay separate rows. Built fresh on every call.
    """
    rows: dict[TargetKey, AggregatedRow] = {}
    related_rows: dict[tuple[TargetKey, str], AggregatedRow] = {}

    for contributor, entry in dataset.iter_entries():
        target_key = (entry.type, entry.target)
        row = rows.get(target_key)
        if row is None:
            row = AggregatedRow(key=entry.target, kind=entry.type, display_name=entry.target)
            rows[target_key] = row
        row.add_note(contributor, entry.note)

        for related in entry.related_entities:
            child = related_rows.get((target_key, related.name))
            if child is None:
                child = AggregatedRow(key=related.name, display_name=related.name)
                related_rows[(target_key, related.name)] = child
                row.related.append(child)
            child.add_note(contributor, related.note)

    return rows


def sort_by_category(
    rows: Iterable[AggregatedRow], resolver: CategoryResolver
) -> list[AggregatedRow]:
    """Stable sort by group display order, then sub-group order.

    Rows outside the taxonomy go last; equal categories keep their order.
    """
    return sorted(rows, key=lambda row: resolver.category_sort_key(row.group, row.sub_group))


def _annotate_related(
    child: AggregatedRow, registry: Mapping[str, EntityRecord], resolver: CategoryResolver
) -> AggregatedRow:
    entity = find_entity_by_name(child.key, registry)
    if entity is None:
        return child.model_copy()
    category = resolver.resolve_entity(entity)
    return child.model_copy(
        update={
            "source_url": entity.source_url,
            "group": category.group,
            "sub_group": category.sub_group,
        }
    )


def _annotate(
    row: AggregatedRow, registry: Mapping[str, EntityRecord], resolver: CategoryResolver
) -> AggregatedRow:
    display_name, source_url, category = row.key, None, Category()

    if row.kind == EntryType.STOCK:
        entity = registry.get(row.key)
        if entity is None:
            logger.warning("Stock not in entity registry", symbol=row.key)
        else:
            display_name, source_url = entity.display_name, entity.source_url
            category = resolver.resolve_entity(entity)
    else:
        category = resolver.resolve(row.key)
        if not category.is_mapped:
            logger.info(
                "Recommended industry not in taxonomy",
                industry=row.key,
                suggestion=resolver.suggest(row.key),
            )

    return row.model_copy(
        update={
            "display_name": display_name,
            "source_url": source_url,
            "group": category.group,
            "sub_group": category.sub_group,
            "related": [_annotate_related(child, registry, resolver) for child in row.related],
        }
    )


def build_recommendation_table(
    dataset: RecommendationDataset,
    resolver: CategoryResolver | None = None,
    registry: Mapping[str, EntityRecord] = ENTITY_REGISTRY,
) -> list[AggregatedRow]:
    """Aggregate, annotate, and order the recommendation table.

    Industry targets are placed through the taxonomy; stock targets take
    their name, link and category from the entity registry. Related stocks
    are linked by display name.

    Args:
        dataset: Recommendations keyed by contributor.
        resolver: Category resolver. A default one is built if not provided.
        registry: Entity registry for stock targets.

    Returns:
        Annotated rows ordered by category.
    """
    resolver = resolver or CategoryResolver()
    annotated = [_annotate(row, registry, resolver) for row in aggregate(dataset).values()]
    return sort_by_category(annotated, resolver)

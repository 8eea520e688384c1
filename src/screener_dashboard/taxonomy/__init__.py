"""Static taxonomy, entity registry, and the category resolver."""

from screener_dashboard.taxonomy.entities import (
    ENTITY_REGISTRY,
    find_entity_by_name,
    get_entity,
)
from screener_dashboard.taxonomy.resolver import UNRANKED, CategoryResolver
from screener_dashboard.taxonomy.sectors import (
    GROUP_ORDER,
    SIDEBAR_SECTIONS,
    TAXONOMY,
    Taxonomy,
    freeze_taxonomy,
)

__all__ = [
    "ENTITY_REGISTRY",
    "GROUP_ORDER",
    "SIDEBAR_SECTIONS",
    "TAXONOMY",
    "UNRANKED",
    "CategoryResolver",
    "Taxonomy",
    "find_entity_by_name",
    "freeze_taxonomy",
    "get_entity",
]

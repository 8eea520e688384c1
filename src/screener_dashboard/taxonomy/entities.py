"""Registry of listed companies referenced by the recommendation dataset.

Maps exchange symbol to display metadata and industry classification.
"""

from collections.abc import Mapping
from types import MappingProxyType

from screener_dashboard.models.entity import EntityRecord

_ENTITIES: tuple[EntityRecord, ...] = (
    EntityRecord(
        symbol="RELIANCE",
        display_name="Reliance Industries",
        source_url="https://www.screener.in/company/RELIANCE/",
        leaf_category="Refineries & Marketing",
        group="ENERGY",
        sub_group="Oil & Gas",
    ),
    EntityRecord(
        symbol="CCLPRODUCTS",
        display_name="CCL Products",
        source_url="https://www.screener.in/company/CCL/",
        leaf_category="Tea & Coffee",
        group="F&B",
        sub_group="Beverages",
    ),
    EntityRecord(
        symbol="MTARTECH",
        display_name="MTAR Technologies",
        source_url="https://www.screener.in/company/MTARTECH/",
        leaf_category="Aerospace & Defense",
        group="DEFENSE",
        sub_group="Other",
    ),
    EntityRecord(
        symbol="AZAD",
        display_name="Azad Engineering",
        source_url="https://www.screener.in/company/AZAD/",
        leaf_category="Aerospace & Defense",
        group="DEFENSE",
        sub_group="Other",
    ),
    EntityRecord(
        symbol="SONACOMS",
        display_name="Sona BLW",
        source_url="https://www.screener.in/company/SONACOMS/",
        leaf_category="Auto Components & Equipments",
        group="AUTO",
        sub_group="Ancillary",
    ),
)

ENTITY_REGISTRY: Mapping[str, EntityRecord] = MappingProxyType(
    {entity.symbol: entity for entity in _ENTITIES}
)


def get_entity(
    symbol: str, registry: Mapping[str, EntityRecord] = ENTITY_REGISTRY
) -> EntityRecord | None:
    """Look up a company by exchange symbol."""
    return registry.get(symbol)


def find_entity_by_name(
    display_name: str, registry: Mapping[str, EntityRecord] = ENTITY_REGISTRY
) -> EntityRecord | None:
    """Look up a company by its display name.

    Related stocks in the recommendation dataset are named, not keyed by
    symbol, so their links are found by name.

    Args:
        display_name: Company name as written in the dataset.
        registry: Registry to search.

    Returns:
        The first matching record, or None.
    """
    for entity in registry.values():
        if entity.display_name == display_name:
            return entity
    return None

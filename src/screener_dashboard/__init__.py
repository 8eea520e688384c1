"""Screener.in Market Dashboard.

Fetches the Screener.in market overview, extracts one row per industry,
maps each industry into a fixed group/sub-group taxonomy, and serves a
filterable, sortable view of the result. A second view aggregates
contributor recommendations and orders them by the same taxonomy.

Usage:
    from screener_dashboard import DashboardSession, DocumentRetriever, retriever_loader
    import asyncio

    async def main():
        async with DocumentRetriever() as retriever:
            session = DashboardSession(retriever_loader(retriever))
            await session.refresh()
            session.select_group("ENERGY")
            return session.visible_rows()

    rows = asyncio.run(main())

    # Recommendations
    from screener_dashboard import build_recommendation_table, load_recommendations
    table = build_recommendation_table(load_recommendations())
"""

# =============================================================================
# EXCEPTIONS
# =============================================================================
from .exceptions import (
    DatasetError,
    FetchError,
    ScreenerDashboardError,
    TaxonomyError,
)

# =============================================================================
# RETRIEVAL
# =============================================================================
from .fetcher import (
    DirectStrategy,
    DocumentRetriever,
    FetcherConfig,
    FetchExhausted,
    FetchResult,
    FetchSuccess,
    ProxyStrategy,
    RelayStrategy,
    RetrievalStrategy,
    default_strategies,
)

# =============================================================================
# MODELS
# =============================================================================
from .models import (
    METRIC_COLUMNS,
    AggregatedRow,
    CategorizedRow,
    Category,
    EntityRecord,
    EntryType,
    ExtractedRow,
    RecommendationDataset,
    RecommendationEntry,
    RelatedEntity,
)
from .parser import MarketTableParser, extract_rows, parse_number

# =============================================================================
# RECOMMENDATIONS
# =============================================================================
from .recommendations import (
    aggregate,
    build_recommendation_table,
    load_recommendations,
    migrate_legacy_dataset,
    sort_by_category,
)

# =============================================================================
# SESSION AND VIEW
# =============================================================================
from .session import (
    DashboardSession,
    LoadStatus,
    retriever_loader,
    static_loader,
)

# =============================================================================
# TAXONOMY
# =============================================================================
from .taxonomy import (
    ENTITY_REGISTRY,
    GROUP_ORDER,
    TAXONOMY,
    CategoryResolver,
    get_entity,
)
from .view import (
    SortDirection,
    ViewState,
    group_counts,
    sort_rows,
    visible_industries,
    visible_recommendations,
)

__version__ = "0.1.0"

__all__ = [
    # ==========================================================================
    # EXCEPTIONS
    # ==========================================================================
    "DatasetError",
    "FetchError",
    "ScreenerDashboardError",
    "TaxonomyError",
    # ==========================================================================
    # RETRIEVAL
    # ==========================================================================
    "DirectStrategy",
    "DocumentRetriever",
    "FetchExhausted",
    "FetchResult",
    "FetchSuccess",
    "FetcherConfig",
    "ProxyStrategy",
    "RelayStrategy",
    "RetrievalStrategy",
    "default_strategies",
    # ==========================================================================
    # MODELS AND PARSING
    # ==========================================================================
    "METRIC_COLUMNS",
    "AggregatedRow",
    "CategorizedRow",
    "Category",
    "EntityRecord",
    "EntryType",
    "ExtractedRow",
    "MarketTableParser",
    "RecommendationDataset",
    "RecommendationEntry",
    "RelatedEntity",
    "extract_rows",
    "parse_number",
    # ==========================================================================
    # TAXONOMY
    # ==========================================================================
    "ENTITY_REGISTRY",
    "GROUP_ORDER",
    "TAXONOMY",
    "CategoryResolver",
    "get_entity",
    # ==========================================================================
    # RECOMMENDATIONS
    # ==========================================================================
    "aggregate",
    "build_recommendation_table",
    "load_recommendations",
    "migrate_legacy_dataset",
    "sort_by_category",
    # ==========================================================================
    # SESSION AND VIEW
    # ==========================================================================
    "DashboardSession",
    "LoadStatus",
    "SortDirection",
    "ViewState",
    "group_counts",
    "retriever_loader",
    "sort_rows",
    "static_loader",
    "visible_industries",
    "visible_recommendations",
    "__version__",
]

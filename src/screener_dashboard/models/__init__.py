"""Pydantic models for the Screener dashboard.

This package contains:
- Market table rows (extracted and categorized)
- Entity registry records
- Recommendation dataset and aggregated recommendation rows
"""

from screener_dashboard.models.entity import EntityRecord
from screener_dashboard.models.recommendations import (
    AggregatedRow,
    EntryType,
    RecommendationDataset,
    RecommendationEntry,
    RelatedEntity,
)
from screener_dashboard.models.rows import (
    METRIC_COLUMNS,
    CategorizedRow,
    Category,
    ExtractedRow,
)

__all__ = [
    # Market rows
    "METRIC_COLUMNS",
    "Category",
    "CategorizedRow",
    "ExtractedRow",
    # Entities
    "EntityRecord",
    # Recommendations
    "AggregatedRow",
    "EntryType",
    "RecommendationDataset",
    "RecommendationEntry",
    "RelatedEntity",
]

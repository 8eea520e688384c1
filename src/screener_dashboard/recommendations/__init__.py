"""Recommendation dataset loading and aggregation."""

from screener_dashboard.recommendations.aggregator import (
    aggregate,
    build_recommendation_table,
    sort_by_category,
)
from screener_dashboard.recommendations.dataset import (
    load_recommendations,
    migrate_legacy_dataset,
    migrate_legacy_entry,
    validate_recommendations,
    write_recommendations,
)

__all__ = [
    "aggregate",
    "build_recommendation_table",
    "load_recommendations",
    "migrate_legacy_dataset",
    "migrate_legacy_entry",
    "sort_by_category",
    "validate_recommendations",
    "write_recommendations",
]

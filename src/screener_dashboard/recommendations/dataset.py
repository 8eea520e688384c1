"""Loading, validation, and one-off migration of the recommendation dataset.

The dataset is read in a single canonical schema:

    {contributor: [{"type": "sector" | "stock", "target": ..., "note": ...,
                    "related_entities": [{"name": ..., "note": ...}]}]}

Older files used either ``{"industry", "thesis", "stocks"}`` entries or
``{"type", "key", "thesis"}`` entries. Those are converted once with
`migrate_legacy_dataset` (``screener-dash migrate-dataset``) instead of
being accepted at read time.
"""

from __future__ import annotations

from importlib import resources
import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError
import structlog

from screener_dashboard.exceptions import DatasetError
from screener_dashboard.models.recommendations import EntryType, RecommendationDataset

logger = structlog.get_logger(__name__)

BUNDLED_DATASET = "recommendations.json"


def load_recommendations(path: Path | None = None) -> RecommendationDataset:
    """Load and validate the recommendation dataset.

    Args:
        path: Dataset file. Uses the bundled dataset if not provided.

    Returns:
        The validated dataset.

    Raises:
        DatasetError: If the file is missing, not JSON, or not canonical.
    """
    location = str(path) if path else f"screener_dashboard/data/{BUNDLED_DATASET}"
    try:
        if path is None:
            text = (
                resources.files("screener_dashboard.data")
                .joinpath(BUNDLED_DATASET)
                .read_text(encoding="utf-8")
            )
        else:
            text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DatasetError(location, str(e)) from e

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise DatasetError(location, f"not valid JSON ({e})") from e

    return validate_recommendations(raw, location)


def validate_recommendations(raw: Any, location: str = "<memory>") -> RecommendationDataset:
    """Validate raw data against the canonical schema.

    Args:
        raw: Decoded JSON.
        location: Where the data came from, for error messages.

    Returns:
        The validated dataset.

    Raises:
        DatasetError: If the data does not match the canonical schema.
    """
    try:
        dataset = RecommendationDataset.model_validate(raw)
    except ValidationError as e:
        hint = " (legacy schema? run 'screener-dash migrate-dataset')" if _looks_legacy(raw) else ""
        raise DatasetError(location, f"{e.error_count()} validation error(s){hint}\n{e}") from e

    logger.debug(
        "Recommendation dataset loaded",
        location=location,
        contributors=len(dataset.contributors),
        entries=sum(1 for _ in dataset.iter_entries()),
    )
    return dataset


def _looks_legacy(raw: Any) -> bool:
    if not isinstance(raw, dict):
        return False
    for entries in raw.values():
        if isinstance(entries, list):
            for entry in entries:
                if isinstance(entry, dict) and ("industry" in entry or "key" in entry):
                    return True
    return False


# =============================================================================
# LEGACY MIGRATION
# =============================================================================


def migrate_legacy_entry(entry: dict[str, Any]) -> dict[str, Any]:
    """Convert one entry of any known schema to the canonical shape.

    Args:
        entry: A legacy or canonical entry.

    Returns:
        The canonical entry.

    Raises:
        ValueError: If the entry matches no known schema.

    Example:
        >>> migrate_legacy_entry({"industry": "Coal", "thesis": "Cheap"})
        {'type': 'sector', 'target': 'Coal', 'note': 'Cheap', 'related_entities': []}
    """
    if "target" in entry:
        return {
            "type": entry.get("type", EntryType.SECTOR.value),
            "target": entry["target"],
            "note": entry.get("note", ""),
            "related_entities": list(entry.get("related_entities", [])),
        }

    if "industry" in entry:
        return {
            "type": EntryType.SECTOR.value,
            "target": entry["industry"],
            "note": entry.get("thesis", ""),
            "related_entities": [
                {"name": stock["name"], "note": stock.get("thesis", "")}
                for stock in entry.get("stocks") or []
            ],
        }

    if "key" in entry:
        return {
            "type": entry.get("type", EntryType.SECTOR.value),
            "target": entry["key"],
            "note": entry.get("thesis", ""),
            "related_entities": [],
        }

    msg = f"Unrecognised recommendation entry: {sorted(entry)}"
    raise ValueError(msg)


def migrate_legacy_dataset(raw: dict[str, list[dict[str, Any]]]) -> RecommendationDataset:
    """Convert a whole dataset to the canonical schema and validate it.

    Args:
        raw: Decoded dataset in any known schema (mixed shapes allowed).

    Returns:
        The validated canonical dataset.

    Raises:
        DatasetError: If an entry matches no known schema or fails validation.
    """
    try:
        migrated = {
            contributor: [migrate_legacy_entry(entry) for entry in entries]
            for contributor, entries in raw.items()
        }
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        raise DatasetError("<legacy>", str(e)) from e
    return validate_recommendations(migrated, "<legacy>")


def write_recommendations(dataset: RecommendationDataset, path: Path) -> None:
    """Write a dataset as canonical, indented JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(dataset.model_dump(mode="json"), indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )

"""Tests for loading, validating and migrating the recommendation dataset."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from screener_dashboard.exceptions import DatasetError
from screener_dashboard.models.recommendations import EntryType
from screener_dashboard.recommendations import (
    load_recommendations,
    migrate_legacy_dataset,
    migrate_legacy_entry,
    validate_recommendations,
    write_recommendations,
)


class TestLoadRecommendations:
    """Tests for load_recommendations."""

    def test_bundled_dataset_loads(self) -> None:
        dataset = load_recommendations()
        assert dataset.contributors == ["Ankur", "Priya", "Rahul"]

    def test_bundled_dataset_is_canonical(self) -> None:
        for _, entry in load_recommendations().iter_entries():
            assert entry.type in (EntryType.SECTOR, EntryType.STOCK)
            assert entry.target

    def test_load_from_path(self, tmp_path: Path) -> None:
        path = tmp_path / "recs.json"
        path.write_text(
            json.dumps({"Dev": [{"type": "sector", "target": "Tractors", "note": "Rural"}]}),
            encoding="utf-8",
        )
        dataset = load_recommendations(path)
        (contributor, entry), = list(dataset.iter_entries())
        assert contributor == "Dev"
        assert entry.target == "Tractors"
        assert entry.related_entities == []

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DatasetError) as exc_info:
            load_recommendations(tmp_path / "missing.json")
        assert exc_info.value.path.endswith("missing.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(DatasetError, match="not valid JSON"):
            load_recommendations(path)

    def test_legacy_file_rejected_with_hint(
        self, tmp_path: Path, legacy_dataset_raw: dict[str, Any]
    ) -> None:
        """Legacy shapes are never accepted at read time."""
        path = tmp_path / "legacy.json"
        path.write_text(json.dumps(legacy_dataset_raw), encoding="utf-8")
        with pytest.raises(DatasetError, match="migrate-dataset"):
            load_recommendations(path)


class TestValidateRecommendations:
    """Tests for validate_recommendations."""

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(DatasetError):
            validate_recommendations({"Dev": [{"type": "bond", "target": "G-Sec"}]})

    def test_empty_target_rejected(self) -> None:
        with pytest.raises(DatasetError):
            validate_recommendations({"Dev": [{"type": "sector", "target": ""}]})

    def test_extra_fields_rejected(self) -> None:
        with pytest.raises(DatasetError):
            validate_recommendations(
                {"Dev": [{"type": "sector", "target": "Tractors", "thesis": "old field"}]}
            )

    def test_not_a_mapping(self) -> None:
        with pytest.raises(DatasetError):
            validate_recommendations(["Dev"])


class TestMigration:
    """Tests for legacy dataset migration."""

    def test_industry_entry(self) -> None:
        migrated = migrate_legacy_entry(
            {
                "industry": "Aerospace & Defense",
                "thesis": "Order books at highs",
                "stocks": [{"name": "MTAR Technologies", "thesis": "Precision parts"}],
            }
        )
        assert migrated == {
            "type": "sector",
            "target": "Aerospace & Defense",
            "note": "Order books at highs",
            "related_entities": [{"name": "MTAR Technologies", "note": "Precision parts"}],
        }

    def test_key_entry(self) -> None:
        migrated = migrate_legacy_entry({"type": "stock", "key": "RELIANCE", "thesis": "Capex"})
        assert migrated == {
            "type": "stock",
            "target": "RELIANCE",
            "note": "Capex",
            "related_entities": [],
        }

    def test_canonical_entry_passes_through(self) -> None:
        entry = {"type": "sector", "target": "Tractors", "note": "Rural", "related_entities": []}
        assert migrate_legacy_entry(entry) == entry

    def test_unknown_entry(self) -> None:
        with pytest.raises(ValueError, match="Unrecognised"):
            migrate_legacy_entry({"name": "Tractors"})

    def test_mixed_dataset(self, legacy_dataset_raw: dict[str, Any]) -> None:
        dataset = migrate_legacy_dataset(legacy_dataset_raw)

        entries = list(dataset.iter_entries())
        assert [(contributor, entry.target) for contributor, entry in entries] == [
            ("Ankur", "Aerospace & Defense"),
            ("Ankur", "Tea & Coffee"),
            ("Priya", "RELIANCE"),
        ]
        assert entries[1][1].related_entities == []
        assert entries[2][1].type is EntryType.STOCK

    def test_bad_dataset_raises_dataset_error(self) -> None:
        with pytest.raises(DatasetError):
            migrate_legacy_dataset({"Dev": [{"name": "Tractors"}]})

    def test_migrated_file_loads(self, tmp_path: Path, legacy_dataset_raw: dict[str, Any]) -> None:
        path = tmp_path / "out" / "recs.json"
        write_recommendations(migrate_legacy_dataset(legacy_dataset_raw), path)

        reloaded = load_recommendations(path)
        assert reloaded == migrate_legacy_dataset(legacy_dataset_raw)

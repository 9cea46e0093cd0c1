"""Tests for the catalog store and exclusion policy."""

from pathlib import Path

import pytest

from finder.catalog.models import CatalogRecord
from finder.catalog.repository import CatalogStore, ExclusionPolicy
from finder.domain.exceptions import DataLoadError, RecordNotFoundError

from conftest import write_json


class TestExclusionPolicy:
    """Tests for ExclusionPolicy."""

    def test_excluded_parent(self, policy: ExclusionPolicy) -> None:
        """Records under an excluded parent are excluded."""
        record = CatalogRecord(id="x", Parent="End User Computing")
        assert policy.is_excluded(record)

    def test_parent_marker(self, policy: ExclusionPolicy) -> None:
        """Any parent containing the marker is excluded."""
        record = CatalogRecord(id="x", Parent="Finance systems (PP)")
        assert policy.is_excluded(record)

    def test_excluded_status(self, policy: ExclusionPolicy) -> None:
        """Records with the excluded operational status are excluded."""
        record = CatalogRecord(id="x", Parent="Schools funding", **{"Operational Status": "New"})
        assert policy.is_excluded(record)

    def test_eligible_record(self, policy: ExclusionPolicy) -> None:
        """Records matching no rule are kept."""
        record = CatalogRecord(
            id="x", Parent="Schools funding", **{"Operational Status": "Operational"}
        )
        assert not policy.is_excluded(record)

    def test_record_without_parent(self, policy: ExclusionPolicy) -> None:
        """A missing parent does not trigger the parent rules."""
        assert not policy.is_excluded(CatalogRecord(id="x"))

    def test_status_match_is_exact(self, policy: ExclusionPolicy) -> None:
        """Only the exact status value excludes."""
        record = CatalogRecord(id="x", **{"Operational Status": "new"})
        assert not policy.is_excluded(record)


class TestCatalogStore:
    """Tests for CatalogStore."""

    def test_load_applies_policy(self, catalog_store: CatalogStore, eligible_ids: list[str]) -> None:
        """Only eligible records are returned, in file order."""
        records = catalog_store.load()
        assert [r.id for r in records] == eligible_ids

    def test_no_excluded_record_survives(self, catalog_store: CatalogStore) -> None:
        """No loaded record falls under the exclusion policy."""
        records = catalog_store.load()
        assert all(not catalog_store.policy.is_excluded(r) for r in records)

    def test_source_fields_are_mapped(self, catalog_store: CatalogStore) -> None:
        """Source keys map to record attributes."""
        record = catalog_store.get("1")
        assert record.name == "Pupil Premium"
        assert record.business_area == "Funding"
        assert record.parent == "Schools funding"
        assert record.type == "Service"
        assert record.operational_status == "Operational"

    def test_get_not_found(self, catalog_store: CatalogStore) -> None:
        """Unknown IDs raise RecordNotFoundError."""
        with pytest.raises(RecordNotFoundError) as exc_info:
            catalog_store.get("missing")
        assert exc_info.value.details == {"record_id": "missing"}

    def test_get_excluded_record(self, catalog_store: CatalogStore) -> None:
        """Excluded records cannot be fetched by ID."""
        with pytest.raises(RecordNotFoundError):
            catalog_store.get("9")

    def test_invalid_rows_are_skipped(self, tmp_path: Path, policy: ExclusionPolicy) -> None:
        """Rows without a usable ID are skipped, the rest still load."""
        path = write_json(
            tmp_path / "fips.json",
            [{"id": "1", "Name": "Kept"}, {"Name": "No id"}, {"id": ""}, "not an object"],
        )
        records = CatalogStore.from_path(path, policy).load()
        assert [r.id for r in records] == ["1"]

    def test_duplicate_ids_keep_first(self, tmp_path: Path, policy: ExclusionPolicy) -> None:
        """When an ID repeats, the first row wins."""
        path = write_json(
            tmp_path / "fips.json",
            [{"id": "1", "Name": "First"}, {"id": "1", "Name": "Second"}],
        )
        records = CatalogStore.from_path(path, policy).load()
        assert len(records) == 1
        assert records[0].name == "First"

    def test_excluded_duplicate_does_not_hide_eligible(
        self, tmp_path: Path, policy: ExclusionPolicy
    ) -> None:
        """An excluded row does not shadow a later eligible row with the same ID."""
        path = write_json(
            tmp_path / "fips.json",
            [
                {"id": "1", "Name": "Draft", "Operational Status": "New"},
                {"id": "1", "Name": "Published", "Operational Status": "Live"},
            ],
        )
        store = CatalogStore.from_path(path, policy)
        assert [r.name for r in store.load()] == ["Published"]
        assert store.get("1").name == "Published"

    def test_numeric_ids_are_strings(self, tmp_path: Path, policy: ExclusionPolicy) -> None:
        """Numeric IDs are coerced to strings."""
        path = write_json(tmp_path / "fips.json", [{"id": 42, "Name": "Numeric"}])
        store = CatalogStore.from_path(path, policy)
        assert store.get("42").name == "Numeric"

    def test_missing_file(self, tmp_path: Path, policy: ExclusionPolicy) -> None:
        """A missing catalog file raises DataLoadError."""
        store = CatalogStore.from_path(tmp_path / "absent.json", policy)
        with pytest.raises(DataLoadError):
            store.load()

    def test_not_an_array(self, tmp_path: Path, policy: ExclusionPolicy) -> None:
        """A catalog document that is not an array raises DataLoadError."""
        path = write_json(tmp_path / "fips.json", {"id": "1"})
        with pytest.raises(DataLoadError) as exc_info:
            CatalogStore.from_path(path, policy).load()
        assert "array" in exc_info.value.details["reason"]

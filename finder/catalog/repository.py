"""Catalog record store.

Loads the catalog file and applies the fixed exclusion policy, producing
the eligible working set every filter and facet count operates over.
"""

from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from finder.catalog.models import CatalogRecord
from finder.domain.exceptions import DataLoadError, RecordNotFoundError
from finder.infrastructure.json_source import JsonFileSource

logger = structlog.get_logger()


class ExclusionPolicy:
    """Content policy removing records that must never be listed.

    A record is excluded when its parent is one of the excluded parents,
    its parent contains the marker, or its operational status equals the
    excluded status.
    """

    def __init__(
        self,
        excluded_parents: Iterable[str],
        parent_marker: str = "(PP)",
        excluded_status: str = "New",
    ) -> None:
        """Initialize policy.

        Args:
            excluded_parents: Parent labels excluded by exact match.
            parent_marker: Substring that excludes any parent containing it.
            excluded_status: Operational status excluded by exact match.
        """
        self.excluded_parents = frozenset(excluded_parents)
        self.parent_marker = parent_marker
        self.excluded_status = excluded_status

    def is_excluded(self, record: CatalogRecord) -> bool:
        """Check whether a record falls under the policy."""
        if record.parent in self.excluded_parents:
            return True
        if record.parent and self.parent_marker and self.parent_marker in record.parent:
            return True
        return record.operational_status == self.excluded_status


class CatalogStore:
    """Store for the eligible catalog working set.

    Reads the catalog file on every ``load`` unless the underlying source
    caches it.

    Example usage:
        store = CatalogStore(JsonFileSource("data/fips.json"), policy)
        records = store.load()
        record = store.get("fips-001")
    """

    def __init__(self, source: JsonFileSource, policy: ExclusionPolicy) -> None:
        """Initialize store.

        Args:
            source: JSON source for the catalog file.
            policy: Exclusion policy applied after loading.
        """
        self.source = source
        self.policy = policy

    @classmethod
    def from_path(
        cls,
        path: str | Path,
        policy: ExclusionPolicy,
        cache_enabled: bool = False,
    ) -> "CatalogStore":
        """Create a store reading from a file path."""
        return cls(JsonFileSource(path, cache_enabled=cache_enabled), policy)

    def load(self) -> list[CatalogRecord]:
        """Load the eligible working set.

        Returns:
            Records that passed validation and the exclusion policy, in
            file order.

        Raises:
            DataLoadError: If the catalog file is unreadable or malformed.
        """
        raw = self.source.read()
        if not isinstance(raw, list):
            raise DataLoadError(self.source.path, "expected a JSON array of records")

        records = self._parse_rows(raw)
        # Duplicate IDs are resolved among eligible rows only
        eligible = _first_per_id([r for r in records if not self.policy.is_excluded(r)])

        logger.debug(
            "Catalog loaded",
            path=str(self.source.path),
            record_count=len(records),
            eligible_count=len(eligible),
        )
        return eligible

    def get(self, record_id: str) -> CatalogRecord:
        """Get an eligible record by ID.

        Args:
            record_id: Record ID.

        Returns:
            The matching record.

        Raises:
            RecordNotFoundError: If no eligible record has this ID.
            DataLoadError: If the catalog file is unreadable or malformed.
        """
        for record in self.load():
            if record.id == record_id:
                return record
        raise RecordNotFoundError(record_id)

    def _parse_rows(self, rows: Sequence[Any]) -> list[CatalogRecord]:
        records: list[CatalogRecord] = []

        for index, row in enumerate(rows):
            try:
                records.append(CatalogRecord.model_validate(row))
            except ValidationError as e:
                logger.warning(
                    "Skipping invalid catalog row",
                    index=index,
                    errors=e.error_count(),
                )

        return records


def _first_per_id(records: Sequence[CatalogRecord]) -> list[CatalogRecord]:
    unique: list[CatalogRecord] = []
    seen_ids: set[str] = set()

    for record in records:
        if record.id in seen_ids:
            logger.warning("Skipping duplicate catalog id", record_id=record.id)
            continue
        seen_ids.add(record.id)
        unique.append(record)

    return unique

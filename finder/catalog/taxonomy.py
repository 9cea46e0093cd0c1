"""Category taxonomy store.

The taxonomy table defines the Group/SubGroup/Phase/Type/Channels
vocabularies independently of the catalog records. Each row looks like:

    {"Taxonomy": "Group", "Item": "Schools", "Slug": "schools"}
    {"Taxonomy": "SubGroup", "Item": "Pupil funding", "Parent": "Schools"}

SubGroup rows link to their Group by exact display label, not by token.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

import structlog
from pydantic import ValidationError

from finder.catalog.models import TaxonomyEntry
from finder.catalog.normalizer import normalize
from finder.domain.exceptions import DataLoadError, TaxonomyEntryNotFoundError
from finder.infrastructure.json_source import JsonFileSource

logger = structlog.get_logger()

GROUP = "Group"
SUBGROUP = "SubGroup"


def entry_token(entry: TaxonomyEntry) -> str:
    """Get the facet token of a taxonomy entry.

    Returns:
        The explicit slug when present, otherwise the normalized label.
    """
    return entry.slug or normalize(entry.item)


def slug_aliases(entries: Iterable[TaxonomyEntry]) -> dict[str, dict[str, str]]:
    """Map Group and SubGroup slugs to the normalized label they stand for.

    Records only carry the parent label, so a selected slug has to be
    compared as the token of its entry's label.

    Args:
        entries: Taxonomy table.

    Returns:
        Facet name ("group" or "subgroup") -> slug -> label token. Slugs
        equal to their label token are left out.
    """
    facets = {GROUP: "group", SUBGROUP: "subgroup"}
    aliases: dict[str, dict[str, str]] = {"group": {}, "subgroup": {}}
    for entry in entries:
        facet = facets.get(entry.taxonomy)
        if facet is None or not entry.slug:
            continue
        token = normalize(entry.item)
        if entry.slug != token:
            aliases[facet].setdefault(entry.slug, token)
    return aliases


@dataclass
class GroupSummary:
    """A Group entry with the number of SubGroups declaring it as parent.

    Attributes:
        entry: The Group taxonomy entry.
        subgroup_count: SubGroup entries whose parent equals the group label.
    """

    entry: TaxonomyEntry
    subgroup_count: int

    @property
    def value(self) -> str:
        """Facet token of the group."""
        return entry_token(self.entry)


class TaxonomyStore:
    """Store for the taxonomy table.

    Example usage:
        store = TaxonomyStore(JsonFileSource("data/categories.json"))
        groups = store.groups_with_subgroup_counts()
        schools = store.find_by_slug_or_label("Group", "schools")
        subgroups = store.subgroups_of(schools.item)
    """

    def __init__(self, source: JsonFileSource) -> None:
        """Initialize store.

        Args:
            source: JSON source for the taxonomy file.
        """
        self.source = source

    @classmethod
    def from_path(cls, path: str | Path, cache_enabled: bool = False) -> "TaxonomyStore":
        """Create a store reading from a file path."""
        return cls(JsonFileSource(path, cache_enabled=cache_enabled))

    def load(self) -> list[TaxonomyEntry]:
        """Load all taxonomy entries.

        Rows without a taxonomy name or item label are skipped.

        Returns:
            Entries in file order.

        Raises:
            DataLoadError: If the taxonomy file is unreadable or malformed.
        """
        raw = self.source.read()
        if not isinstance(raw, list):
            raise DataLoadError(self.source.path, "expected a JSON array of entries")

        entries = []
        for index, row in enumerate(raw):
            try:
                entries.append(TaxonomyEntry.model_validate(row))
            except ValidationError:
                logger.warning("Skipping invalid taxonomy row", index=index)
        return entries

    def entries_for(self, taxonomy: str) -> list[TaxonomyEntry]:
        """Get all entries of one vocabulary.

        Args:
            taxonomy: Vocabulary name (e.g., "Group").

        Returns:
            Matching entries in file order.
        """
        return [e for e in self.load() if e.taxonomy == taxonomy]

    def groups_with_subgroup_counts(self) -> list[GroupSummary]:
        """Get every Group with its number of SubGroups.

        Returns:
            Group summaries in file order.
        """
        entries = self.load()
        groups = [e for e in entries if e.taxonomy == GROUP]
        subgroup_parents = [e.parent for e in entries if e.taxonomy == SUBGROUP]

        return [
            GroupSummary(
                entry=group,
                subgroup_count=sum(1 for p in subgroup_parents if p == group.item),
            )
            for group in groups
        ]

    def subgroups_of(self, group_item: str) -> list[TaxonomyEntry]:
        """Get the SubGroups declaring a group as parent.

        Args:
            group_item: Display label of the group (exact match).

        Returns:
            SubGroup entries in file order.
        """
        return [e for e in self.entries_for(SUBGROUP) if e.parent == group_item]

    def find_by_slug_or_label(self, taxonomy: str, slug_or_token: str) -> TaxonomyEntry:
        """Find an entry by slug, falling back to its normalized label.

        Args:
            taxonomy: Vocabulary to search.
            slug_or_token: Explicit slug or normalized label token.

        Returns:
            The first matching entry.

        Raises:
            TaxonomyEntryNotFoundError: If nothing matches.
        """
        entries = self.entries_for(taxonomy)

        for entry in entries:
            if entry.slug and entry.slug == slug_or_token:
                return entry

        token = normalize(slug_or_token)
        for entry in entries:
            if normalize(entry.item) == token:
                return entry

        raise TaxonomyEntryNotFoundError(taxonomy, slug_or_token)

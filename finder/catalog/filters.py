"""Facet and keyword filtering over the catalog working set.

Group, parent and subgroup all match against the record's parent field.
That mapping lives only in ``FACETS`` so a future explicit subgroup
field on records changes one row.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from finder.catalog.models import CatalogRecord
from finder.catalog.normalizer import normalize

# UI artifact posted by unchecked checkboxes, never a real token
UNCHECKED = "_unchecked"


@dataclass(frozen=True)
class FacetDefinition:
    """A filterable dimension.

    Attributes:
        name: Query parameter name (e.g., "business-area").
        heading: Heading shown above selected values.
        field: CatalogRecord attribute the facet matches, None when the
            facet has no record field and imposes no constraint.
    """

    name: str
    heading: str
    field: str | None


# Fixed facet order used for parsing, serialization and display
FACETS: tuple[FacetDefinition, ...] = (
    FacetDefinition("phase", "Phase", "phase"),
    FacetDefinition("business-area", "Business area", "business_area"),
    FacetDefinition("group", "Group", "parent"),
    FacetDefinition("type", "Type", "type"),
    FacetDefinition("parent", "Parent service", "parent"),
    FacetDefinition("subgroup", "Sub-group", "parent"),
    FacetDefinition("user", "User", None),
)

# Facet name -> selected token -> record value token
TokenAliases = Mapping[str, Mapping[str, str]]

FACETS_BY_NAME: Mapping[str, FacetDefinition] = MappingProxyType(
    {f.name: f for f in FACETS}
)


@dataclass(frozen=True)
class FilterSelection:
    """Validated user filter input for one evaluation.

    Attributes:
        facets: Facet name -> ordered tokens. Facets with no tokens are dropped.
        keywords: Trimmed keyword text, case preserved.
        page: 1-based page number.
    """

    facets: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    keywords: str = ""
    page: int = 1

    def __post_init__(self) -> None:
        frozen = {name: tuple(tokens) for name, tokens in self.facets.items() if tokens}
        object.__setattr__(self, "facets", MappingProxyType(frozen))

    def tokens(self, facet: str) -> tuple[str, ...]:
        """Get the selected tokens of a facet (empty when not applied)."""
        return self.facets.get(facet, ())

    @property
    def active_facets(self) -> list[tuple[FacetDefinition, tuple[str, ...]]]:
        """Applied facets with their tokens, in fixed facet order."""
        return [(f, self.facets[f.name]) for f in FACETS if f.name in self.facets]

    @property
    def is_empty(self) -> bool:
        """Check if no facet or keyword is applied."""
        return not self.facets and not self.keywords.strip()


class FilterEngine:
    """Applies a filter selection to catalog records.

    A record is kept only when it satisfies every applied facet and the
    keyword clause.

    Example usage:
        engine = FilterEngine()
        selection = FilterSelection(facets={"phase": ("live", "beta")}, keywords="pupil")
        results = engine.apply(records, selection)
    """

    def __init__(self, facets: Iterable[FacetDefinition] = FACETS) -> None:
        """Initialize engine.

        Args:
            facets: Facet definitions mapping facet names to record fields.
        """
        self._fields = {f.name: f.field for f in facets}

    def apply(
        self,
        records: Iterable[CatalogRecord],
        selection: FilterSelection,
        aliases: TokenAliases | None = None,
    ) -> list[CatalogRecord]:
        """Filter records by the selection.

        Args:
            records: Working set to filter.
            selection: Applied facets and keywords.
            aliases: Facet name -> selected token -> record value token,
                for tokens (taxonomy slugs) that differ from the label.

        Returns:
            Matching records, in input order.
        """
        accepted = self._accepted_tokens(selection, aliases or {})
        return [r for r in records if self._matches(r, accepted, selection.keywords)]

    def matches(
        self,
        record: CatalogRecord,
        selection: FilterSelection,
        aliases: TokenAliases | None = None,
    ) -> bool:
        """Check whether one record satisfies the selection."""
        accepted = self._accepted_tokens(selection, aliases or {})
        return self._matches(record, accepted, selection.keywords)

    def _accepted_tokens(
        self, selection: FilterSelection, aliases: TokenAliases
    ) -> dict[str, frozenset[str]]:
        accepted = {}
        for facet, tokens in selection.facets.items():
            facet_aliases = aliases.get(facet, {})
            accepted[facet] = frozenset(tokens) | {
                facet_aliases[t] for t in tokens if t in facet_aliases
            }
        return accepted

    def _matches(
        self,
        record: CatalogRecord,
        accepted: Mapping[str, frozenset[str]],
        keywords: str,
    ) -> bool:
        for facet, tokens in accepted.items():
            field_name = self._fields.get(facet)
            if field_name is None:
                continue
            value = normalize(getattr(record, field_name))
            if not value or value not in tokens:
                return False

        return self._matches_keywords(record, keywords)

    @staticmethod
    def _matches_keywords(record: CatalogRecord, keywords: str) -> bool:
        if not keywords or not keywords.strip():
            return True
        return keywords.lower() in record.name.lower()

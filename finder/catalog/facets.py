"""Facet option aggregation.

Builds the selectable values of each facet with occurrence counts.
Phase, business area, type and parent options come from the values
present in the records. Group and subgroup options come from the
taxonomy table, so groups with no records still appear with a zero count.

Counts are computed over whatever record set the caller passes in. The
caller picks that set according to the configured ``FacetCountMode``.
"""

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from finder.catalog.filters import FACETS_BY_NAME
from finder.catalog.models import CatalogRecord, TaxonomyEntry
from finder.catalog.normalizer import normalize
from finder.catalog.taxonomy import GROUP, SUBGROUP, entry_token


class FacetCountMode(str, Enum):
    """Record set facet counts are computed against."""

    # Counts reflect only the current filtered results
    FILTERED = "filtered"
    # Counts reflect the whole eligible working set
    ELIGIBLE = "eligible"


class SubgroupCountBasis(str, Enum):
    """Which label a record's parent is compared to when counting subgroups."""

    # Parent equals the subgroup's own label, as the subgroup filter matches
    ITEM = "item"
    # Parent equals the group the subgroup declares as its parent
    DECLARED_PARENT = "declared_parent"


@dataclass
class FacetOption:
    """A selectable facet value.

    Attributes:
        value: Facet token used in links.
        text: Display label.
        count: Number of records carrying this value.
        parent: Owning group label, subgroup options only.
        parent_value: Owning group token, subgroup options only.
    """

    value: str
    text: str
    count: int
    parent: str | None = None
    parent_value: str | None = None


FacetMap = dict[str, list[FacetOption]]

# Facets whose options are the distinct values found in the records
VALUE_FACETS: tuple[str, ...] = ("phase", "business-area", "type", "parent")

# Output order of the facet map
FACET_ORDER: tuple[str, ...] = ("phase", "business-area", "group", "type", "parent", "subgroup")


def _sort_options(options: list[FacetOption]) -> list[FacetOption]:
    return sorted(options, key=lambda o: (o.text.casefold(), o.text))


class FacetAggregator:
    """Computes facet options with counts.

    Example usage:
        aggregator = FacetAggregator()
        facets = aggregator.compute_facets(results, taxonomy_store.load())
        for option in facets["phase"]:
            print(option.text, option.count)
    """

    def compute_facets(
        self,
        records: Sequence[CatalogRecord],
        taxonomy_entries: Iterable[TaxonomyEntry],
        subgroup_basis: SubgroupCountBasis = SubgroupCountBasis.ITEM,
    ) -> FacetMap:
        """Compute every facet's options.

        Args:
            records: Record set to count against.
            taxonomy_entries: Taxonomy table supplying group/subgroup options.
            subgroup_basis: How subgroup counts match record parents.

        Returns:
            Facet name -> options sorted by display text.
        """
        facets = self.value_facets(records)
        facets.update(self.taxonomy_facets(records, taxonomy_entries, subgroup_basis))
        return {name: facets[name] for name in FACET_ORDER if name in facets}

    def value_facets(self, records: Sequence[CatalogRecord]) -> FacetMap:
        """Compute options for facets sourced from record values.

        Args:
            records: Record set to count against.

        Returns:
            Phase, business-area, type and parent options.
        """
        facets: FacetMap = {}
        for name in VALUE_FACETS:
            field_name = FACETS_BY_NAME[name].field
            counts = Counter(
                value for value in (getattr(r, field_name) for r in records) if value
            )
            facets[name] = _sort_options(
                [
                    FacetOption(value=normalize(text), text=text, count=count)
                    for text, count in counts.items()
                ]
            )
        return facets

    def taxonomy_facets(
        self,
        records: Sequence[CatalogRecord],
        taxonomy_entries: Iterable[TaxonomyEntry],
        subgroup_basis: SubgroupCountBasis = SubgroupCountBasis.ITEM,
    ) -> FacetMap:
        """Compute group and subgroup options from the taxonomy table.

        A subgroup whose declared parent matches no group still gets an
        option; its count is simply whatever the basis yields, often zero.

        Args:
            records: Record set to count against.
            taxonomy_entries: Taxonomy table.
            subgroup_basis: How subgroup counts match record parents.

        Returns:
            Group and subgroup options.
        """
        parent_counts = Counter(r.parent for r in records if r.parent)
        groups: list[FacetOption] = []
        subgroups: list[FacetOption] = []

        for entry in taxonomy_entries:
            if entry.taxonomy == GROUP:
                groups.append(
                    FacetOption(
                        value=entry_token(entry),
                        text=entry.item,
                        count=parent_counts[entry.item],
                    )
                )
            elif entry.taxonomy == SUBGROUP:
                if subgroup_basis is SubgroupCountBasis.DECLARED_PARENT:
                    count = parent_counts[entry.parent] if entry.parent else 0
                else:
                    count = parent_counts[entry.item]
                subgroups.append(
                    FacetOption(
                        value=entry_token(entry),
                        text=entry.item,
                        count=count,
                        parent=entry.parent,
                        parent_value=normalize(entry.parent) or None,
                    )
                )

        return {"group": _sort_options(groups), "subgroup": _sort_options(subgroups)}

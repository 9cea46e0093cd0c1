"""Tests for facet option aggregation."""

import pytest

from finder.catalog.facets import (
    FACET_ORDER,
    FacetAggregator,
    FacetOption,
    SubgroupCountBasis,
)
from finder.catalog.models import CatalogRecord, TaxonomyEntry
from finder.catalog.taxonomy import TaxonomyStore


@pytest.fixture
def aggregator() -> FacetAggregator:
    """Create facet aggregator."""
    return FacetAggregator()


@pytest.fixture
def entries(taxonomy_store: TaxonomyStore) -> list[TaxonomyEntry]:
    """Fixture taxonomy entries."""
    return taxonomy_store.load()


def counts(options: list[FacetOption]) -> dict[str, int]:
    return {o.text: o.count for o in options}


class TestValueFacets:
    """Tests for facets built from record values."""

    def test_phase_counts(
        self, aggregator: FacetAggregator, records: list[CatalogRecord]
    ) -> None:
        """Each distinct phase is counted."""
        facets = aggregator.value_facets(records)
        assert counts(facets["phase"]) == {"Alpha": 1, "Beta": 1, "Live": 4, "Private  beta": 1}

    def test_option_tokens(self, aggregator: FacetAggregator, records: list[CatalogRecord]) -> None:
        """Option values are normalized tokens of the display text."""
        facets = aggregator.value_facets(records)
        values = {o.text: o.value for o in facets["phase"]}
        assert values["Private  beta"] == "private_beta"

    def test_counts_sum_to_records_with_field(
        self, aggregator: FacetAggregator, records: list[CatalogRecord]
    ) -> None:
        """Type counts add up to the records carrying a type."""
        facets = aggregator.value_facets(records)
        assert counts(facets["type"]) == {"Platform": 2, "Service": 4, "Tool": 1}
        assert sum(o.count for o in facets["type"]) == len(records)

    def test_missing_values_are_not_counted(
        self, aggregator: FacetAggregator, records: list[CatalogRecord]
    ) -> None:
        """Records without a business area contribute no option."""
        facets = aggregator.value_facets(records)
        assert counts(facets["business-area"]) == {
            "Funding": 3,
            "Schools": 1,
            "Teacher services": 2,
        }

    def test_options_sorted_by_text(
        self, aggregator: FacetAggregator, records: list[CatalogRecord]
    ) -> None:
        """Options are ordered by display text, case-insensitively."""
        facets = aggregator.value_facets(records)
        assert [o.text for o in facets["parent"]] == [
            "Pupil funding",
            "School information",
            "Schools funding",
            "Teacher recruitment",
        ]

    def test_case_variants_are_distinct_options(self, aggregator: FacetAggregator) -> None:
        """Values differing only in case stay separate and sort together."""
        records = [
            CatalogRecord(id="1", Type="service"),
            CatalogRecord(id="2", Type="Service"),
            CatalogRecord(id="3", Type="Platform"),
        ]
        options = aggregator.value_facets(records)["type"]
        assert [(o.text, o.count) for o in options] == [
            ("Platform", 1),
            ("Service", 1),
            ("service", 1),
        ]

    def test_no_records(self, aggregator: FacetAggregator) -> None:
        """An empty record set yields empty option lists."""
        facets = aggregator.value_facets([])
        assert all(options == [] for options in facets.values())


class TestTaxonomyFacets:
    """Tests for group and subgroup facets."""

    def test_groups_include_zero_counts(
        self,
        aggregator: FacetAggregator,
        records: list[CatalogRecord],
        entries: list[TaxonomyEntry],
    ) -> None:
        """Every taxonomy group is listed, with or without records."""
        facets = aggregator.taxonomy_facets(records, entries)
        assert counts(facets["group"]) == {
            "Further education": 0,
            "School information": 1,
            "Schools funding": 2,
            "Teacher recruitment": 2,
        }

    def test_group_values_use_slug(
        self,
        aggregator: FacetAggregator,
        records: list[CatalogRecord],
        entries: list[TaxonomyEntry],
    ) -> None:
        """Group tokens prefer the explicit slug."""
        facets = aggregator.taxonomy_facets(records, entries)
        values = {o.text: o.value for o in facets["group"]}
        assert values["Schools funding"] == "schools_funding"
        assert values["School information"] == "school_information"

    def test_subgroup_counts_by_item(
        self,
        aggregator: FacetAggregator,
        records: list[CatalogRecord],
        entries: list[TaxonomyEntry],
    ) -> None:
        """By default a subgroup counts records whose parent is the subgroup."""
        facets = aggregator.taxonomy_facets(records, entries)
        assert counts(facets["subgroup"]) == {
            "Apprenticeships": 0,
            "High needs": 0,
            "Initial teacher training": 0,
            "Pupil funding": 1,
        }

    def test_subgroup_counts_by_declared_parent(
        self,
        aggregator: FacetAggregator,
        records: list[CatalogRecord],
        entries: list[TaxonomyEntry],
    ) -> None:
        """The declared-parent basis counts records under the owning group."""
        facets = aggregator.taxonomy_facets(
            records, entries, SubgroupCountBasis.DECLARED_PARENT
        )
        assert counts(facets["subgroup"]) == {
            "Apprenticeships": 0,
            "High needs": 2,
            "Initial teacher training": 2,
            "Pupil funding": 2,
        }

    def test_subgroup_parent_fields(
        self,
        aggregator: FacetAggregator,
        records: list[CatalogRecord],
        entries: list[TaxonomyEntry],
    ) -> None:
        """Subgroup options carry their owning group."""
        facets = aggregator.taxonomy_facets(records, entries)
        by_text = {o.text: o for o in facets["subgroup"]}
        itt = by_text["Initial teacher training"]
        assert itt.value == "itt"
        assert itt.parent == "Teacher recruitment"
        assert itt.parent_value == "teacher_recruitment"

    def test_dangling_subgroup_is_kept(
        self,
        aggregator: FacetAggregator,
        records: list[CatalogRecord],
        entries: list[TaxonomyEntry],
    ) -> None:
        """A subgroup naming a missing group still gets an option."""
        facets = aggregator.taxonomy_facets(records, entries)
        by_text = {o.text: o for o in facets["subgroup"]}
        assert by_text["Apprenticeships"].parent == "Apprenticeship service"
        assert by_text["Apprenticeships"].count == 0

    def test_no_taxonomy(self, aggregator: FacetAggregator, records: list[CatalogRecord]) -> None:
        """Without taxonomy entries group and subgroup options are empty."""
        facets = aggregator.taxonomy_facets(records, [])
        assert facets == {"group": [], "subgroup": []}


class TestComputeFacets:
    """Tests for the combined facet map."""

    def test_facet_order(
        self,
        aggregator: FacetAggregator,
        records: list[CatalogRecord],
        entries: list[TaxonomyEntry],
    ) -> None:
        """Facets come out in fixed order."""
        facets = aggregator.compute_facets(records, entries)
        assert tuple(facets) == FACET_ORDER

    def test_counts_follow_record_set(
        self,
        aggregator: FacetAggregator,
        records: list[CatalogRecord],
        entries: list[TaxonomyEntry],
    ) -> None:
        """Counts reflect only the records passed in."""
        live = [r for r in records if r.phase == "Live"]
        facets = aggregator.compute_facets(live, entries)
        assert counts(facets["phase"]) == {"Live": 4}
        assert counts(facets["group"])["Teacher recruitment"] == 0

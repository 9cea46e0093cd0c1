"""Catalog service for listing and record operations.

High-level service that combines the stores with the filter, facet and
pagination engines. Each call reads its data fresh and shares no mutable
state with other calls.

Data load failures follow one policy: a listing evaluation never fails,
it returns an empty envelope flagged ``degraded``; single-record and
taxonomy lookups raise ``DataLoadError`` for the API layer to report.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

import structlog

from finder.catalog.facets import (
    FacetAggregator,
    FacetCountMode,
    FacetMap,
    SubgroupCountBasis,
)
from finder.catalog.filters import FilterEngine, FilterSelection
from finder.catalog.models import CONTACT_ROLES, CatalogRecord, TaxonomyEntry
from finder.catalog.pagination import Page, Paginator
from finder.catalog.query_state import QueryStateCodec, SelectedFilter
from finder.catalog.repository import CatalogStore, ExclusionPolicy
from finder.catalog.taxonomy import GROUP, GroupSummary, TaxonomyStore, slug_aliases
from finder.catalog.user_groups import UserGroup, UserGroupStore
from finder.domain.exceptions import DataLoadError
from finder.infrastructure.config import Settings

logger = structlog.get_logger()


# ============================================================================
# Results
# ============================================================================


@dataclass
class ResultEnvelope:
    """Everything needed to render one listing evaluation.

    Attributes:
        page: Current page of matching records.
        facets: Facet name -> options with counts.
        selected_filters: Applied facet values with removal links.
        keywords: Applied keyword text.
        base_query: Active selection as a query string, without page.
        clear_filters_url: Current path with no query.
        facet_count_mode: Record set the facet counts were computed against.
        degraded: True when a data source failed to load.
    """

    page: Page[CatalogRecord]
    facets: FacetMap
    selected_filters: list[SelectedFilter]
    keywords: str
    base_query: str
    clear_filters_url: str
    facet_count_mode: FacetCountMode
    degraded: bool = False

    @property
    def items(self) -> list[CatalogRecord]:
        """Records on the current page."""
        return self.page.items

    @property
    def total_results(self) -> int:
        """Number of matching records."""
        return self.page.total_results


@dataclass
class Contact:
    """A named contact on a record.

    Attributes:
        role: Contact role (e.g., "Delivery Manager").
        name: Person's name as recorded.
        email: Derived address, None if the name has fewer than two parts.
    """

    role: str
    name: str
    email: str | None = None


@dataclass
class Component:
    """A category component flattened out of a record's categories."""

    type: str
    name: str | None
    description: str | None


@dataclass
class RecordDetail:
    """A record with its contacts."""

    record: CatalogRecord
    contacts: list[Contact] = field(default_factory=list)


@dataclass
class RecordComponents:
    """A record with its flattened category components.

    Attributes:
        record: The catalog record.
        category_types: Category type names in record order.
        components: Components of every type, in order.
        contacts: Contacts, without derived email addresses.
    """

    record: CatalogRecord
    category_types: list[str]
    components: list[Component]
    contacts: list[Contact] = field(default_factory=list)


def name_to_email(name: str | None, domain: str) -> str | None:
    """Derive an email address from a "First Last" name.

    Args:
        name: Person's name.
        domain: Email domain.

    Returns:
        "first.last@domain" built from the first two name parts, or None
        if the name has fewer than two parts.
    """
    if not name or not isinstance(name, str):
        return None
    parts = name.split()
    if len(parts) < 2:
        return None
    return f"{parts[0].lower()}.{parts[1].lower()}@{domain}"


# ============================================================================
# Service
# ============================================================================


class CatalogService:
    """Service for catalog listing and lookups.

    Example usage:
        service = CatalogService.from_settings(settings)

        envelope = service.evaluate(
            {"phase": ["live"], "keywords": "pupil"},
            current_url="/products?phase=live&keywords=pupil",
        )
        detail = service.get_record("fips-001")
    """

    def __init__(
        self,
        catalog: CatalogStore,
        taxonomy: TaxonomyStore,
        user_groups: UserGroupStore,
        page_size: int = 12,
        facet_count_mode: FacetCountMode = FacetCountMode.FILTERED,
        contact_email_domain: str = "education.gov.uk",
    ) -> None:
        """Initialize service.

        Args:
            catalog: Catalog record store.
            taxonomy: Taxonomy table store.
            user_groups: User group store.
            page_size: Records per listing page.
            facet_count_mode: Record set facet counts are computed against.
            contact_email_domain: Domain for derived contact emails.
        """
        self.catalog = catalog
        self.taxonomy = taxonomy
        self.user_groups = user_groups
        self.facet_count_mode = FacetCountMode(facet_count_mode)
        self.contact_email_domain = contact_email_domain

        self.codec = QueryStateCodec()
        self.engine = FilterEngine()
        self.aggregator = FacetAggregator()
        self.paginator = Paginator(page_size)

    @classmethod
    def from_settings(cls, settings: Settings) -> "CatalogService":
        """Build a service from application settings.

        Args:
            settings: Application settings.

        Returns:
            Configured service.
        """
        policy = ExclusionPolicy(
            settings.excluded_parents,
            parent_marker=settings.excluded_parent_marker,
            excluded_status=settings.excluded_status,
        )
        return cls(
            catalog=CatalogStore.from_path(
                settings.catalog_path, policy, cache_enabled=settings.cache_enabled
            ),
            taxonomy=TaxonomyStore.from_path(
                settings.taxonomy_path, cache_enabled=settings.cache_enabled
            ),
            user_groups=UserGroupStore.from_path(
                settings.user_groups_path, cache_enabled=settings.cache_enabled
            ),
            page_size=settings.page_size,
            facet_count_mode=FacetCountMode(settings.facet_count_mode),
            contact_email_domain=settings.contact_email_domain,
        )

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def evaluate(self, raw_params: Mapping[str, Any], current_url: str) -> ResultEnvelope:
        """Run one listing evaluation.

        Args:
            raw_params: Request parameters (value or list of values per key).
            current_url: Path and query of the request, used for links.

        Returns:
            Result envelope. Never raises for data load failures.
        """
        selection = self.codec.parse(raw_params)
        degraded = False

        try:
            eligible = self.catalog.load()
        except DataLoadError as e:
            logger.error("Catalog unavailable, returning degraded results", **e.details)
            eligible = []
            degraded = True

        try:
            taxonomy_entries = self.taxonomy.load()
        except DataLoadError as e:
            logger.warning("Taxonomy unavailable, group facets omitted", **e.details)
            taxonomy_entries = []
            degraded = True

        # Group and subgroup slugs select records by their label token
        results = self.engine.apply(eligible, selection, slug_aliases(taxonomy_entries))

        counted = results if self.facet_count_mode is FacetCountMode.FILTERED else eligible
        facets = self.aggregator.compute_facets(
            counted, taxonomy_entries, SubgroupCountBasis.ITEM
        )

        labels, labels_degraded = self._display_labels(selection, eligible, facets)

        logger.info(
            "Catalog evaluated",
            eligible_count=len(eligible),
            result_count=len(results),
            facets=sorted(selection.facets),
            page=selection.page,
        )

        return ResultEnvelope(
            page=self.paginator.page(results, selection.page),
            facets=facets,
            selected_filters=self.codec.selected_filters(selection, current_url, labels),
            keywords=selection.keywords,
            base_query=self.codec.serialize_active_selection(selection),
            clear_filters_url=urlsplit(current_url).path or "/",
            facet_count_mode=self.facet_count_mode,
            degraded=degraded or labels_degraded,
        )

    def _display_labels(
        self,
        selection: FilterSelection,
        eligible: list[CatalogRecord],
        facets: FacetMap,
    ) -> tuple[dict[str, dict[str, str]], bool]:
        """Map selected tokens to display labels.

        Value facet labels come from the whole eligible set so a selected
        value missing from filtered counts still shows its label.
        """
        labels = {name: {o.value: o.text for o in options} for name, options in facets.items()}
        if not selection.facets:
            return labels, False

        for name, options in self.aggregator.value_facets(eligible).items():
            labels[name] = {o.value: o.text for o in options}

        if "user" not in selection.facets:
            return labels, False
        try:
            labels["user"] = self.user_groups.labels()
        except DataLoadError as e:
            logger.warning("User groups unavailable, showing raw ids", **e.details)
            return labels, True
        return labels, False

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def get_record(self, record_id: str) -> RecordDetail:
        """Get a record with its contacts.

        Args:
            record_id: Record ID.

        Returns:
            Record detail.

        Raises:
            RecordNotFoundError: If the record is not in the working set.
            DataLoadError: If the catalog cannot be loaded.
        """
        record = self.catalog.get(record_id)
        return RecordDetail(record=record, contacts=self._contacts(record, with_email=True))

    def get_record_components(self, record_id: str) -> RecordComponents:
        """Get a record with its category components flattened.

        Args:
            record_id: Record ID.

        Returns:
            Record components.

        Raises:
            RecordNotFoundError: If the record is not in the working set.
            DataLoadError: If the catalog cannot be loaded.
        """
        record = self.catalog.get(record_id)
        components = [
            Component(
                type=component.type or category_type,
                name=component.name,
                description=component.description,
            )
            for category_type, items in record.categories.items()
            for component in items
        ]
        return RecordComponents(
            record=record,
            category_types=list(record.categories),
            components=components,
            contacts=self._contacts(record, with_email=False),
        )

    def _contacts(self, record: CatalogRecord, with_email: bool) -> list[Contact]:
        contacts = []
        for role in CONTACT_ROLES:
            name = record.contact_name(role)
            if name is None:
                continue
            email = name_to_email(name, self.contact_email_domain) if with_email else None
            contacts.append(Contact(role=role, name=name, email=email))
        return contacts

    # ------------------------------------------------------------------
    # Taxonomy and user groups
    # ------------------------------------------------------------------

    def taxonomy_groups(self) -> list[GroupSummary]:
        """Get every group with its subgroup count.

        Raises:
            DataLoadError: If the taxonomy cannot be loaded.
        """
        return self.taxonomy.groups_with_subgroup_counts()

    def subgroups_for(self, group_slug: str) -> tuple[TaxonomyEntry, list[TaxonomyEntry]]:
        """Get a group and its subgroups.

        Args:
            group_slug: Group slug or normalized label.

        Returns:
            Tuple of (group entry, subgroup entries).

        Raises:
            TaxonomyEntryNotFoundError: If no group matches.
            DataLoadError: If the taxonomy cannot be loaded.
        """
        group = self.taxonomy.find_by_slug_or_label(GROUP, group_slug)
        return group, self.taxonomy.subgroups_of(group.item)

    def search_user_groups(self, query: str, limit: int = 20) -> list[UserGroup]:
        """Search user groups for the ``user`` facet.

        Raises:
            DataLoadError: If the user groups cannot be loaded.
        """
        return self.user_groups.search(query, limit=limit)

    def check_ready(self) -> int:
        """Check the catalog can be loaded.

        Returns:
            Size of the eligible working set.

        Raises:
            DataLoadError: If the catalog cannot be loaded.
        """
        return len(self.catalog.load())

"""Catalog Service.

Provides the catalog and taxonomy stores, faceted filtering, facet
aggregation, pagination and query state handling.
"""

from finder.catalog.facets import FacetAggregator, FacetCountMode, FacetOption, SubgroupCountBasis
from finder.catalog.filters import FACETS, FilterEngine, FilterSelection
from finder.catalog.models import CatalogRecord, CategoryComponent, TaxonomyEntry
from finder.catalog.normalizer import normalize
from finder.catalog.pagination import Page, Paginator
from finder.catalog.query_state import QueryStateCodec, SelectedFilter
from finder.catalog.repository import CatalogStore, ExclusionPolicy
from finder.catalog.service import CatalogService, ResultEnvelope
from finder.catalog.taxonomy import GroupSummary, TaxonomyStore
from finder.catalog.user_groups import UserGroup, UserGroupStore

__all__ = [
    # Models
    "CatalogRecord",
    "CategoryComponent",
    "TaxonomyEntry",
    "UserGroup",
    # Stores
    "CatalogStore",
    "ExclusionPolicy",
    "GroupSummary",
    "TaxonomyStore",
    "UserGroupStore",
    # Engines
    "FACETS",
    "FacetAggregator",
    "FacetCountMode",
    "FacetOption",
    "FilterEngine",
    "FilterSelection",
    "Page",
    "Paginator",
    "QueryStateCodec",
    "SelectedFilter",
    "SubgroupCountBasis",
    "normalize",
    # Service
    "CatalogService",
    "ResultEnvelope",
]

"""Shared test fixtures.

Fixture data is written to a temporary directory so each test reads its
own copy of the catalog, taxonomy and user group files.
"""

import json
from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

import finder.api.dependencies as dependencies_module
from finder.catalog.repository import CatalogStore, ExclusionPolicy
from finder.catalog.service import CatalogService
from finder.catalog.taxonomy import TaxonomyStore
from finder.catalog.user_groups import UserGroupStore
from finder.infrastructure.config import Settings

CATALOG_ROWS = [
    {
        "id": "1",
        "Name": "Pupil Premium",
        "Description": "Funding for disadvantaged children",
        "phase": "Live",
        "business-area": "Funding",
        "Parent": "Schools funding",
        "Type": "Service",
        "Operational Status": "Operational",
        "Owned By": "Alex Morgan",
        "Senior Responsible Owner": "Sam  Patel Jones",
        "Delivery Manager": "Cher",
        "Information Asset Owner": "   ",
        "Assigned To": "Chris Lee",
        "categories": {
            "Application": [
                {"type": "Application", "name": "Allocations engine", "description": "Rules"},
            ],
            "Data": [
                {"name": "Census extract", "description": "Termly feed"},
            ],
            "Notes": "not a list",
        },
    },
    {
        "id": "2",
        "Name": "Get Information about Schools",
        "phase": "Live",
        "business-area": "Schools",
        "Parent": "School information",
        "Type": "Service",
        "Operational Status": "Operational",
    },
    {
        "id": "3",
        "Name": "Teacher Vacancies",
        "phase": "Beta",
        "business-area": "Teacher services",
        "Parent": "Teacher recruitment",
        "Type": "Service",
        "Operational Status": "Operational",
    },
    {
        "id": "4",
        "Name": "Funding Data Warehouse",
        "phase": "Live",
        "business-area": "Funding",
        "Parent": "Schools funding",
        "Type": "Platform",
        "Operational Status": "Operational",
    },
    {
        "id": "5",
        "Name": "Apply for teacher training",
        "phase": "Private  beta",
        "business-area": "Teacher services",
        "Parent": "Teacher recruitment",
        "Type": "Service",
        "Operational Status": "Operational",
    },
    {
        "id": "6",
        "Name": "Data Sharing Gateway",
        "phase": "Alpha",
        "Type": "Platform",
        "Operational Status": "Operational",
    },
    {
        "id": "7",
        "Name": "Laptop Refresh",
        "phase": "Live",
        "Parent": "End User Computing",
        "Type": "Service",
        "Operational Status": "Operational",
    },
    {
        "id": "8",
        "Name": "Legacy Payroll",
        "phase": "Live",
        "Parent": "Corporate payroll (PP)",
        "Type": "Application",
        "Operational Status": "Operational",
    },
    {
        "id": "9",
        "Name": "Pupil Premium Pilot",
        "phase": "Live",
        "business-area": "Funding",
        "Parent": "Schools funding",
        "Type": "Service",
        "Operational Status": "New",
    },
    {
        "id": "10",
        "Name": "Service Desk Tooling",
        "phase": "Live",
        "Parent": "IT for the IT department",
        "Type": "Service",
        "Operational Status": "Operational",
    },
    {
        "id": "11",
        "Name": "Pupil funding tracker",
        "phase": "Live",
        "business-area": "Funding",
        "Parent": "Pupil funding",
        "Type": "Tool",
        "Operational Status": "Operational",
    },
]

# Records 1-6 and 11 survive the exclusion policy
ELIGIBLE_IDS = ["1", "2", "3", "4", "5", "6", "11"]

TAXONOMY_ROWS = [
    {"Taxonomy": "Group", "Item": "Schools funding", "Slug": "schools_funding"},
    {"Taxonomy": "Group", "Item": "School information"},
    {"Taxonomy": "Group", "Item": "Teacher recruitment"},
    {"Taxonomy": "Group", "Item": "Further education"},
    {"Taxonomy": "SubGroup", "Item": "Pupil funding", "Parent": "Schools funding"},
    {"Taxonomy": "SubGroup", "Item": "High needs", "Parent": "Schools funding"},
    {
        "Taxonomy": "SubGroup",
        "Item": "Initial teacher training",
        "Slug": "itt",
        "Parent": "Teacher recruitment",
    },
    {"Taxonomy": "SubGroup", "Item": "Apprenticeships", "Parent": "Apprenticeship service"},
    {"Taxonomy": "Phase", "Item": "Live"},
    {"Taxonomy": "Type", "Item": "Service"},
    {"Taxonomy": "Channels", "Item": "Web"},
    {"Item": "Row without taxonomy"},
]

USER_GROUP_ROWS = [
    {
        "id": "education-sector",
        "label": "Education sector",
        "children": [
            {
                "id": "schools",
                "label": "Schools",
                "aliases": ["academies"],
                "children": [
                    {"id": "headteachers", "label": "Headteachers", "aliases": ["school leaders"]},
                    {"id": "teachers", "label": "Teachers"},
                ],
            },
            {"id": "local-authorities", "label": "Local authorities", "aliases": ["councils"]},
        ],
    },
    {
        "id": "public",
        "label": "Public",
        "children": [
            {"id": "parents", "label": "Parents and carers"},
        ],
    },
]

DEFAULT_EXCLUDED_PARENTS = Settings.model_fields["excluded_parents"].default


def write_json(path: Path, data: object) -> Path:
    """Write data as JSON and return the path."""
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Directory holding the fixture data files."""
    write_json(tmp_path / "fips.json", CATALOG_ROWS)
    write_json(tmp_path / "categories.json", TAXONOMY_ROWS)
    write_json(tmp_path / "nested_all_user_groups.json", USER_GROUP_ROWS)
    return tmp_path


@pytest.fixture
def policy() -> ExclusionPolicy:
    """Exclusion policy with the default configuration."""
    return ExclusionPolicy(DEFAULT_EXCLUDED_PARENTS)


@pytest.fixture
def catalog_store(data_dir: Path, policy: ExclusionPolicy) -> CatalogStore:
    """Catalog store over the fixture catalog."""
    return CatalogStore.from_path(data_dir / "fips.json", policy)


@pytest.fixture
def taxonomy_store(data_dir: Path) -> TaxonomyStore:
    """Taxonomy store over the fixture taxonomy."""
    return TaxonomyStore.from_path(data_dir / "categories.json")


@pytest.fixture
def user_group_store(data_dir: Path) -> UserGroupStore:
    """User group store over the fixture tree."""
    return UserGroupStore.from_path(data_dir / "nested_all_user_groups.json")


@pytest.fixture
def records(catalog_store: CatalogStore) -> list:
    """The eligible working set."""
    return catalog_store.load()


@pytest.fixture
def service(
    catalog_store: CatalogStore,
    taxonomy_store: TaxonomyStore,
    user_group_store: UserGroupStore,
) -> CatalogService:
    """Catalog service with filtered facet counts."""
    return CatalogService(catalog_store, taxonomy_store, user_group_store, page_size=2)


@pytest.fixture
def test_settings(data_dir: Path) -> Settings:
    """Settings pointing at the fixture data."""
    return Settings(data_dir=data_dir, page_size=2)


@pytest.fixture
def client(test_settings: Settings) -> Iterator[TestClient]:
    """Create test client backed by the fixture data."""
    from finder.main import app

    dependencies_module._catalog_service = None
    app.dependency_overrides[dependencies_module.get_catalog_service] = (
        lambda: CatalogService.from_settings(test_settings)
    )
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
    dependencies_module._catalog_service = None


@pytest.fixture
def eligible_ids() -> list[str]:
    """IDs of the records surviving the exclusion policy, in file order."""
    return list(ELIGIBLE_IDS)

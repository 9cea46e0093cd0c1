"""Taxonomy API endpoints.

Provides group/subgroup browsing and the user group lookup behind the
``user`` facet.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from finder.api.dependencies import get_catalog_service
from finder.api.schemas import (
    ErrorResponse,
    GroupListResponse,
    GroupSchema,
    SubgroupListResponse,
    TaxonomyEntrySchema,
    UserGroupListResponse,
    UserGroupSchema,
)
from finder.catalog.models import TaxonomyEntry
from finder.catalog.service import CatalogService
from finder.catalog.taxonomy import entry_token

router = APIRouter(tags=["Taxonomy"])


def entry_to_schema(entry: TaxonomyEntry) -> TaxonomyEntrySchema:
    """Convert a taxonomy entry to its response schema."""
    return TaxonomyEntrySchema(
        taxonomy=entry.taxonomy,
        item=entry.item,
        value=entry_token(entry),
        parent=entry.parent,
    )


@router.get(
    "/taxonomy/groups",
    response_model=GroupListResponse,
    responses={503: {"model": ErrorResponse}},
    summary="List groups",
)
def list_groups(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> GroupListResponse:
    """List every group with its number of subgroups."""
    groups = service.taxonomy_groups()
    return GroupListResponse(
        groups=[
            GroupSchema(item=g.entry.item, value=g.value, subgroup_count=g.subgroup_count)
            for g in groups
        ],
        total=len(groups),
    )


@router.get(
    "/taxonomy/groups/{group_slug}/subgroups",
    response_model=SubgroupListResponse,
    responses={
        404: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    summary="List subgroups of a group",
)
def list_subgroups(
    group_slug: str,
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> SubgroupListResponse:
    """List the subgroups of one group.

    Args:
        group_slug: Group slug or normalized label.

    Returns:
        The group and its subgroups.
    """
    group, subgroups = service.subgroups_for(group_slug)
    return SubgroupListResponse(
        group=entry_to_schema(group),
        subgroups=[entry_to_schema(s) for s in subgroups],
    )


@router.get(
    "/user-groups",
    response_model=UserGroupListResponse,
    responses={503: {"model": ErrorResponse}},
    summary="Search user groups",
)
def search_user_groups(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
    q: Annotated[str, Query(max_length=100)] = "",
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> UserGroupListResponse:
    """Search user groups by label or alias.

    Args:
        q: Search text; empty returns no results.
        limit: Maximum results.

    Returns:
        Matching user groups.
    """
    groups = service.search_user_groups(q, limit=limit)
    return UserGroupListResponse(
        items=[
            UserGroupSchema(
                id=g.id,
                label=g.label,
                level=g.level,
                aliases=g.aliases,
                parent_label=g.parent_label,
                grandparent_label=g.grandparent_label,
            )
            for g in groups
        ],
        total=len(groups),
    )

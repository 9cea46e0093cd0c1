"""API schemas for the finder API.

Pydantic models for response serialization.
"""

from typing import Any

from pydantic import BaseModel, Field


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] | dict[str, Any] = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


# ============================================================================
# Record Schemas
# ============================================================================


class ProductSchema(BaseModel):
    """A catalog record as listed."""

    id: str = Field(..., description="Record identifier")
    name: str = Field(..., description="Record name")
    description: str | None = Field(default=None, description="Record description")
    phase: str | None = Field(default=None, description="Delivery phase")
    business_area: str | None = Field(default=None, description="Owning business area")
    parent: str | None = Field(default=None, description="Owning group/service")
    type: str | None = Field(default=None, description="Record type")
    operational_status: str | None = Field(default=None, description="Operational status")


class ContactSchema(BaseModel):
    """A contact on a record."""

    role: str = Field(..., description="Contact role")
    name: str = Field(..., description="Contact name")
    email: str | None = Field(default=None, description="Derived email address")


class ComponentSchema(BaseModel):
    """A category component of a record."""

    type: str = Field(..., description="Component type")
    name: str | None = Field(default=None, description="Component name")
    description: str | None = Field(default=None, description="Component description")


class ProductDetailResponse(BaseModel):
    """A record with its contacts."""

    product: ProductSchema = Field(..., description="The record")
    contacts: list[ContactSchema] = Field(default_factory=list, description="Contacts")
    raw: dict[str, Any] = Field(
        default_factory=dict, description="All source fields of the record"
    )


class ProductCategoriesResponse(BaseModel):
    """A record with its flattened category components."""

    product: ProductSchema = Field(..., description="The record")
    category_types: list[str] = Field(default_factory=list, description="Category types")
    components: list[ComponentSchema] = Field(default_factory=list, description="Components")
    contacts: list[ContactSchema] = Field(default_factory=list, description="Contacts")


# ============================================================================
# Listing Schemas
# ============================================================================


class FacetOptionSchema(BaseModel):
    """A selectable facet value with its count."""

    value: str = Field(..., description="Facet token")
    text: str = Field(..., description="Display label")
    count: int = Field(..., ge=0, description="Number of records with this value")
    parent: str | None = Field(default=None, description="Owning group (subgroups only)")
    parent_value: str | None = Field(
        default=None, description="Owning group token (subgroups only)"
    )


class SelectedFilterSchema(BaseModel):
    """An applied facet value with a link removing it."""

    facet_name: str = Field(..., description="Facet name")
    heading: str = Field(..., description="Facet heading")
    value: str = Field(..., description="Selected token")
    display_text: str = Field(..., description="Display label")
    removal_link: str = Field(..., description="URL without this value")


class PaginationSchema(BaseModel):
    """Page metadata."""

    current_page: int = Field(..., description="Current page number (1-based)")
    total_pages: int = Field(..., description="Total number of pages")
    total_results: int = Field(..., description="Total number of matching records")
    page_size: int = Field(..., description="Records per page")
    has_next_page: bool = Field(..., description="Whether there is a next page")
    has_prev_page: bool = Field(..., description="Whether there is a previous page")


class ProductListResponse(BaseModel):
    """Result envelope of a listing evaluation."""

    items: list[ProductSchema] = Field(..., description="Records on this page")
    pagination: PaginationSchema = Field(..., description="Page metadata")
    facets: dict[str, list[FacetOptionSchema]] = Field(
        ..., description="Facet name to options"
    )
    selected_filters: list[SelectedFilterSchema] = Field(
        default_factory=list, description="Applied facet values"
    )
    keywords: str = Field(default="", description="Applied keywords")
    base_query: str = Field(default="", description="Active selection without page")
    clear_filters_url: str = Field(..., description="URL with no filters applied")
    facet_count_mode: str = Field(..., description="Record set facet counts cover")
    degraded: bool = Field(default=False, description="Whether a data source failed")


# ============================================================================
# Taxonomy Schemas
# ============================================================================


class TaxonomyEntrySchema(BaseModel):
    """A taxonomy table entry."""

    taxonomy: str = Field(..., description="Vocabulary name")
    item: str = Field(..., description="Display label")
    value: str = Field(..., description="Facet token")
    parent: str | None = Field(default=None, description="Owning group label")


class GroupSchema(BaseModel):
    """A group with its subgroup count."""

    item: str = Field(..., description="Display label")
    value: str = Field(..., description="Facet token")
    subgroup_count: int = Field(..., ge=0, description="Number of subgroups")


class GroupListResponse(BaseModel):
    """All groups."""

    groups: list[GroupSchema] = Field(..., description="Groups")
    total: int = Field(..., description="Number of groups")


class SubgroupListResponse(BaseModel):
    """A group and its subgroups."""

    group: TaxonomyEntrySchema = Field(..., description="The group")
    subgroups: list[TaxonomyEntrySchema] = Field(..., description="Its subgroups")


class UserGroupSchema(BaseModel):
    """A user group usable in the user facet."""

    id: str = Field(..., description="Group ID (facet token)")
    label: str = Field(..., description="Display label")
    level: int = Field(..., description="Tree depth")
    aliases: list[str] = Field(default_factory=list, description="Alternative names")
    parent_label: str | None = Field(default=None, description="Enclosing group")
    grandparent_label: str | None = Field(default=None, description="Top-level group")


class UserGroupListResponse(BaseModel):
    """User group search results."""

    items: list[UserGroupSchema] = Field(..., description="Matching groups")
    total: int = Field(..., description="Number of matches")

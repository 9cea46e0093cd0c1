"""Product API endpoints.

Provides the filterable product listing and record detail endpoints.
Endpoints that read data files are plain functions, which FastAPI runs in
its threadpool.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from finder.api.dependencies import get_catalog_service
from finder.api.schemas import (
    ComponentSchema,
    ContactSchema,
    ErrorResponse,
    FacetOptionSchema,
    PaginationSchema,
    ProductCategoriesResponse,
    ProductDetailResponse,
    ProductListResponse,
    ProductSchema,
    SelectedFilterSchema,
)
from finder.catalog.models import CatalogRecord
from finder.catalog.service import CatalogService, Contact, ResultEnvelope

router = APIRouter(tags=["Products"])


# ============================================================================
# Converters
# ============================================================================


def record_to_schema(record: CatalogRecord) -> ProductSchema:
    """Convert a catalog record to its response schema."""
    return ProductSchema(
        id=record.id,
        name=record.name,
        description=record.description,
        phase=record.phase,
        business_area=record.business_area,
        parent=record.parent,
        type=record.type,
        operational_status=record.operational_status,
    )


def contacts_to_schema(contacts: list[Contact]) -> list[ContactSchema]:
    """Convert contacts to response schemas."""
    return [ContactSchema(role=c.role, name=c.name, email=c.email) for c in contacts]


def envelope_to_response(envelope: ResultEnvelope) -> ProductListResponse:
    """Convert a result envelope to the listing response."""
    page = envelope.page
    return ProductListResponse(
        items=[record_to_schema(r) for r in page.items],
        pagination=PaginationSchema(
            current_page=page.current_page,
            total_pages=page.total_pages,
            total_results=page.total_results,
            page_size=page.page_size,
            has_next_page=page.has_next_page,
            has_prev_page=page.has_prev_page,
        ),
        facets={
            name: [
                FacetOptionSchema(
                    value=o.value,
                    text=o.text,
                    count=o.count,
                    parent=o.parent,
                    parent_value=o.parent_value,
                )
                for o in options
            ]
            for name, options in envelope.facets.items()
        },
        selected_filters=[
            SelectedFilterSchema(
                facet_name=f.facet_name,
                heading=f.heading,
                value=f.value,
                display_text=f.display_text,
                removal_link=f.removal_link,
            )
            for f in envelope.selected_filters
        ],
        keywords=envelope.keywords,
        base_query=envelope.base_query,
        clear_filters_url=envelope.clear_filters_url,
        facet_count_mode=envelope.facet_count_mode.value,
        degraded=envelope.degraded,
    )


def _current_url(request: Request) -> str:
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "/products",
    response_model=ProductListResponse,
    status_code=status.HTTP_200_OK,
    summary="List products",
    description=(
        "Filter the catalog by facets (repeat a parameter for several values) "
        "and keywords, returning one page of results with facet counts."
    ),
)
def list_products(
    request: Request,
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> ProductListResponse:
    """List products with facet filtering and pagination.

    Query parameters are read directly so each facet can repeat:
    ``phase``, ``business-area``, ``group``, ``type``, ``parent``,
    ``subgroup``, ``user``, plus ``keywords`` and ``page``.

    Returns:
        Result envelope. A data load failure yields an empty, degraded
        envelope rather than an error.
    """
    params: dict[str, list[str]] = {}
    for key, value in request.query_params.multi_items():
        params.setdefault(key, []).append(value)

    envelope = service.evaluate(params, current_url=_current_url(request))
    return envelope_to_response(envelope)


@router.get(
    "/product/{product_id}",
    response_model=ProductDetailResponse,
    responses={
        404: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    summary="Get product",
    description="Get a product with its contacts.",
)
def get_product(
    product_id: str,
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> ProductDetailResponse:
    """Get product details by ID.

    Args:
        product_id: Record ID.

    Returns:
        Product details with contacts.
    """
    detail = service.get_record(product_id)
    return ProductDetailResponse(
        product=record_to_schema(detail.record),
        contacts=contacts_to_schema(detail.contacts),
        raw=detail.record.to_dict(),
    )


@router.get(
    "/product/{product_id}/categories",
    response_model=ProductCategoriesResponse,
    responses={
        404: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    summary="Get product categories",
    description="Get a product's category components, flattened across category types.",
)
def get_product_categories(
    product_id: str,
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> ProductCategoriesResponse:
    """Get product category components by ID.

    Args:
        product_id: Record ID.

    Returns:
        Category types, components and contacts.
    """
    result = service.get_record_components(product_id)
    return ProductCategoriesResponse(
        product=record_to_schema(result.record),
        category_types=result.category_types,
        components=[
            ComponentSchema(type=c.type, name=c.name, description=c.description)
            for c in result.components
        ],
        contacts=contacts_to_schema(result.contacts),
    )

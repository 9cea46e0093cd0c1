"""Health check endpoints.

``/health`` answers as long as the process is up. ``/ready`` also loads
the catalog, so a missing or corrupt data file takes the instance out of
rotation.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from finder.api.dependencies import get_catalog_service
from finder.catalog.service import CatalogService
from finder.domain.exceptions import DataLoadError
from finder.infrastructure.config import settings

router = APIRouter()

SERVICE_NAME = "fips-finder"


class HealthResponse(BaseModel):
    """Liveness response schema."""

    status: str
    service: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness response schema."""

    status: str
    record_count: int | None = None
    reason: str | None = None


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Report that the process is serving requests."""
    return HealthResponse(status="healthy", service=SERVICE_NAME, version=settings.api_version)


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    response_model_exclude_none=True,
    responses={503: {"model": ReadinessResponse}},
)
def readiness_check(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> ReadinessResponse | JSONResponse:
    """Check the catalog can be loaded.

    Returns:
        Eligible record count, or 503 with the load failure reason.
    """
    try:
        record_count = service.check_ready()
    except DataLoadError as e:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable", "reason": e.details.get("reason")},
        )
    return ReadinessResponse(status="ready", record_count=record_count)

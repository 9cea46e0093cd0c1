"""Shared API dependencies."""

from finder.catalog.service import CatalogService
from finder.infrastructure.config import settings

# Global service instance; it keeps no per-request state
_catalog_service: CatalogService | None = None


def get_catalog_service() -> CatalogService:
    """Get or create the catalog service.

    Returns:
        CatalogService built from the application settings.
    """
    global _catalog_service
    if _catalog_service is None:
        _catalog_service = CatalogService.from_settings(settings)
    return _catalog_service

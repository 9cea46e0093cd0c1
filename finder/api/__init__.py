"""API layer module.

Contains FastAPI routers and response schemas.
"""

from finder.api.health import router as health_router
from finder.api.products import router as products_router
from finder.api.taxonomy import router as taxonomy_router

__all__ = [
    "health_router",
    "products_router",
    "taxonomy_router",
]

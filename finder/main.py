"""FIPS Finder API main application module.

This module initializes the FastAPI application and configures
logging, middleware, exception handlers and routers.
"""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from finder.api.errors import register_exception_handlers
from finder.api.health import router as health_router
from finder.api.middleware import setup_middleware
from finder.api.products import router as products_router
from finder.api.taxonomy import router as taxonomy_router
from finder.infrastructure.config import settings
from finder.infrastructure.logging import configure_logging

configure_logging(settings.log_level, debug=settings.debug)
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log startup configuration and shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        None while the application serves requests.
    """
    logger.info(
        "Starting FIPS Finder API",
        version=settings.api_version,
        data_dir=str(settings.data_dir),
        facet_count_mode=settings.facet_count_mode,
        cache_enabled=settings.cache_enabled,
        page_size=settings.page_size,
    )

    yield

    logger.info("Shutting down FIPS Finder API")


app = FastAPI(
    title="FIPS Finder API",
    description="Faceted browsing of the IT products and services catalog",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Read-only API
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)
setup_middleware(app)
register_exception_handlers(app)

app.include_router(health_router, tags=["Health"])
app.include_router(products_router)
app.include_router(taxonomy_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", 8000)))

"""Error responses for the finder API.

Every error body has the same shape:

    {"error_code": "RECORD_NOT_FOUND", "message": "...",
     "details": {...}, "request_id": "..."}

Finder errors map to status codes by class: lookups that found nothing
give 404, data sources that failed to load give 503, anything else 400.
"""

from typing import Any

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from finder.domain.exceptions import DataLoadError, FinderError, NotFoundError

logger = structlog.get_logger()


def error_response(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    details: list[Any] | dict[str, Any] | None = None,
) -> JSONResponse:
    """Build an error response carrying the request ID."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details if details is not None else [],
            "request_id": getattr(request.state, "request_id", None),
        },
    )


def error_code_for(exc: FinderError) -> str:
    """Derive an error code from the exception class name.

    RecordNotFoundError -> RECORD_NOT_FOUND
    """
    name = type(exc).__name__.removesuffix("Error")
    return "".join(f"_{c}" if c.isupper() else c for c in name).lstrip("_").upper()


async def finder_error_handler(request: Request, exc: FinderError) -> JSONResponse:
    """Map finder errors to HTTP responses."""
    if isinstance(exc, NotFoundError):
        return error_response(
            request, status.HTTP_404_NOT_FOUND, error_code_for(exc), exc.message, exc.details
        )

    if isinstance(exc, DataLoadError):
        logger.error("Data source unavailable", path=request.url.path, **exc.details)
        return error_response(
            request,
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "DATA_UNAVAILABLE",
            exc.message,
            exc.details,
        )

    return error_response(
        request, status.HTTP_400_BAD_REQUEST, error_code_for(exc), exc.message, exc.details
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Wrap framework HTTP errors (unknown routes, bad methods) in the error shape."""
    detail = exc.detail
    if isinstance(detail, dict):
        return error_response(
            request,
            exc.status_code,
            detail.get("error_code", "ERROR"),
            detail.get("message", str(detail)),
            detail.get("details", []),
        )
    return error_response(request, exc.status_code, "ERROR", str(detail))


def register_exception_handlers(app: FastAPI) -> None:
    """Install the finder and HTTP exception handlers.

    Args:
        app: FastAPI application instance.
    """
    app.add_exception_handler(FinderError, finder_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)

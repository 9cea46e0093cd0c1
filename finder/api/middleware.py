"""API middleware for the finder API.

Provides:
- Request context (request ID and path) bound into every log event
- A last-resort handler turning unexpected exceptions into 500 responses
"""

import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware

from finder.api.errors import error_response

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


# ============================================================================
# Request Context
# ============================================================================


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Binds a request ID to the request and its log events.

    The ID comes from the ``X-Request-ID`` header when the client sends
    one, otherwise a UUID is generated. It is echoed back on the response.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request with correlation ID.

        Args:
            request: Incoming request.
            call_next: Next middleware/handler.

        Returns:
            Response with request ID header.
        """
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id, path=request.url.path)

        started = time.perf_counter()
        try:
            response = await call_next(request)
            logger.info(
                "Request completed",
                method=request.method,
                status_code=response.status_code,
                query_params=len(request.query_params),
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
        finally:
            structlog.contextvars.unbind_contextvars("request_id", "path")

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


# ============================================================================
# Unhandled Errors
# ============================================================================


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """Returns a 500 error body for exceptions no handler caught."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception("Unhandled exception", method=request.method, error=str(e))
            return error_response(
                request,
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "INTERNAL_ERROR",
                "An internal error occurred",
            )


def setup_middleware(app: FastAPI) -> None:
    """Configure all middleware for the application.

    The last middleware added runs first, so request context wraps the
    error handler and 500 responses still carry the request ID.

    Args:
        app: FastAPI application instance.
    """
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(RequestContextMiddleware)

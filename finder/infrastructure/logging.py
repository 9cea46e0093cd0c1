"""Structured logging setup.

structlog renders events and hands them to the standard library
``logging`` module, which owns the level filtering and the output stream.
"""

import logging
import sys

import structlog


def configure_logging(log_level: str = "INFO", debug: bool = False) -> None:
    """Configure structlog for the application.

    Request-scoped values bound with ``structlog.contextvars`` (the request
    ID and path) are merged into every event.

    Args:
        log_level: Minimum level name (e.g. "INFO"). Unknown names fall
            back to INFO.
        debug: Render human-readable console output instead of JSON.
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(message)s",
        stream=sys.stderr,
    )

    renderer = (
        structlog.dev.ConsoleRenderer()
        if debug
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

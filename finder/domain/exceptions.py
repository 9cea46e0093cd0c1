"""Domain exceptions.

All errors raised by the catalog core. The HTTP layer maps them to
status codes through a single exception handler.
"""

from pathlib import Path
from typing import Any


class FinderError(Exception):
    """Base class for all finder exceptions.

    All finder errors should inherit from this class to allow
    catching them at the application layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize finder error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Data Load Errors
# ============================================================================


class DataLoadError(FinderError):
    """Raised when a data source is unreadable or malformed.

    Recoverable: callers treat the source as empty and report a
    degraded result.
    """

    def __init__(self, source: str | Path, reason: str) -> None:
        """Initialize data load error.

        Args:
            source: File or source name that failed to load.
            reason: Explanation of the failure.
        """
        super().__init__(
            f"Unable to load {source}: {reason}",
            details={"source": str(source), "reason": reason},
        )


# ============================================================================
# Lookup Errors
# ============================================================================


class NotFoundError(FinderError):
    """Base class for lookups that found nothing."""

    pass


class RecordNotFoundError(NotFoundError):
    """Raised when a catalog record ID is not in the eligible working set."""

    def __init__(self, record_id: str) -> None:
        """Initialize record not found error.

        Args:
            record_id: The requested record ID.
        """
        super().__init__(
            f"Product not found: {record_id}",
            details={"record_id": record_id},
        )


class TaxonomyEntryNotFoundError(NotFoundError):
    """Raised when no taxonomy entry matches a slug or label token."""

    def __init__(self, taxonomy: str, slug_or_token: str) -> None:
        """Initialize taxonomy entry not found error.

        Args:
            taxonomy: Taxonomy name searched (e.g., "Group").
            slug_or_token: The slug or normalized label requested.
        """
        super().__init__(
            f"No {taxonomy} entry matches '{slug_or_token}'",
            details={"taxonomy": taxonomy, "slug": slug_or_token},
        )


# ============================================================================
# Selection Errors
# ============================================================================


class MalformedSelectionError(FinderError):
    """Raised when a filter selection value cannot be coerced.

    Non-fatal: the query state codec catches it and falls back to the
    default for that value.
    """

    def __init__(self, parameter: str, value: Any) -> None:
        """Initialize malformed selection error.

        Args:
            parameter: Query parameter name.
            value: The offending raw value.
        """
        super().__init__(
            f"Malformed value for '{parameter}': {value!r}",
            details={"parameter": parameter, "value": repr(value)},
        )

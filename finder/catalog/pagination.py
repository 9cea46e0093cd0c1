"""Pagination of in-memory record sequences."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from finder.domain.exceptions import MalformedSelectionError

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 12


def parse_page_number(value: Any) -> int:
    """Parse a raw page number strictly.

    Args:
        value: Raw page number (int or numeric string).

    Returns:
        Page number >= 1.

    Raises:
        MalformedSelectionError: If the value is not an integer >= 1.
    """
    if isinstance(value, bool) or value is None:
        raise MalformedSelectionError("page", value)
    try:
        page = int(str(value).strip())
    except ValueError as e:
        raise MalformedSelectionError("page", value) from e
    if page < 1:
        raise MalformedSelectionError("page", value)
    return page


def coerce_page_number(value: Any) -> int:
    """Coerce a raw page number to a valid 1-based page.

    Non-numeric values and values below 1 become 1. There is no upper
    bound.
    """
    try:
        return parse_page_number(value)
    except MalformedSelectionError:
        return 1


@dataclass
class Page(Generic[T]):
    """One page of results.

    Attributes:
        items: Items on this page.
        total_results: Number of items across all pages.
        current_page: This page's number (1-based).
        page_size: Items per page.
    """

    items: list[T]
    total_results: int
    current_page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        """Calculate total pages (0 when there are no results)."""
        return (self.total_results + self.page_size - 1) // self.page_size

    @property
    def offset(self) -> int:
        """Index of this page's first item."""
        return (self.current_page - 1) * self.page_size

    @property
    def has_next_page(self) -> bool:
        """Check if there's a next page."""
        return self.offset + self.page_size < self.total_results

    @property
    def has_prev_page(self) -> bool:
        """Check if there's a previous page."""
        return self.current_page > 1


class Paginator:
    """Slices sequences into pages.

    Example usage:
        page = Paginator(page_size=12).page(results, 2)
        page.items, page.total_pages, page.has_next_page
    """

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        """Initialize paginator.

        Args:
            page_size: Items per page (must be positive).
        """
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self.page_size = page_size

    def page(self, records: Sequence[T], page_number: Any = 1) -> Page[T]:
        """Get one page of records.

        A page number past the last page yields an empty page.

        Args:
            records: Full result sequence.
            page_number: Requested page, coerced to >= 1.

        Returns:
            The requested page.
        """
        current = coerce_page_number(page_number)
        start = (current - 1) * self.page_size
        return Page(
            items=list(records[start:start + self.page_size]),
            total_results=len(records),
            current_page=current,
            page_size=self.page_size,
        )

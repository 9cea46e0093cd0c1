"""Domain layer: error taxonomy shared by the catalog core and the API."""

from finder.domain.exceptions import (
    DataLoadError,
    FinderError,
    MalformedSelectionError,
    NotFoundError,
    RecordNotFoundError,
    TaxonomyEntryNotFoundError,
)

__all__ = [
    "DataLoadError",
    "FinderError",
    "MalformedSelectionError",
    "NotFoundError",
    "RecordNotFoundError",
    "TaxonomyEntryNotFoundError",
]

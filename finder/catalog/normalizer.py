"""Facet token normalization.

Every facet value that is compared or placed in a link goes through
``normalize`` so labels coming from catalog records and from the
taxonomy table always produce the same token.
"""

import re

_WHITESPACE_RUN = re.compile(r"\s+")


def normalize(text: str | None) -> str:
    """Convert a display label into a URL-safe facet token.

    Lower-cases the text and replaces each run of whitespace with a
    single underscore. Empty or missing input yields an empty token.

    Args:
        text: Display label (e.g., "Live service").

    Returns:
        Facet token (e.g., "live_service").
    """
    if not text:
        return ""
    return _WHITESPACE_RUN.sub("_", text.lower())

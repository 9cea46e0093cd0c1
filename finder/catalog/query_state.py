"""Query string <-> filter selection codec.

Facet tokens travel as one query parameter occurrence per token, e.g.
``?phase=live&phase=beta&keywords=pupil``; values are never comma-joined.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit

import structlog

from finder.catalog.filters import FACETS, UNCHECKED, FacetDefinition, FilterSelection
from finder.catalog.pagination import parse_page_number
from finder.domain.exceptions import MalformedSelectionError

logger = structlog.get_logger()

KEYWORDS_PARAM = "keywords"
PAGE_PARAM = "page"


@dataclass
class SelectedFilter:
    """An applied facet value with a link that removes it.

    Attributes:
        facet_name: Facet the value belongs to.
        heading: Facet heading for display.
        value: Selected token.
        display_text: Label for the token, the token itself if unknown.
        removal_link: Current path and query without this one token.
    """

    facet_name: str
    heading: str
    value: str
    display_text: str
    removal_link: str


class QueryStateCodec:
    """Parses and serializes filter selections.

    Example usage:
        codec = QueryStateCodec()
        selection = codec.parse({"phase": ["live", "_unchecked"], "page": "2"})
        codec.serialize_active_selection(selection)  # "phase=live"
        codec.build_removal_link("/products?phase=live&phase=beta", "phase", "beta")
    """

    def __init__(self, facets: Iterable[FacetDefinition] = FACETS) -> None:
        """Initialize codec.

        Args:
            facets: Recognized facets, in serialization order.
        """
        self.facets = tuple(facets)

    def parse(self, raw_params: Mapping[str, Any]) -> FilterSelection:
        """Build a filter selection from request parameters.

        Each facet accepts a single value or a sequence of values. The
        unchecked sentinel, blank values and repeats are dropped.
        Unrecognized parameters are ignored.

        Args:
            raw_params: Parameter name -> value or list of values.

        Returns:
            Parsed selection.
        """
        facets: dict[str, tuple[str, ...]] = {}
        for facet in self.facets:
            tokens = _dedupe(
                v for v in _as_list(raw_params.get(facet.name))
                if v.strip() and v != UNCHECKED
            )
            if tokens:
                facets[facet.name] = tokens

        keywords = next(iter(_as_list(raw_params.get(KEYWORDS_PARAM))), "").strip()

        return FilterSelection(
            facets=facets,
            keywords=keywords,
            page=self._parse_page(raw_params.get(PAGE_PARAM)),
        )

    def parse_pairs(self, pairs: Iterable[tuple[str, str]]) -> FilterSelection:
        """Build a filter selection from repeated key/value pairs.

        Args:
            pairs: Query pairs, e.g. from ``request.query_params.multi_items()``.

        Returns:
            Parsed selection.
        """
        grouped: dict[str, list[str]] = {}
        for key, value in pairs:
            grouped.setdefault(key, []).append(value)
        return self.parse(grouped)

    def serialize_active_selection(self, selection: FilterSelection) -> str:
        """Serialize a selection back into a query string, without the page.

        Facets are written in fixed order, one pair per token, followed
        by keywords.

        Args:
            selection: Selection to serialize.

        Returns:
            URL-encoded query string (no leading "?").
        """
        pairs = [
            (facet.name, token)
            for facet in self.facets
            for token in selection.tokens(facet.name)
        ]
        if selection.keywords:
            pairs.append((KEYWORDS_PARAM, selection.keywords))
        return urlencode(pairs)

    def build_removal_link(self, current_url: str, facet_name: str, token: str) -> str:
        """Build a link to the current URL minus one facet token.

        Only pairs matching both the facet and the token are removed;
        every other pair keeps its position.

        Args:
            current_url: Current path and query (absolute URLs also accepted).
            facet_name: Facet parameter name.
            token: Token to remove.

        Returns:
            Path plus query string.
        """
        parts = urlsplit(current_url)
        pairs = parse_qsl(parts.query, keep_blank_values=True)
        kept = [(k, v) for k, v in pairs if not (k == facet_name and v == token)]
        query = urlencode(kept)
        path = parts.path or "/"
        return f"{path}?{query}" if query else path

    def selected_filters(
        self,
        selection: FilterSelection,
        current_url: str,
        labels: Mapping[str, Mapping[str, str]] | None = None,
    ) -> list[SelectedFilter]:
        """Describe each applied facet token with its removal link.

        Args:
            selection: Applied selection.
            current_url: URL the selection was parsed from.
            labels: Facet name -> token -> display label.

        Returns:
            Selected filters in fixed facet order.
        """
        labels = labels or {}
        return [
            SelectedFilter(
                facet_name=facet.name,
                heading=facet.heading,
                value=token,
                display_text=labels.get(facet.name, {}).get(token, token),
                removal_link=self.build_removal_link(current_url, facet.name, token),
            )
            for facet, tokens in selection.active_facets
            for token in tokens
        ]

    @staticmethod
    def _parse_page(raw: Any) -> int:
        value = next(iter(_as_list(raw)), None) if not isinstance(raw, int) else raw
        if value is None:
            return 1
        try:
            return parse_page_number(value)
        except MalformedSelectionError as e:
            logger.debug("Ignoring malformed page number", **e.details)
            return 1


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [v for v in value if isinstance(v, str)]
    return []


def _dedupe(values: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))

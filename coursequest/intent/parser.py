"""Search request parsing for both entry paths.

Free-text questions go through the rules extractor first; explicit parameters go straight to the
validator. Both produce the same `SearchRequest`, so everything downstream is shared.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

from coursequest.intent.extractor import extract_filters
from coursequest.intent.schema import DEFAULT_SORT, SearchRequest
from coursequest.intent.validation import FilterValidationError, validate_search_params

logger = logging.getLogger(__name__)

ParseSource = Literal["text", "params"]


@dataclass(frozen=True)
class ParseResult:
    """Validated request plus the raw map it was built from."""

    request: SearchRequest
    raw_filters: dict[str, Any]
    source: ParseSource


def parse_question(
        question: str,
        *,
        page: Any = None,
        per_page: Any = None,
) -> ParseResult:
    """Parse a free-text question into a validated search request.

    Only `page`/`per_page` accompany a question; results are always ordered by `DEFAULT_SORT`.

    Raises:
        FilterValidationError: If the question is blank or an extracted value is out of range
            (e.g. "rated above 7").
    """

    if not (question or "").strip():
        raise FilterValidationError("question", "must not be empty")

    raw = extract_filters(question)
    logger.debug("extracted filters=%s", raw)

    request = validate_search_params(
        {**raw, "page": page, "per_page": per_page},
        default_sort=DEFAULT_SORT,
    )
    return ParseResult(request=request, raw_filters=raw, source="text")


def parse_params(params: Mapping[str, Any]) -> ParseResult:
    """Validate explicit search parameters into a search request."""

    request = validate_search_params(params)
    return ParseResult(request=request, raw_filters=dict(params), source="params")

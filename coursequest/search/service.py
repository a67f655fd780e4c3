"""Search and comparison execution against the row store."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from time import monotonic

from psycopg_pool import AsyncConnectionPool

from coursequest.db.pool import get_conn
from coursequest.db.query import fetch_page, fetch_rows
from coursequest.intent.schema import SearchRequest
from coursequest.search.compare import ComparisonResult, build_comparison
from coursequest.search.formatter import SearchResponse, format_search_response
from coursequest.search.pagination import paginate
from coursequest.sql.builder import compile_comparison, compile_query
from coursequest.sql.render import render_select

logger = logging.getLogger(__name__)


def _elapsed_ms(started: float) -> int:
    return int((monotonic() - started) * 1000)


async def search_courses(pool: AsyncConnectionPool, request: SearchRequest) -> SearchResponse:
    """Run one validated search request and return the `{data, meta}` envelope."""

    started = monotonic()
    spec = compile_query(
        request.filters,
        sort=request.sort,
        page=request.page,
        per_page=request.per_page,
    )

    async with get_conn(pool) as conn:
        rows, total = await fetch_page(conn, spec)

    meta = paginate(request.page, request.per_page, total)
    logger.info(
        "search filters=%s page=%d per_page=%d total=%d latency_ms=%d",
        request.filters.as_dict(),
        request.page,
        request.per_page,
        total,
        _elapsed_ms(started),
    )
    return format_search_response(rows, meta)


async def compare_courses(pool: AsyncConnectionPool, course_ids: Sequence[str]) -> ComparisonResult:
    """Fetch the given (already parsed) course ids and build the comparison envelope."""

    started = monotonic()
    spec = compile_comparison(course_ids)

    async with get_conn(pool) as conn:
        rows = await fetch_rows(conn, render_select(spec))

    result = build_comparison(course_ids, rows)
    logger.info(
        "compare requested=%d found=%d latency_ms=%d",
        result.meta.requested_count,
        result.meta.found_count,
        _elapsed_ms(started),
    )
    return result

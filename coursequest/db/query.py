"""Safe DB query helpers.

Queries arrive fully rendered by `coursequest.sql.render`; values are always passed separately via
the driver's parameter binding. Driver errors are wrapped in `StoreError` and never retried here.
"""

from __future__ import annotations

from typing import Any, LiteralString, cast

import psycopg
from psycopg import AsyncConnection
from psycopg.rows import dict_row

from coursequest.sql.builder import QuerySpec
from coursequest.sql.render import PlaceholderStyle, RenderedQuery, render_count, render_select


class StoreError(RuntimeError):
    """Raised when the row store fails to execute a query."""


async def fetch_count(conn: AsyncConnection, query: RenderedQuery) -> int:
    """Execute a COUNT query and return an `int` (`0` for no row or NULL)."""

    try:
        async with conn.cursor() as cur:
            await cur.execute(cast(LiteralString, query.sql), query.bind())
            row = await cur.fetchone()
    except psycopg.Error as exc:
        raise StoreError("count query failed") from exc

    if not row or row[0] is None:
        return 0
    return int(row[0])


async def fetch_rows(conn: AsyncConnection, query: RenderedQuery) -> list[dict[str, Any]]:
    """Execute a row query and return rows as dicts keyed by column name."""

    try:
        async with conn.cursor(row_factory=dict_row) as cur:
            await cur.execute(cast(LiteralString, query.sql), query.bind())
            return await cur.fetchall()
    except psycopg.Error as exc:
        raise StoreError("row query failed") from exc


async def fetch_page(conn: AsyncConnection, spec: QuerySpec) -> tuple[list[dict[str, Any]], int]:
    """Run the COUNT and SELECT queries of one `QuerySpec`; return `(rows, total_count)`.

    The row query is skipped when nothing matches.
    """

    total = await fetch_count(conn, render_count(spec, PlaceholderStyle.pyformat))
    if total == 0:
        return [], 0

    rows = await fetch_rows(conn, render_select(spec, PlaceholderStyle.pyformat))
    return rows, total

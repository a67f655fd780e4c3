"""Render a `QuerySpec` into SQL text with positional placeholders.

Placeholder numbers are assigned here, sequentially in predicate order, so the COUNT and SELECT
queries of one `QuerySpec` always agree on numbering. Two styles are supported:

    - `numbered` (`$1`, `$2`, ...): readable golden output for tests and logs.
    - `pyformat` (`%(p1)s`, ...): what psycopg executes; named markers let one bound value be
      referenced more than once (the shared `q` match, the comparison CASE mapping).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from coursequest.sql.builder import QuerySpec, SQLBuilderError
from coursequest.sql.columns import COURSE_COLUMNS, COURSES_TABLE


class PlaceholderStyle(StrEnum):
    """Placeholder syntax used in rendered SQL."""

    numbered = "numbered"
    pyformat = "pyformat"


@dataclass(frozen=True)
class RenderedQuery:
    """SQL text plus its bound values in placeholder order."""

    sql: str
    params: tuple[Any, ...]
    style: PlaceholderStyle

    def bind(self) -> tuple[Any, ...] | dict[str, Any]:
        """Return params in the shape the driver expects for `style`."""

        if self.style == PlaceholderStyle.pyformat:
            return {_param_name(n): value for n, value in enumerate(self.params, start=1)}
        return self.params


def _param_name(number: int) -> str:
    return f"p{number}"


def _marker(style: PlaceholderStyle, number: int) -> str:
    if style == PlaceholderStyle.pyformat:
        return f"%({_param_name(number)})s"
    return f"${number}"


def _render_where(spec: QuerySpec, style: PlaceholderStyle) -> tuple[str, list[str]]:
    """Render the WHERE clause; return it with the marker of every bound value."""

    fragments: list[str] = []
    markers: list[str] = []
    for predicate in spec.predicates:
        local = [_marker(style, len(markers) + i + 1) for i in range(len(predicate.params))]
        fragments.append(predicate.sql.format(*local))
        markers.extend(local)

    if not fragments:
        return "", markers
    return "WHERE " + " AND ".join(fragments), markers


def render_count(spec: QuerySpec, style: PlaceholderStyle = PlaceholderStyle.pyformat) -> RenderedQuery:
    """Render the COUNT(*) query: same predicates, no ordering or page window."""

    where_sql, _ = _render_where(spec, style)
    sql = f"SELECT COUNT(*)::bigint FROM {COURSES_TABLE} {where_sql}".strip()
    return RenderedQuery(sql=sql, params=spec.where_params, style=style)


def render_select(spec: QuerySpec, style: PlaceholderStyle = PlaceholderStyle.pyformat) -> RenderedQuery:
    """Render the row query: predicates, ORDER BY, then LIMIT/OFFSET as the last two placeholders."""

    if not spec.order_by:
        raise SQLBuilderError("row queries require a deterministic ORDER BY")

    where_sql, markers = _render_where(spec, style)
    order_sql = ", ".join(term.sql.format(*markers) for term in spec.order_by)

    parts = [
        f"SELECT {', '.join(COURSE_COLUMNS)} FROM {COURSES_TABLE}",
        where_sql,
        f"ORDER BY {order_sql}",
    ]
    if spec.limit is not None:
        limit_marker = _marker(style, len(markers) + 1)
        offset_marker = _marker(style, len(markers) + 2)
        parts.append(f"LIMIT {limit_marker} OFFSET {offset_marker}")

    sql = " ".join(part for part in parts if part)
    return RenderedQuery(sql=sql, params=spec.params, style=style)

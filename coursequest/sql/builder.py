"""Deterministic query builder.

The builder converts a validated `FilterSet` into a `QuerySpec`: an ordered list of predicate
fragments with their bound values, ordering terms and the page window. Fragments are
placeholder-agnostic: each one refers to its own values through local slots (`{0}`, `{1}`, ...)
and `coursequest.sql.render` assigns global placeholder numbers only when SQL text is produced.

Identifiers (columns, operators, directions) are strictly allowlisted; only values are bound.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from coursequest.intent.schema import DEFAULT_SORT, FilterSet, SortKey
from coursequest.search.pagination import offset_for
from coursequest.sql.columns import (
    EQUALITY_COLUMNS,
    RANGE_COLUMNS,
    SORT_COLUMNS,
    SORT_DIRECTIONS,
)


class SQLBuilderError(ValueError):
    """Raised when a request cannot be converted into a deterministic query."""


@dataclass(frozen=True)
class Predicate:
    """A WHERE fragment whose `{n}` slots refer to its own `params`."""

    sql: str
    params: tuple[Any, ...] = ()


@dataclass(frozen=True)
class OrderTerm:
    """An ORDER BY term.

    Ordering terms bind no values of their own; a `{n}` slot refers to the n-th value already bound
    by the predicates (0-based, across all predicates).
    """

    sql: str


@dataclass(frozen=True)
class QuerySpec:
    """A compiled, driver-independent query over the courses table."""

    predicates: tuple[Predicate, ...]
    order_by: tuple[OrderTerm, ...]
    limit: int | None = None
    offset: int | None = None

    @property
    def where_params(self) -> tuple[Any, ...]:
        return tuple(value for predicate in self.predicates for value in predicate.params)

    @property
    def params(self) -> tuple[Any, ...]:
        """All bound values in placeholder order, pagination values last."""

        if self.limit is None:
            return self.where_params
        return (*self.where_params, self.limit, self.offset or 0)


class PredicateBuilder:
    """Accumulate `(fragment, values)` pairs in append order."""

    def __init__(self) -> None:
        self._predicates: list[Predicate] = []

    def add(self, sql: str, *params: Any) -> PredicateBuilder:
        self._predicates.append(Predicate(sql=sql, params=params))
        return self

    def compare(self, column: str, operator: str, value: Any) -> PredicateBuilder:
        return self.add(f"{column} {operator} {{0}}", value)

    def build(self) -> tuple[Predicate, ...]:
        return tuple(self._predicates)


def _bind_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def like_pattern(text: str) -> str:
    """Wrap text for a substring ILIKE match, escaping LIKE wildcards."""

    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def build_predicates(filters: FilterSet) -> tuple[Predicate, ...]:
    """Compile filters into predicate fragments in a fixed, documented order.

    Order: `q`, department, level, delivery mode, year, then the range filters (fee, rating,
    credits, duration; minimum before maximum).
    """

    builder = PredicateBuilder()

    if filters.q:
        builder.add("(course_name ILIKE {0} OR department ILIKE {0})", like_pattern(filters.q))

    if filters.department:
        builder.add("LOWER(department) = LOWER({0})", filters.department)

    for key, column in EQUALITY_COLUMNS.items():
        value = getattr(filters, key)
        if value is not None:
            builder.compare(column, "=", _bind_value(value))

    for key, (column, operator) in RANGE_COLUMNS.items():
        value = getattr(filters, key)
        if value is not None:
            builder.compare(column, operator, value)

    return builder.build()


def build_order_terms(sort: Sequence[SortKey]) -> tuple[OrderTerm, ...]:
    if not sort:
        raise SQLBuilderError("ordering requires at least one sort key")
    return tuple(
        OrderTerm(sql=f"{SORT_COLUMNS[key.column]} {SORT_DIRECTIONS[key.direction]}")
        for key in sort
    )


def compile_query(
        filters: FilterSet,
        *,
        sort: Sequence[SortKey] = DEFAULT_SORT,
        page: int = 1,
        per_page: int = 10,
) -> QuerySpec:
    """Compile a filter set plus page window into a `QuerySpec`.

    A filter set with no constraints compiles to a `QuerySpec` without predicates ("all rows").
    """

    if page < 1 or per_page < 1:
        raise SQLBuilderError("page and per_page must be positive")

    return QuerySpec(
        predicates=build_predicates(filters),
        order_by=build_order_terms(sort),
        limit=per_page,
        offset=offset_for(page, per_page),
    )


def compile_comparison(course_ids: Sequence[str]) -> QuerySpec:
    """Compile a membership query that returns rows in the caller's id order.

    The CASE mapping reuses the membership placeholders, so no value is bound twice.
    """

    if not course_ids:
        raise SQLBuilderError("comparison requires at least one course id")

    slots = ", ".join(f"{{{i}}}" for i in range(len(course_ids)))
    membership = Predicate(sql=f"course_id IN ({slots})", params=tuple(course_ids))

    whens = " ".join(f"WHEN {{{i}}} THEN {i + 1}" for i in range(len(course_ids)))
    positional = OrderTerm(sql=f"CASE course_id {whens} ELSE {len(course_ids) + 1} END")

    return QuerySpec(predicates=(membership,), order_by=(positional,))

"""Filter validation and normalization.

Both search paths end here: the free-text path hands over the extractor's raw map, the explicit path
hands over request parameters. Either way the output is one `SearchRequest` shape.

Validation is fail-fast: fields are checked in a fixed order and the first invalid one raises
`FilterValidationError` naming that field; later fields are not inspected.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from decimal import Decimal
from typing import Any

from pydantic import ValidationError

from coursequest.intent.schema import (
    DEFAULT_PAGE,
    DEFAULT_PER_PAGE,
    FILTER_KEYS,
    MAX_PER_PAGE,
    RANGE_PAIRS,
    DeliveryMode,
    FilterSet,
    Level,
    SearchRequest,
    SortColumn,
    SortDirection,
    SortKey,
)

PAGING_KEYS: tuple[str, ...] = ("page", "per_page", "sort_by", "sort_dir")


class FilterValidationError(ValueError):
    """Raised when a filter or paging parameter is malformed or out of range."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"Invalid {field}: {message}")
        self.field = field
        self.message = message


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _to_number(field: str, value: Any, *, kind: str = "a number") -> float:
    if isinstance(value, bool):
        raise FilterValidationError(field, f"must be {kind}")
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            raise FilterValidationError(field, f"must be {kind}") from None
    if not math.isfinite(number):
        raise FilterValidationError(field, f"must be {kind}")
    return number


def _to_int(field: str, value: Any) -> int:
    number = _to_number(field, value, kind="an integer")
    if not number.is_integer():
        raise FilterValidationError(field, "must be an integer")
    return int(number)


def _check_bounds(field: str, value: float, low: float | None, high: float | None) -> None:
    if low is not None and value < low:
        raise FilterValidationError(field, f"must be >= {low:g}")
    if high is not None and value > high:
        raise FilterValidationError(field, f"must be <= {high:g}")


def _number(low: float | None = None, high: float | None = None) -> Callable[[str, Any], float]:
    def coerce(field: str, value: Any) -> float:
        number = _to_number(field, value)
        _check_bounds(field, number, low, high)
        return number

    return coerce


def _integer(low: int | None = None, high: int | None = None) -> Callable[[str, Any], int]:
    def coerce(field: str, value: Any) -> int:
        number = _to_int(field, value)
        _check_bounds(field, number, low, high)
        return number

    return coerce


def _text(field: str, value: Any) -> str:
    if not isinstance(value, str):
        raise FilterValidationError(field, "must be a string")
    return value.strip()


def _choice(enum_cls: type, *, upper: bool) -> Callable[[str, Any], Any]:
    allowed = [member.value for member in enum_cls]

    def coerce(field: str, value: Any) -> Any:
        text = str(value).strip()
        text = text.upper() if upper else text.lower()
        if text not in allowed:
            raise FilterValidationError(field, f"must be one of: {', '.join(allowed)}")
        return enum_cls(text)

    return coerce


_FIELD_RULES: tuple[tuple[str, Callable[[str, Any], Any]], ...] = (
    ("q", _text),
    ("department", _text),
    ("level", _choice(Level, upper=True)),
    ("delivery_mode", _choice(DeliveryMode, upper=False)),
    ("year_offered", _integer(1900, 2100)),
    ("min_fee", _number(0)),
    ("max_fee", _number(0)),
    ("min_rating", _number(0, 5)),
    ("max_rating", _number(0, 5)),
    ("min_credits", _integer(1)),
    ("max_credits", _integer(1)),
    ("min_duration_weeks", _integer(1)),
    ("max_duration_weeks", _integer(1)),
)

_sort_column = _choice(SortColumn, upper=False)
_sort_direction = _choice(SortDirection, upper=False)


def validate_filters(raw: Mapping[str, Any]) -> FilterSet:
    """Validate and normalize a raw filter map into a `FilterSet`.

    Raises:
        FilterValidationError: On the first unknown, malformed or out-of-range field, or when a
            populated min/max pair is reversed.
    """

    for key in raw:
        if key not in FILTER_KEYS:
            raise FilterValidationError(key, "unknown filter")

    values: dict[str, Any] = {}
    for field, coerce in _FIELD_RULES:
        value = raw.get(field)
        if _is_blank(value):
            continue
        values[field] = coerce(field, value)

    for low_key, high_key in RANGE_PAIRS:
        low = values.get(low_key)
        high = values.get(high_key)
        if low is not None and high is not None and low > high:
            raise FilterValidationError(low_key, f"must be <= {high_key}")

    try:
        return FilterSet(**values)
    except ValidationError as exc:
        # The schema re-checks the same invariants.
        raise FilterValidationError("filters", str(exc)) from exc


def _sort_keys(
        sort_by: Any,
        sort_dir: Any,
        default_sort: tuple[SortKey, ...] | None,
) -> tuple[SortKey, ...]:
    column = None if _is_blank(sort_by) else _sort_column("sort_by", sort_by)
    direction = SortDirection.asc
    if not _is_blank(sort_dir):
        direction = _sort_direction("sort_dir", sort_dir)

    if column is None:
        if default_sort is not None:
            return default_sort
        column = SortColumn.course_id

    keys = [SortKey(column=column, direction=direction)]
    if column != SortColumn.course_id:
        keys.append(SortKey(column=SortColumn.course_id, direction=SortDirection.asc))
    return tuple(keys)


def validate_search_params(
        params: Mapping[str, Any],
        *,
        default_sort: tuple[SortKey, ...] | None = None,
) -> SearchRequest:
    """Validate filters plus paging/sort parameters into a `SearchRequest`.

    Paging is lenient by contract: `page` is floored at 1 and `per_page` is clamped to
    `[1, MAX_PER_PAGE]`; only non-numeric values fail.

    Without `sort_by`, results are ordered by `course_id` in the `sort_dir` direction unless
    `default_sort` is given, in which case `default_sort` is used as-is.
    """

    filters = validate_filters({k: v for k, v in params.items() if k not in PAGING_KEYS})

    page = DEFAULT_PAGE
    if not _is_blank(params.get("page")):
        page = max(1, _to_int("page", params["page"]))

    per_page = DEFAULT_PER_PAGE
    if not _is_blank(params.get("per_page")):
        per_page = min(MAX_PER_PAGE, max(1, _to_int("per_page", params["per_page"])))

    sort = _sort_keys(params.get("sort_by"), params.get("sort_dir"), default_sort)

    return SearchRequest(filters=filters, page=page, per_page=per_page, sort=sort)

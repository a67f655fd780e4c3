"""CSV-record-to-row conversion.

Both the CSV loader and the integration tests convert catalog records into tuples matching the
`courses` column order; keeping that in one place prevents drift between them.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from coursequest.sql.columns import COURSE_COLUMNS

REQUIRED_FIELDS: tuple[str, ...] = ("course_id", "course_name", "level", "delivery_mode")


class RowError(ValueError):
    """Raised when a catalog record cannot be converted into a row."""


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _int(field: str, value: Any) -> int | None:
    text = _text(value)
    if text is None:
        return None
    try:
        return int(text)
    except ValueError:
        raise RowError(f"{field} must be an integer, got {text!r}") from None


def _float(field: str, value: Any) -> float | None:
    text = _text(value)
    if text is None:
        return None
    try:
        return float(text)
    except ValueError:
        raise RowError(f"{field} must be a number, got {text!r}") from None


def course_row(record: Mapping[str, Any]) -> tuple[Any, ...]:
    """Convert one catalog record into a row tuple in `COURSE_COLUMNS` order.

    Raises:
        RowError: If a required field is blank or a numeric field does not parse.
    """

    missing = [field for field in REQUIRED_FIELDS if _text(record.get(field)) is None]
    if missing:
        raise RowError(f"Missing required fields: {', '.join(missing)}")

    values = {
        "course_id": _text(record["course_id"]),
        "course_name": _text(record["course_name"]),
        "department": _text(record.get("department")),
        "level": _text(record["level"]).upper(),
        "delivery_mode": _text(record["delivery_mode"]).lower(),
        "credits": _int("credits", record.get("credits")),
        "duration_weeks": _int("duration_weeks", record.get("duration_weeks")),
        "rating": _float("rating", record.get("rating")),
        "tuition_fee_inr": _int("tuition_fee_inr", record.get("tuition_fee_inr")),
        "year_offered": _int("year_offered", record.get("year_offered")),
    }
    return tuple(values[column] for column in COURSE_COLUMNS)

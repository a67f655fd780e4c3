"""Course comparison: id parsing, result ordering and summary insights."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict

from coursequest.intent.validation import FilterValidationError
from coursequest.search.formatter import Course

MAX_COMPARE_IDS = 4


class MissingParameterError(FilterValidationError):
    """Raised when no course id was supplied."""


class TooManyIdsError(FilterValidationError):
    """Raised when more than `MAX_COMPARE_IDS` distinct ids were supplied."""


def parse_compare_ids(raw: str | None) -> list[str]:
    """Split a comma-separated id list into distinct ids, keeping first occurrences in order.

    Raises:
        MissingParameterError: If no non-empty id remains.
        TooManyIdsError: If more than `MAX_COMPARE_IDS` distinct ids remain.
    """

    ids: list[str] = []
    for part in (raw or "").split(","):
        course_id = part.strip()
        if course_id and course_id not in ids:
            ids.append(course_id)

    if not ids:
        raise MissingParameterError("ids", "provide comma-separated course ids (e.g. CS101,MGT201)")
    if len(ids) > MAX_COMPARE_IDS:
        raise TooManyIdsError("ids", f"at most {MAX_COMPARE_IDS} courses can be compared at once")
    return ids


class RangeStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    min: float | int | None = None
    max: float | int | None = None
    avg: float | int | None = None


class ComparisonInsights(BaseModel):
    model_config = ConfigDict(frozen=True)

    fee_range: RangeStats
    rating_range: RangeStats
    credits_range: RangeStats
    levels: list[str]
    delivery_modes: list[str]
    departments: list[str]


class ComparisonMeta(BaseModel):
    model_config = ConfigDict(frozen=True)

    requested_count: int
    found_count: int
    missing_count: int
    comparison_date: str


class ComparisonResult(BaseModel):
    """`{courses, missing_ids, meta, insights?}` envelope."""

    model_config = ConfigDict(frozen=True)

    courses: list[Course]
    missing_ids: list[str]
    meta: ComparisonMeta
    insights: ComparisonInsights | None = None

    def to_payload(self) -> dict[str, Any]:
        payload = self.model_dump(mode="json")
        if payload["insights"] is None:
            del payload["insights"]
        return payload


def _round_half_up(value: Decimal, places: int) -> Decimal:
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def range_stats(values: Iterable[float | int | None], *, places: int) -> RangeStats:
    """min/max/avg over non-null values; `avg` is rounded half-up to `places` decimals."""

    present = [v for v in values if v is not None]
    if not present:
        return RangeStats()

    total = sum((Decimal(str(v)) for v in present), Decimal(0))
    avg = _round_half_up(total / len(present), places)
    return RangeStats(
        min=min(present),
        max=max(present),
        avg=int(avg) if places == 0 else float(avg),
    )


def _distinct(values: Iterable[str | None]) -> list[str]:
    seen: list[str] = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return seen


def build_insights(courses: Sequence[Course]) -> ComparisonInsights:
    return ComparisonInsights(
        fee_range=range_stats((c.tuition_fee_inr for c in courses), places=0),
        rating_range=range_stats((c.rating for c in courses), places=1),
        credits_range=range_stats((c.credits for c in courses), places=1),
        levels=_distinct(c.level.value for c in courses),
        delivery_modes=_distinct(c.delivery_mode.value for c in courses),
        departments=_distinct(c.department for c in courses),
    )


def _iso_utc(moment: datetime) -> str:
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_comparison(
        course_ids: Sequence[str],
        rows: Iterable[Mapping[str, Any]],
        *,
        now: datetime | None = None,
) -> ComparisonResult:
    """Assemble the comparison envelope.

    Rows are re-ordered by position in `course_ids` regardless of the order the store returned
    them in. Insights are only computed when more than one course was found.
    """

    by_id = {course.course_id: course for course in map(Course.from_row, rows)}
    courses = [by_id[course_id] for course_id in course_ids if course_id in by_id]
    missing_ids = [course_id for course_id in course_ids if course_id not in by_id]

    meta = ComparisonMeta(
        requested_count=len(course_ids),
        found_count=len(courses),
        missing_count=len(missing_ids),
        comparison_date=_iso_utc(now or datetime.now(UTC)),
    )
    insights = build_insights(courses) if len(courses) > 1 else None
    return ComparisonResult(courses=courses, missing_ids=missing_ids, meta=meta, insights=insights)

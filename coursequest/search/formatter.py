"""Response envelopes for course rows."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, field_serializer

from coursequest.intent.schema import DeliveryMode, Level
from coursequest.search.pagination import PageMeta


class Course(BaseModel):
    """One catalog row as returned by the store.

    `rating` is numeric here; NUMERIC values from the driver arrive as `Decimal` and are coerced.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    course_id: str
    course_name: str
    department: str | None = None
    level: Level
    delivery_mode: DeliveryMode
    credits: int | None = None
    duration_weeks: int | None = None
    rating: float | None = None
    tuition_fee_inr: int | None = None
    year_offered: int | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Course:
        return cls.model_validate(dict(row))


class SearchCourse(Course):
    """Course as exposed by the search envelopes: rating rendered with one decimal."""

    @field_serializer("rating")
    def serialize_rating(self, rating: float | None) -> str | None:
        if rating is None:
            return None
        return f"{rating:.1f}"


class SearchResponse(BaseModel):
    """`{data, meta}` envelope shared by the free-text and explicit search paths."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    data: list[SearchCourse]
    meta: PageMeta

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


def format_search_response(rows: Iterable[Mapping[str, Any]], meta: PageMeta) -> SearchResponse:
    """Wrap store rows and page metadata into the search envelope."""

    return SearchResponse(data=[SearchCourse.from_row(row) for row in rows], meta=meta)

"""Filter Set schema (Pydantic models).

This schema is the contract between the validator (fed by either the free-text extractor or explicit
request parameters) and the deterministic SQL builder. The builder only ever sees these models.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Level(StrEnum):
    """Course levels as stored in the catalog."""

    UG = "UG"
    PG = "PG"


class DeliveryMode(StrEnum):
    """How a course is delivered."""

    online = "online"
    offline = "offline"
    hybrid = "hybrid"


class SortColumn(StrEnum):
    """Columns a search may be sorted by."""

    rating = "rating"
    tuition_fee_inr = "tuition_fee_inr"
    credits = "credits"
    duration_weeks = "duration_weeks"
    course_id = "course_id"
    course_name = "course_name"
    year_offered = "year_offered"


class SortDirection(StrEnum):
    """Sort direction."""

    asc = "asc"
    desc = "desc"


FILTER_KEYS: tuple[str, ...] = (
    "q",
    "department",
    "level",
    "delivery_mode",
    "year_offered",
    "min_fee",
    "max_fee",
    "min_rating",
    "max_rating",
    "min_credits",
    "max_credits",
    "min_duration_weeks",
    "max_duration_weeks",
)

RANGE_PAIRS: tuple[tuple[str, str], ...] = (
    ("min_fee", "max_fee"),
    ("min_rating", "max_rating"),
    ("min_credits", "max_credits"),
    ("min_duration_weeks", "max_duration_weeks"),
)

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 10
MAX_PER_PAGE = 100


class FilterSet(BaseModel):
    """Validated search constraints; a `None` field means "no constraint on this dimension"."""

    model_config = ConfigDict(extra="forbid", frozen=True, str_strip_whitespace=True)

    q: str | None = None
    department: str | None = None
    level: Level | None = None
    delivery_mode: DeliveryMode | None = None
    year_offered: int | None = Field(default=None, ge=1900, le=2100)

    min_fee: float | None = Field(default=None, ge=0)
    max_fee: float | None = Field(default=None, ge=0)
    min_rating: float | None = Field(default=None, ge=0, le=5)
    max_rating: float | None = Field(default=None, ge=0, le=5)
    min_credits: int | None = Field(default=None, ge=1)
    max_credits: int | None = Field(default=None, ge=1)
    min_duration_weeks: int | None = Field(default=None, ge=1)
    max_duration_weeks: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def validate_ranges(self) -> FilterSet:
        """Validate that every populated min/max pair is well-formed (`min <= max`)."""

        for low_key, high_key in RANGE_PAIRS:
            low = getattr(self, low_key)
            high = getattr(self, high_key)
            if low is not None and high is not None and low > high:
                raise ValueError(f"{low_key} must be <= {high_key}")
        return self

    def as_dict(self) -> dict[str, Any]:
        """Return only the populated constraints."""

        return self.model_dump(exclude_none=True)


class SortKey(BaseModel):
    """One ORDER BY term over an allowlisted column."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    column: SortColumn
    direction: SortDirection = SortDirection.asc


DEFAULT_SORT: tuple[SortKey, ...] = (
    SortKey(column=SortColumn.rating, direction=SortDirection.desc),
    SortKey(column=SortColumn.course_name, direction=SortDirection.asc),
)


class SearchRequest(BaseModel):
    """A fully validated search: constraints, page window and ordering."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    filters: FilterSet = Field(default_factory=FilterSet)
    page: int = Field(default=DEFAULT_PAGE, ge=1)
    per_page: int = Field(default=DEFAULT_PER_PAGE, ge=1, le=MAX_PER_PAGE)
    sort: tuple[SortKey, ...] = DEFAULT_SORT

    @model_validator(mode="after")
    def validate_sort(self) -> SearchRequest:
        """A search always has a deterministic ordering."""

        if not self.sort:
            raise ValueError("sort must contain at least one key")
        return self

"""Allowlisted SQL identifiers.

All table and column names referenced in generated SQL must come from these mappings; no
user-provided identifier should ever be interpolated into SQL.
"""

from __future__ import annotations

from coursequest.intent.schema import SortColumn, SortDirection

COURSES_TABLE = "courses"

COURSE_COLUMNS: tuple[str, ...] = (
    "course_id",
    "course_name",
    "department",
    "level",
    "delivery_mode",
    "credits",
    "duration_weeks",
    "rating",
    "tuition_fee_inr",
    "year_offered",
)

SORT_COLUMNS: dict[SortColumn, str] = {
    SortColumn.rating: "rating",
    SortColumn.tuition_fee_inr: "tuition_fee_inr",
    SortColumn.credits: "credits",
    SortColumn.duration_weeks: "duration_weeks",
    SortColumn.course_id: "course_id",
    SortColumn.course_name: "course_name",
    SortColumn.year_offered: "year_offered",
}

SORT_DIRECTIONS: dict[SortDirection, str] = {
    SortDirection.asc: "ASC",
    SortDirection.desc: "DESC",
}

EQUALITY_COLUMNS: dict[str, str] = {
    "level": "level",
    "delivery_mode": "delivery_mode",
    "year_offered": "year_offered",
}

# Filter key -> (column, operator), in the order the builder appends them.
RANGE_COLUMNS: dict[str, tuple[str, str]] = {
    "min_fee": ("tuition_fee_inr", ">="),
    "max_fee": ("tuition_fee_inr", "<="),
    "min_rating": ("rating", ">="),
    "max_rating": ("rating", "<="),
    "min_credits": ("credits", ">="),
    "max_credits": ("credits", "<="),
    "min_duration_weeks": ("duration_weeks", ">="),
    "max_duration_weeks": ("duration_weeks", "<="),
}

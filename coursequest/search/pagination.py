"""Pagination metadata."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field


def offset_for(page: int, per_page: int) -> int:
    """Row offset of the first item on `page` (1-based)."""

    return (page - 1) * per_page


class PageMeta(BaseModel):
    """Pagination summary returned alongside a page of rows."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    total_count: int = Field(ge=0)
    page: int = Field(ge=1)
    per_page: int = Field(ge=1)
    total_pages: int = Field(ge=0)
    has_next_page: bool
    has_prev_page: bool


def paginate(page: int, per_page: int, total_count: int) -> PageMeta:
    """Compute page metadata.

    `page` is not clamped against `total_pages`: asking for a page past the end is valid and simply
    returns no rows.
    """

    total_pages = math.ceil(total_count / per_page) if total_count else 0
    return PageMeta(
        total_count=total_count,
        page=page,
        per_page=per_page,
        total_pages=total_pages,
        has_next_page=page < total_pages,
        has_prev_page=page > 1,
    )

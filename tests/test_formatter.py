"""Tests for the search response envelope."""

from __future__ import annotations

from decimal import Decimal

from coursequest.search.formatter import Course, format_search_response
from coursequest.search.pagination import paginate


def _row(course_id: str, rating: Decimal | None) -> dict:
    return {
        "course_id": course_id,
        "course_name": "Intro to Python Programming",
        "department": "Computer Science",
        "level": "UG",
        "delivery_mode": "online",
        "credits": 3,
        "duration_weeks": 8,
        "rating": rating,
        "tuition_fee_inr": 45000,
        "year_offered": 2024,
    }


def test_course_keeps_numeric_rating() -> None:
    course = Course.from_row(_row("CS101", Decimal("4.5")))

    assert course.rating == 4.5
    assert isinstance(course.rating, float)


def test_search_envelope_formats_rating_with_one_decimal() -> None:
    rows = [_row("CS101", Decimal("4.5")), _row("CS102", Decimal("4")), _row("CS103", None)]

    payload = format_search_response(rows, paginate(1, 10, 3)).to_payload()

    assert [course["rating"] for course in payload["data"]] == ["4.5", "4.0", None]
    assert payload["data"][0] == {
        "course_id": "CS101",
        "course_name": "Intro to Python Programming",
        "department": "Computer Science",
        "level": "UG",
        "delivery_mode": "online",
        "credits": 3,
        "duration_weeks": 8,
        "rating": "4.5",
        "tuition_fee_inr": 45000,
        "year_offered": 2024,
    }
    assert payload["meta"]["total_count"] == 3
    assert payload["meta"]["total_pages"] == 1


def test_empty_page() -> None:
    payload = format_search_response([], paginate(3, 10, 12)).to_payload()

    assert payload["data"] == []
    assert payload["meta"]["has_prev_page"] is True
    assert payload["meta"]["has_next_page"] is False

"""Tests for the free-text filter extractor."""

from __future__ import annotations

import pytest

from coursequest.intent.extractor import extract_filters, residue_terms
from coursequest.intent.schema import DeliveryMode, Level


def test_online_postgraduate_management_rated_above_4() -> None:
    filters = extract_filters("online postgraduate management courses rated above 4")

    assert filters == {
        "delivery_mode": DeliveryMode.online,
        "level": Level.PG,
        "department": "Management",
        "min_rating": 4.0,
    }


def test_budget_question_keeps_unrecognized_words_as_residue() -> None:
    filters = extract_filters(
        "Find beginner-friendly Python courses under 50000 INR with high ratings"
    )

    assert filters["max_fee"] == 50000
    assert filters["q"] == "beginner friendly python high ratings"
    assert "min_rating" not in filters
    assert "max_rating" not in filters
    assert "min_fee" not in filters


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("courses between 80000 and 20000", {"min_fee": 20000, "max_fee": 80000}),
        ("rating between 4.5 and 3", {"min_rating": 3.0, "max_rating": 4.5}),
        ("between 6 and 2 credits", {"min_credits": 2, "max_credits": 6}),
    ],
)
def test_reversed_ranges_are_emitted_in_order(text: str, expected: dict) -> None:
    filters = extract_filters(text)
    for key, value in expected.items():
        assert filters[key] == value


def test_categories_are_extracted_together() -> None:
    filters = extract_filters("cheap hybrid law courses above 4 stars")

    assert filters == {
        "delivery_mode": DeliveryMode.hybrid,
        "department": "Law",
        "min_rating": 4.0,
        "q": "cheap",
    }


def test_rating_of_phrase_sets_no_fee() -> None:
    filters = extract_filters("courses with a rating of above 4")

    assert filters["min_rating"] == 4.0
    assert "min_fee" not in filters
    assert "max_fee" not in filters


def test_first_family_wins_when_several_match() -> None:
    assert extract_filters("online or offline courses")["delivery_mode"] == DeliveryMode.online


def test_keywords_do_not_match_inside_longer_words() -> None:
    filters = extract_filters("management courses")

    assert "level" not in filters
    assert filters["department"] == "Management"


def test_hyphenated_vocabulary_terms_are_dropped_whole() -> None:
    filters = extract_filters("in-person design courses")

    assert filters == {"delivery_mode": DeliveryMode.offline, "department": "Design"}


def test_year_is_extracted() -> None:
    assert extract_filters("courses offered in 2024")["year_offered"] == 2024


@pytest.mark.parametrize("text", ["", "   ", "!!!", "the and of", "?" * 50])
def test_extractor_never_raises_and_returns_empty_map(text: str) -> None:
    assert extract_filters(text) == {}


def test_residue_terms_keep_input_order() -> None:
    assert residue_terms("advanced python, for data-driven teams!") == [
        "advanced",
        "python",
        "driven",
        "teams",
    ]

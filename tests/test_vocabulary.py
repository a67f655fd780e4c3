"""Tests for the keyword tables and whole-word keyword matching."""

from __future__ import annotations

from coursequest.intent.schema import DeliveryMode, Level
from coursequest.intent.vocabulary import (
    DELIVERY_MODE_KEYWORDS,
    DEPARTMENT_KEYWORDS,
    LEVEL_KEYWORDS,
    is_vocabulary_term,
    keyword_pattern,
)


def test_keyword_families_cover_every_enum_member() -> None:
    assert set(DELIVERY_MODE_KEYWORDS) == set(DeliveryMode)
    assert set(LEVEL_KEYWORDS) == set(Level)
    assert all(DEPARTMENT_KEYWORDS.values())


def test_keyword_pattern_matches_whole_words_only() -> None:
    pattern = keyword_pattern(("ma", "mba"))

    assert pattern.search("management courses") is None
    assert pattern.search("an mba programme") is not None
    assert pattern.search("ma in history") is not None


def test_keyword_pattern_treats_hyphens_as_word_characters() -> None:
    pattern = keyword_pattern(("campus", "on-campus"))

    assert pattern.search("on-campus classes").group(0) == "on-campus"
    assert keyword_pattern(("person",)).search("in-person") is None


def test_vocabulary_terms_include_interpreted_words() -> None:
    assert is_vocabulary_term("inr")
    assert is_vocabulary_term("under")
    assert is_vocabulary_term("online")
    assert is_vocabulary_term("management")
    assert not is_vocabulary_term("python")
    assert not is_vocabulary_term("ratings")

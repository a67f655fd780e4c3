"""Tests for the pattern rule table and its first-match-per-category evaluation."""

from __future__ import annotations

import re

from coursequest.intent.rules import (
    CREDIT_RULES,
    FEE_RULES,
    RATING_RULES,
    YEAR_RULES,
    PatternRule,
    RuleCategory,
    apply_categories,
    first_match,
)


def _demo_category() -> RuleCategory:
    return RuleCategory(
        name="demo",
        rules=(
            PatternRule(pattern=re.compile(r"alpha (\d)"), handler=lambda m: {"x": int(m.group(1))}),
            PatternRule(pattern=re.compile(r"alpha"), handler=lambda _m: {"x": 0}),
        ),
    )


def test_first_matching_rule_wins() -> None:
    category = _demo_category()

    assert first_match(category, "alpha 7") == {"x": 7}
    assert first_match(category, "just alpha") == {"x": 0}
    assert first_match(category, "beta") == {}


def test_categories_are_independent() -> None:
    other = RuleCategory(
        name="other",
        rules=(PatternRule(pattern=re.compile(r"beta"), handler=lambda _m: {"y": True}),),
    )

    assert apply_categories((_demo_category(), other), "alpha 3 and beta") == {"x": 3, "y": True}
    assert apply_categories((_demo_category(), other), "beta only") == {"y": True}


def test_fee_upper_bound_with_currency_and_separators() -> None:
    assert first_match(FEE_RULES, "under ₹1,00,000") == {"max_fee": 100000}
    assert first_match(FEE_RULES, "below rs. 45,000") == {"max_fee": 45000}
    assert first_match(FEE_RULES, "max 5000 fee") == {"max_fee": 5000}


def test_fee_lower_bound_and_exact() -> None:
    assert first_match(FEE_RULES, "more than 20000") == {"min_fee": 20000}
    assert first_match(FEE_RULES, "priced at 20000") == {"min_fee": 20000, "max_fee": 20000}


def test_fee_between_is_ordered() -> None:
    assert first_match(FEE_RULES, "between 80000 and 20000") == {"min_fee": 20000, "max_fee": 80000}
    assert first_match(FEE_RULES, "from inr 10000 to 30000") == {"min_fee": 10000, "max_fee": 30000}


def test_fee_rules_ignore_numbers_of_other_dimensions() -> None:
    assert first_match(FEE_RULES, "rated above 4") == {}
    assert first_match(FEE_RULES, "rating above 4") == {}
    assert first_match(FEE_RULES, "rating of above 4") == {}
    assert first_match(FEE_RULES, "stars of at least 4") == {}
    assert first_match(FEE_RULES, "rating between 3 and 4") == {}
    assert first_match(FEE_RULES, "above 4.5 stars") == {}
    assert first_match(FEE_RULES, "at least 4 credits") == {}
    assert first_match(FEE_RULES, "under 12 weeks") == {}


def test_rating_rules() -> None:
    assert first_match(RATING_RULES, "rated above 4") == {"min_rating": 4.0}
    assert first_match(RATING_RULES, "rating below 3.5") == {"max_rating": 3.5}
    assert first_match(RATING_RULES, "rating between 4.5 and 3") == {
        "min_rating": 3.0,
        "max_rating": 4.5,
    }
    assert first_match(RATING_RULES, "courses above 4.5 stars") == {"min_rating": 4.5}


def test_qualitative_rating_words_are_not_interpreted() -> None:
    assert first_match(RATING_RULES, "with high ratings") == {}


def test_credit_rules_prefer_specific_shapes() -> None:
    assert first_match(CREDIT_RULES, "between 6 and 2 credits") == {
        "min_credits": 2,
        "max_credits": 6,
    }
    assert first_match(CREDIT_RULES, "at least 4 credits") == {"min_credits": 4}
    assert first_match(CREDIT_RULES, "up to 3 credits") == {"max_credits": 3}
    assert first_match(CREDIT_RULES, "3 credit courses") == {"min_credits": 3, "max_credits": 3}


def test_year_rule() -> None:
    assert first_match(YEAR_RULES, "offered in 2024") == {"year_offered": 2024}
    assert first_match(YEAR_RULES, "year 1999") == {"year_offered": 1999}
    assert first_match(YEAR_RULES, "in 3000") == {}

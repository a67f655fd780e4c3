"""Pattern rule tables for free-text extraction.

Every category is a static, ordered list of `(pattern, handler)` rules evaluated by one generic
routine: the first rule whose pattern matches produces that category's filters and no later rule
in the category is tried. Categories are independent of each other.

Handlers receive the regex match and return a partial raw filter map. They never raise; values are
range-checked later by the validator.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from coursequest.intent.vocabulary import (
    DELIVERY_MODE_KEYWORDS,
    DEPARTMENT_KEYWORDS,
    LEVEL_KEYWORDS,
    keyword_pattern,
)

RawFilters = dict[str, Any]
Handler = Callable[[re.Match[str]], RawFilters]


@dataclass(frozen=True)
class PatternRule:
    """One surface pattern and the handler that turns its match into filters."""

    pattern: re.Pattern[str]
    handler: Handler


@dataclass(frozen=True)
class RuleCategory:
    """An ordered family of rules for one search dimension."""

    name: str
    rules: tuple[PatternRule, ...]


def first_match(category: RuleCategory, text: str) -> RawFilters:
    """Apply the first matching rule of a category; return `{}` when nothing matches."""

    for rule in category.rules:
        match = rule.pattern.search(text)
        if match:
            return rule.handler(match)
    return {}


def apply_categories(categories: Iterable[RuleCategory], text: str) -> RawFilters:
    """Evaluate each category independently and merge their filters in category order."""

    filters: RawFilters = {}
    for category in categories:
        filters.update(first_match(category, text))
    return filters


def _parse_amount(raw: str) -> int:
    return int(raw.replace(",", ""))


def _ordered(low: Any, high: Any) -> tuple[Any, Any]:
    return (low, high) if low <= high else (high, low)


def _constant(key: str, value: Any) -> Handler:
    return lambda _match: {key: value}


def _keyword_category(name: str, key: str, families: dict[Any, tuple[str, ...]]) -> RuleCategory:
    return RuleCategory(
        name=name,
        rules=tuple(
            PatternRule(pattern=keyword_pattern(keywords), handler=_constant(key, value))
            for value, keywords in families.items()
        ),
    )


# --- Fee ---------------------------------------------------------------------------------------

_CURRENCY = r"(?:rs\.?|inr|₹)?"
_AMOUNT = r"(\d+(?:,\d+)*)"

# An amount must not continue as a longer number and must not belong to another dimension
# ("4 stars", "3 credits", "12 weeks").
_AMOUNT_END = r"(?!\d)(?!,\d)(?!\.\d)(?!\s*(?:stars?|ratings?|rated|credits?|weeks?)\b)"

# A comparator directly preceded by a rating word (optionally followed by "of") belongs to the
# rating category.
_RATING_PREFIXES: tuple[str, ...] = ("rating", "ratings", "rated", "star", "stars")
_NOT_AFTER_RATING_WORD = "".join(rf"(?<!{word} )(?<!{word} of )" for word in _RATING_PREFIXES)


def _fee_rule(comparators: str, handler: Handler) -> PatternRule:
    return PatternRule(
        pattern=re.compile(
            rf"{_NOT_AFTER_RATING_WORD}\b(?:{comparators})\s*{_CURRENCY}\s*{_AMOUNT}{_AMOUNT_END}"
        ),
        handler=handler,
    )


def _fee_between(match: re.Match[str]) -> RawFilters:
    low, high = _ordered(_parse_amount(match.group(1)), _parse_amount(match.group(2)))
    return {"min_fee": low, "max_fee": high}


def _fee_exact(match: re.Match[str]) -> RawFilters:
    fee = _parse_amount(match.group(1))
    return {"min_fee": fee, "max_fee": fee}


FEE_RULES = RuleCategory(
    name="fee",
    rules=(
        _fee_rule(
            r"under|below|less than|cheaper than|maximum|max|up to",
            lambda m: {"max_fee": _parse_amount(m.group(1))},
        ),
        _fee_rule(
            r"above|over|more than|greater than|minimum|min|at least",
            lambda m: {"min_fee": _parse_amount(m.group(1))},
        ),
        PatternRule(
            pattern=re.compile(
                rf"{_NOT_AFTER_RATING_WORD}\b(?:between|from)"
                rf"\s*{_CURRENCY}\s*{_AMOUNT}{_AMOUNT_END}\s*(?:and|to|-)"
                rf"\s*{_CURRENCY}\s*{_AMOUNT}{_AMOUNT_END}"
            ),
            handler=_fee_between,
        ),
        _fee_rule(r"exactly|costs?|fees?|priced? at", _fee_exact),
    ),
)

# --- Rating ------------------------------------------------------------------------------------

_RATING_WORD = r"\b(?:ratings?|rated|stars?)(?:\s+of)?"
_SCORE = r"(\d+(?:\.\d+)?)"


def _rating_between(match: re.Match[str]) -> RawFilters:
    low, high = _ordered(float(match.group(1)), float(match.group(2)))
    return {"min_rating": low, "max_rating": high}


RATING_RULES = RuleCategory(
    name="rating",
    rules=(
        PatternRule(
            pattern=re.compile(
                rf"{_RATING_WORD}\s*(?:above|over|more than|greater than|at least)\s*{_SCORE}"
            ),
            handler=lambda m: {"min_rating": float(m.group(1))},
        ),
        PatternRule(
            pattern=re.compile(
                rf"{_RATING_WORD}\s*(?:below|under|less than|maximum|max|at most)\s*{_SCORE}"
            ),
            handler=lambda m: {"max_rating": float(m.group(1))},
        ),
        PatternRule(
            pattern=re.compile(
                rf"{_RATING_WORD}\s*(?:between|from)\s*{_SCORE}\s*(?:and|to|-)\s*{_SCORE}"
            ),
            handler=_rating_between,
        ),
        PatternRule(
            pattern=re.compile(rf"{_SCORE}\s*(?:stars?|rating|rated)\b"),
            handler=lambda m: {"min_rating": float(m.group(1))},
        ),
    ),
)

# --- Credits -----------------------------------------------------------------------------------


def _credits_between(match: re.Match[str]) -> RawFilters:
    low, high = _ordered(int(match.group(1)), int(match.group(2)))
    return {"min_credits": low, "max_credits": high}


def _credits_exact(match: re.Match[str]) -> RawFilters:
    credits = int(match.group(1))
    return {"min_credits": credits, "max_credits": credits}


# Specific shapes come before the bare "N credits" shape, which is a suffix of all of them.
CREDIT_RULES = RuleCategory(
    name="credits",
    rules=(
        PatternRule(
            pattern=re.compile(r"\b(?:between|from)\s*(\d+)\s*(?:and|to|-)\s*(\d+)\s*credits?\b"),
            handler=_credits_between,
        ),
        PatternRule(
            pattern=re.compile(r"\b(?:at least|minimum|min)\s*(\d+)\s*credits?\b"),
            handler=lambda m: {"min_credits": int(m.group(1))},
        ),
        PatternRule(
            pattern=re.compile(r"\b(?:at most|maximum|max|up to)\s*(\d+)\s*credits?\b"),
            handler=lambda m: {"max_credits": int(m.group(1))},
        ),
        PatternRule(
            pattern=re.compile(r"\b(\d+)\s*credits?\b"),
            handler=_credits_exact,
        ),
    ),
)

# --- Year --------------------------------------------------------------------------------------

YEAR_RULES = RuleCategory(
    name="year",
    rules=(
        PatternRule(
            pattern=re.compile(r"\b(?:year|in)\s*((?:19|20)\d{2})\b"),
            handler=lambda m: {"year_offered": int(m.group(1))},
        ),
    ),
)

# --- Keyword families --------------------------------------------------------------------------

DELIVERY_MODE_RULES = _keyword_category("delivery_mode", "delivery_mode", DELIVERY_MODE_KEYWORDS)
LEVEL_RULES = _keyword_category("level", "level", LEVEL_KEYWORDS)
DEPARTMENT_RULES = _keyword_category("department", "department", DEPARTMENT_KEYWORDS)

RULE_TABLE: tuple[RuleCategory, ...] = (
    DELIVERY_MODE_RULES,
    LEVEL_RULES,
    FEE_RULES,
    RATING_RULES,
    CREDIT_RULES,
    DEPARTMENT_RULES,
    YEAR_RULES,
)

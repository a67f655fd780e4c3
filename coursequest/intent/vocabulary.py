"""English vocabulary tables for course questions.

These mappings are data, not parsing logic: the extractor compiles them into keyword rules and the
residue filter uses them to drop already-interpreted words. New departments or synonyms are added
here without touching the extractor.

Family order matters: when a question mentions keywords of several families, the first family
listed wins.
"""

from __future__ import annotations

import re

from coursequest.intent.schema import DeliveryMode, Level

DELIVERY_MODE_KEYWORDS: dict[DeliveryMode, tuple[str, ...]] = {
    DeliveryMode.online: (
        "online",
        "remote",
        "virtual",
        "digital",
        "web-based",
        "internet",
        "distance",
    ),
    DeliveryMode.offline: (
        "offline",
        "physical",
        "in-person",
        "campus",
        "classroom",
        "face-to-face",
        "onsite",
        "on-campus",
    ),
    DeliveryMode.hybrid: ("hybrid", "blended", "mixed", "combined", "flexible"),
}

LEVEL_KEYWORDS: dict[Level, tuple[str, ...]] = {
    Level.UG: (
        "undergraduate",
        "ug",
        "bachelor",
        "bachelors",
        "bachelor's",
        "btech",
        "bsc",
        "ba",
        "bcom",
        "undergrad",
        "under-graduate",
    ),
    Level.PG: (
        "postgraduate",
        "pg",
        "graduate",
        "master",
        "masters",
        "master's",
        "mtech",
        "msc",
        "ma",
        "mcom",
        "mba",
        "post-graduate",
        "postgrad",
    ),
}

DEPARTMENT_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Computer Science": (
        "computer",
        "programming",
        "software",
        "coding",
        "algorithm",
        "algorithms",
        "data",
        "ai",
        "ml",
        "tech",
        "cs",
    ),
    "Management": ("management", "business", "mba", "leadership", "strategy", "operations", "mgt"),
    "Electrical Engineering": ("electrical", "electronics", "circuit", "power", "signal", "ee", "eee"),
    "Arts": ("arts", "literature", "philosophy", "history", "creative", "humanities"),
    "Design": ("design", "graphic", "ui", "ux", "visual", "art"),
    "Law": ("law", "legal", "constitutional", "criminal", "commercial", "judiciary"),
    "Medicine": ("medicine", "medical", "health", "anatomy", "clinical", "doctor", "healthcare"),
    "Commerce": ("commerce", "finance", "accounting", "economics", "trade"),
}

# Words consumed by the numeric constraint patterns (fee, rating, credits, year).
CONSTRAINT_TERMS: frozenset[str] = frozenset(
    {
        "rating",
        "rated",
        "star",
        "stars",
        "credit",
        "credits",
        "fee",
        "fees",
        "cost",
        "costs",
        "price",
        "priced",
        "year",
    }
)

COMPARATOR_TERMS: frozenset[str] = frozenset(
    {
        "under",
        "below",
        "less",
        "cheaper",
        "than",
        "maximum",
        "max",
        "above",
        "over",
        "more",
        "greater",
        "minimum",
        "min",
        "least",
        "most",
        "between",
        "from",
        "exactly",
    }
)

CURRENCY_TERMS: frozenset[str] = frozenset({"inr", "rs", "rupees", "rupee"})

STOP_WORDS: frozenset[str] = frozenset(
    {
        "i",
        "want",
        "to",
        "find",
        "search",
        "for",
        "show",
        "me",
        "get",
        "list",
        "of",
        "courses",
        "course",
        "in",
        "with",
        "that",
        "are",
        "is",
        "and",
        "or",
        "the",
        "a",
        "an",
        "some",
        "all",
        "any",
        "can",
        "you",
        "please",
        "help",
    }
)


def _all_keywords() -> frozenset[str]:
    families = (DELIVERY_MODE_KEYWORDS, LEVEL_KEYWORDS, DEPARTMENT_KEYWORDS)
    return frozenset(kw for table in families for keywords in table.values() for kw in keywords)


VOCABULARY_TERMS: frozenset[str] = (
    _all_keywords() | CONSTRAINT_TERMS | COMPARATOR_TERMS | CURRENCY_TERMS
)


def keyword_pattern(keywords: tuple[str, ...]) -> re.Pattern[str]:
    """Compile a whole-word alternation for a keyword family.

    Longer keywords are tried first so that `on-campus` is preferred over `campus`. Hyphens count
    as part of a word, so `in-person` never matches inside a longer hyphenated token.
    """

    parts = sorted(keywords, key=lambda k: (-len(k), k))
    alternation = "|".join(re.escape(k) for k in parts)
    return re.compile(rf"(?<![\w-])(?:{alternation})(?![\w-])")


def is_vocabulary_term(token: str) -> bool:
    """Whether a residue token was already interpreted by a vocabulary table."""

    return token in VOCABULARY_TERMS

"""Text normalization for deterministic intent extraction."""

from __future__ import annotations

import re

_MULTISPACE_RE = re.compile(r"\s+")
_TOKEN_EDGE_RE = re.compile(r"^[^\w]+|[^\w]+$")
_TOKEN_INNER_RE = re.compile(r"[^\w'-]+")
_NUMERIC_TOKEN_RE = re.compile(r"^\d+(?:[.,]\d+)*$")


def normalize_text(text: str) -> str:
    """Normalize user text for pattern matching.

    Normalization is intentionally conservative:
        - Lowercase.
        - Normalize unicode dashes and quotes to ASCII.
        - Collapse whitespace.

    Punctuation is kept because the numeric patterns need it (`₹50,000`, `4.5`, `rs.`).
    """

    value = (text or "").strip().lower()

    value = value.replace("—", "-").replace("–", "-")
    value = value.replace("’", "'").replace("‘", "'")

    return _MULTISPACE_RE.sub(" ", value).strip()


def clean_token(token: str) -> str:
    """Strip surrounding punctuation and currency symbols from a whitespace token.

    Inner hyphens and apostrophes survive (`beginner-friendly`, `bachelor's`); any other inner
    punctuation is dropped, so `50,000` becomes `50000`.
    """

    value = _TOKEN_EDGE_RE.sub("", token)
    value = _TOKEN_INNER_RE.sub("", value)
    return value.strip("-'")


def tokenize(text: str) -> list[str]:
    """Split normalized text on whitespace into cleaned, non-empty tokens."""

    tokens = (clean_token(raw) for raw in text.split())
    return [t for t in tokens if t]


def is_numeric_token(token: str) -> bool:
    """Whether the token is a number (digits with optional `.`/`,` groups)."""

    return bool(_NUMERIC_TOKEN_RE.fullmatch(token))

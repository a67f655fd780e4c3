"""Rules-based English course-question extractor.

The extractor is deterministic and total:
    - it only recognizes the patterns listed in `coursequest.intent.rules`,
    - an unmatched category leaves its key absent instead of failing,
    - leftover meaningful words become the free-text residue `q`.

The output is a raw filter map; range and enum checks happen in the validator.
"""

from __future__ import annotations

from typing import Any

from coursequest.intent.normalize import is_numeric_token, normalize_text, tokenize
from coursequest.intent.rules import RULE_TABLE, apply_categories
from coursequest.intent.vocabulary import STOP_WORDS, is_vocabulary_term

_MIN_RESIDUE_TOKEN_LENGTH = 3


def _keep_residue_word(word: str) -> bool:
    if word in STOP_WORDS:
        return False
    if is_numeric_token(word):
        return False
    if len(word) < _MIN_RESIDUE_TOKEN_LENGTH:
        return False
    return not is_vocabulary_term(word)


def residue_terms(text: str) -> list[str]:
    """Return the words of `text` that no vocabulary table or stop list accounts for.

    Hyphenated tokens that are not themselves vocabulary terms (`beginner-friendly`) are split and
    each part is filtered on its own; vocabulary terms such as `in-person` are dropped whole.
    """

    terms: list[str] = []
    for token in tokenize(normalize_text(text)):
        if token in STOP_WORDS or is_vocabulary_term(token):
            continue
        parts = token.split("-") if "-" in token else [token]
        terms.extend(part for part in parts if part and _keep_residue_word(part))
    return terms


def extract_filters(text: str) -> dict[str, Any]:
    """Extract a raw filter map from a free-text question.

    Never raises: empty or unrecognized text yields `{}`.
    """

    normalized = normalize_text(text)
    if not normalized:
        return {}

    filters = apply_categories(RULE_TABLE, normalized)

    terms = residue_terms(normalized)
    if terms:
        filters["q"] = " ".join(terms)

    return filters

"""Text matching helpers shared by the skill and role classifiers."""

import re
from functools import lru_cache
from typing import Iterable, List


@lru_cache(maxsize=2048)
def _term_pattern(term: str) -> "re.Pattern[str]":
    # Lookarounds instead of \b so terms like "c++" or ".net" still bound correctly.
    # Hyphens join words: "go" is not a term inside "go-to-market".
    return re.compile(r"(?<![\w-])" + re.escape(term) + r"(?![\w-])")


def contains_term(text: str, term: str) -> bool:
    """Return True when ``term`` occurs in ``text`` as a whole word or phrase."""
    if not text or not term:
        return False
    return _term_pattern(term).search(text) is not None


def count_terms(text: str, terms: Iterable[str]) -> int:
    """Count how many of ``terms`` occur in ``text`` as whole words."""
    return sum(1 for term in terms if contains_term(text, term))


def matching_terms(text: str, terms: Iterable[str]) -> List[str]:
    """Return the substrings from ``terms`` found anywhere in ``text``, in order."""
    return [term for term in terms if term in text]


def normalize_whitespace(value: str) -> str:
    return re.sub(r"\s+", " ", (value or "").lower().strip())


def fold_plural(value: str) -> str:
    """Drop a trailing "s" from each word of four or more letters."""
    return re.sub(r"(?<=\w\w\w)s\b", "", value or "")

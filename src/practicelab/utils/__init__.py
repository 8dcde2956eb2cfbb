"""Shared helpers for the practice-lab package."""

from .text import contains_term, count_terms, fold_plural, matching_terms, normalize_whitespace

__all__ = ["contains_term", "count_terms", "fold_plural", "matching_terms", "normalize_whitespace"]

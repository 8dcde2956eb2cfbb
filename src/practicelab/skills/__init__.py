"""Skill taxonomy and skill extraction."""

from .extraction import extract_skills_from_description, extract_skills_from_text
from .taxonomy import (
    get_default_skills_for_round,
    get_skill_categories,
    get_skill_relevance_score,
    get_skills_for_round,
)

__all__ = [
    "extract_skills_from_description",
    "extract_skills_from_text",
    "get_default_skills_for_round",
    "get_skill_categories",
    "get_skill_relevance_score",
    "get_skills_for_round",
]

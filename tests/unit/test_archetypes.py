"""Tests for role archetype resolution."""

import pytest

from practicelab.db.repository import ExerciseDatabase
from practicelab.db.seed import seed_defaults
from practicelab.models.db_models import RoleArchetype
from practicelab.routing.archetypes import (
    ROLE_ARCHETYPES,
    get_role_family,
    match_role_archetype,
    resolve_role_archetype,
)

DATA_ANALYST_JD = (
    "We need strong data analyst skills and experience building "
    "business intelligence dashboards."
)


def test_title_keyword_match():
    assert match_role_archetype("Senior Backend Engineer") == ("core_software_engineer", "keyword")
    assert match_role_archetype("Product Manager") == ("product_manager", "keyword")


def test_short_patterns_only_match_whole_words():
    # "pm" must not match inside "development"
    assert match_role_archetype("Development Lead") is None


def test_jd_inference_needs_two_hits():
    assert match_role_archetype("Team Member", DATA_ANALYST_JD) == ("data_analyst", "jd_inference")
    assert match_role_archetype("Team Member", "Some business intelligence work") is None


def test_title_match_beats_jd():
    assert match_role_archetype("Data Engineer", DATA_ANALYST_JD) == ("data_engineer", "keyword")


def test_role_family_lookup():
    assert get_role_family("consulting_general") == "business"
    assert get_role_family(None) is None
    assert get_role_family("unknown") is None


@pytest.mark.asyncio
async def test_resolve_without_catalogue():
    resolution = await resolve_role_archetype("Senior Backend Engineer")
    assert resolution.role_archetype_id == "core_software_engineer"
    assert resolution.role_archetype_name == ROLE_ARCHETYPES["core_software_engineer"].name
    assert resolution.role_family == "tech"
    assert resolution.confidence == "high"
    assert resolution.primary_skill_dimensions is None


@pytest.mark.asyncio
async def test_resolve_jd_inference_is_medium_confidence():
    resolution = await resolve_role_archetype("Team Member", DATA_ANALYST_JD)
    assert resolution.match_type == "jd_inference"
    assert resolution.confidence == "medium"


@pytest.mark.asyncio
async def test_resolve_no_match():
    resolution = await resolve_role_archetype("Chief Happiness Officer")
    assert resolution.role_archetype_id is None
    assert resolution.confidence == "low"
    assert resolution.match_type == "none"


@pytest.mark.asyncio
async def test_resolve_uses_catalogue_dimensions(test_db_path):
    db = ExerciseDatabase(test_db_path)
    await seed_defaults(db)

    resolution = await resolve_role_archetype("Product Manager", catalogue=db)
    assert resolution.role_archetype_id == "product_manager"
    assert "product_thinking" in resolution.primary_skill_dimensions


@pytest.mark.asyncio
async def test_resolve_ignores_inactive_archetype(test_db_path):
    db = ExerciseDatabase(test_db_path)
    await seed_defaults(db)
    await db.upsert_role_archetype(
        RoleArchetype(id="product_manager", name="Product Manager", role_family="product", is_active=False)
    )

    resolution = await resolve_role_archetype("Product Manager", catalogue=db)
    assert resolution.role_archetype_id is None
    assert resolution.match_type == "none"

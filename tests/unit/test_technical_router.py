"""Tests for technical interview routing and exercise selection."""

import random
import sqlite3
from unittest.mock import AsyncMock, MagicMock

import pytest

from practicelab.db.repository import DatabaseError, ExerciseDatabase
from practicelab.db.seed import seed_defaults
from practicelab.models.db_models import RoleKit
from practicelab.models.routing_models import InterviewPhase, RoutingRequest
from practicelab.routing.technical_router import (
    TechnicalInterviewRouter,
    analyze_skill_signals,
    classify_phase,
    enrich_phases_with_exercises,
    fetch_exercise_for_routing,
    get_exercise_type_from_archetype,
    get_exercise_type_from_category,
    route_and_select_exercise,
    route_technical_interview,
)


async def _seeded_router(db_path):
    db = ExerciseDatabase(db_path)
    await seed_defaults(db)
    kits = {kit.name: kit.id for kit in await db.list_role_kits()}
    return TechnicalInterviewRouter(db, rng=random.Random(0)), kits


def test_analyze_skill_signals_counts_substrings():
    analysis = analyze_skill_signals(["Python", "Docker", "Product Strategy"])
    assert analysis["matched_coding"] == ["python", "docker"]
    assert analysis["matched_case_study"] == ["product strategy", "strategy"]
    assert analysis["coding_score"] == 2
    assert analysis["case_study_score"] == 2


def test_exercise_type_from_archetype():
    assert get_exercise_type_from_archetype("ml_engineer") == ("coding", "high")
    assert get_exercise_type_from_archetype("finance_strategy") == ("case_study", "high")
    assert get_exercise_type_from_archetype("data_scientist") == ("hybrid", "medium")
    assert get_exercise_type_from_archetype("unknown") == ("hybrid", "low")
    assert get_exercise_type_from_archetype(None) == ("hybrid", "low")


def test_exercise_type_from_category():
    assert get_exercise_type_from_category("data") == ("coding", "medium")
    assert get_exercise_type_from_category("sales") == ("case_study", "medium")
    assert get_exercise_type_from_category("design") == ("hybrid", "low")


def test_classify_phase():
    assert classify_phase("Coding Round") == (True, False)
    assert classify_phase("Product Sense", ["Run a case study"]) == (False, True)
    assert classify_phase("Culture chat", ["Get to know you"]) == (False, False)
    assert classify_phase("Technical case study") == (True, True)


@pytest.mark.asyncio
async def test_interview_mode_wins():
    routing = await route_technical_interview(
        RoutingRequest(interview_mode="coding_technical", role_archetype_id="product_manager")
    )
    assert routing.exercise_type == "coding"
    assert routing.confidence == "high"
    assert routing.matched_signals == ["interview_mode:coding_technical"]
    assert routing.fallback_type is None


@pytest.mark.asyncio
async def test_discussion_mode_does_not_decide():
    routing = await route_technical_interview(
        RoutingRequest(interview_mode="behavioral", role_archetype_id="product_manager")
    )
    assert routing.exercise_type == "case_study"
    assert routing.matched_signals == ["archetype:product_manager"]


@pytest.mark.asyncio
async def test_hybrid_archetype_leaves_confidence_low():
    routing = await route_technical_interview(RoutingRequest(role_archetype_id="data_analyst"))
    assert routing.exercise_type == "hybrid"
    assert routing.confidence == "low"
    assert routing.fallback_type == "coding"
    assert routing.matched_signals == []
    assert routing.rationale.startswith("No strong signals detected")


@pytest.mark.asyncio
async def test_role_category_routing():
    routing = await route_technical_interview(RoutingRequest(role_category="tech"))
    assert routing.exercise_type == "coding"
    assert routing.confidence == "medium"
    assert routing.matched_signals == ["category:tech"]


@pytest.mark.asyncio
async def test_strong_coding_skills_give_high_confidence():
    routing = await route_technical_interview(
        RoutingRequest(skills=["Python", "Docker", "Kubernetes", "AWS", "SQL"])
    )
    assert routing.exercise_type == "coding"
    assert routing.confidence == "high"
    assert len(routing.matched_signals) == 5
    assert all(signal.startswith("skill:") for signal in routing.matched_signals)


@pytest.mark.asyncio
async def test_case_skills_give_medium_confidence():
    routing = await route_technical_interview(
        RoutingRequest(skills=["Product Strategy", "Roadmap", "Stakeholder Management"])
    )
    assert routing.exercise_type == "case_study"
    assert routing.confidence == "medium"


@pytest.mark.asyncio
async def test_balanced_skills_stay_hybrid():
    routing = await route_technical_interview(RoutingRequest(skills=["Python", "Docker", "Product Strategy"]))
    assert routing.exercise_type == "hybrid"


@pytest.mark.asyncio
async def test_skills_extracted_from_jd_when_missing():
    jd = "Backend role: Python, Docker, Kubernetes, AWS, REST API and SQL every day."
    routing = await route_technical_interview(RoutingRequest(jd_text=jd))
    assert routing.exercise_type == "coding"


@pytest.mark.asyncio
async def test_role_kit_category_is_last_resort(test_db_path):
    router, kits = await _seeded_router(test_db_path)

    routing = await router.route(RoutingRequest(role_kit_id=kits["Product Manager"]))
    assert routing.exercise_type == "case_study"
    assert routing.confidence == "medium"
    assert routing.matched_signals == ["roleKit:Product Manager"]


@pytest.mark.asyncio
async def test_role_kit_lookup_failure_is_ignored():
    catalogue = MagicMock()
    catalogue.get_role_kit = AsyncMock(side_effect=DatabaseError("boom"))
    router = TechnicalInterviewRouter(catalogue)

    routing = await router.route(RoutingRequest(role_kit_id=1))
    assert routing.exercise_type == "hybrid"
    assert routing.confidence == "low"


@pytest.mark.asyncio
async def test_select_prefers_seniority_difficulty(test_db_path):
    router, kits = await _seeded_router(test_db_path)
    request = RoutingRequest(
        interview_mode="coding_technical",
        role_kit_id=kits["Backend Engineer"],
        seniority="senior",
    )

    routed = await router.route_and_select(request)
    assert routed.challenge.title == "LRU cache"
    assert routed.challenge.difficulty == "hard"
    assert routed.challenge.challenge_type == "coding"
    assert routed.challenge.estimated_duration == 15
    assert routed.challenge.challenge_id == f"coding-{routed.challenge.exercise_id}"
    assert routed.routing.suggested_exercise.type == "coding_exercise"
    assert routed.routing.suggested_exercise.name == "LRU cache"


@pytest.mark.asyncio
async def test_select_falls_back_to_any_difficulty(test_db_path):
    router, kits = await _seeded_router(test_db_path)
    request = RoutingRequest(
        interview_mode="case_problem_solving",
        role_kit_id=kits["Management Consultant"],
        seniority="senior",
    )

    routed = await router.route_and_select(request)
    assert routed.challenge.title == "Coffee chain market entry"
    assert routed.challenge.difficulty == "easy"
    assert routed.challenge.case_template_id is not None
    assert routed.challenge.estimated_duration == 20
    assert routed.routing.suggested_exercise.type == "case_template"


@pytest.mark.asyncio
async def test_hybrid_routing_selects_coding(test_db_path):
    router, _ = await _seeded_router(test_db_path)

    routed = await router.route_and_select(RoutingRequest())
    assert routed.routing.exercise_type == "hybrid"
    assert routed.challenge.challenge_type == "coding"
    assert routed.challenge.title == "Rate limiter"


@pytest.mark.asyncio
async def test_no_exercise_without_rows(test_db_path):
    router, kits = await _seeded_router(test_db_path)
    request = RoutingRequest(interview_mode="coding_technical", role_kit_id=kits["Product Manager"])

    routed = await router.route_and_select(request)
    assert routed.challenge is None
    assert routed.routing.suggested_exercise is None


@pytest.mark.asyncio
async def test_no_exercise_without_catalogue():
    routed = await route_and_select_exercise(RoutingRequest(interview_mode="coding_technical"))
    assert routed.routing.exercise_type == "coding"
    assert routed.challenge is None


@pytest.mark.asyncio
async def test_catalogue_errors_mean_no_exercise():
    catalogue = MagicMock()
    catalogue.list_coding_exercises = AsyncMock(side_effect=DatabaseError("boom"))
    router = TechnicalInterviewRouter(catalogue)

    routed = await router.route_and_select(RoutingRequest(interview_mode="coding_technical"))
    assert routed.challenge is None


@pytest.mark.asyncio
async def test_enrich_phases(test_db_path):
    router, _ = await _seeded_router(test_db_path)
    intro = InterviewPhase(name="Introduction", objectives=["Walk through your background"])
    phases = [
        intro,
        InterviewPhase(name="Coding Round", objectives=["Solve a DSA problem"]),
        InterviewPhase(name="Product Sense Case Study"),
    ]

    enriched = await router.enrich_phases(phases, RoutingRequest())

    assert enriched[0] == intro
    assert enriched[1].phase_type == "coding"
    assert enriched[1].routing.matched_signals == ["interview_mode:coding_technical"]
    assert enriched[2].phase_type == "case_study"
    assert enriched[2].challenge.difficulty == "medium"


@pytest.mark.asyncio
async def test_module_helpers_share_router_behaviour(test_db_path):
    db = ExerciseDatabase(test_db_path)
    await seed_defaults(db)
    request = RoutingRequest(interview_mode="case_problem_solving", seniority="senior")

    routing = await route_technical_interview(request, db)
    challenge = await fetch_exercise_for_routing(routing, request, db)
    assert challenge.title == "Launch a subscription tier"

    phases = await enrich_phases_with_exercises([InterviewPhase(name="Estimation case")], request, db)
    assert phases[0].challenge.title == "Launch a subscription tier"


@pytest.mark.asyncio
async def test_phase_that_is_technical_and_case_keeps_request_mode():
    phase = InterviewPhase(name="Technical case study")
    request = RoutingRequest(interview_mode="behavioral", role_archetype_id="product_manager")

    enriched = await enrich_phases_with_exercises([phase], request)

    assert enriched[0].routing.exercise_type == "case_study"
    assert enriched[0].routing.matched_signals == ["archetype:product_manager"]
    assert enriched[0].challenge is None


async def _router_with_raw_exercises(db_path, rows):
    db = ExerciseDatabase(db_path)
    await db.init_db()
    kit_id = await db.insert_role_kit(RoleKit(name="Legacy kit"))

    # Rows written by another tool, bypassing insert-time cleanup
    conn = sqlite3.connect(db_path)
    conn.executemany(
        "INSERT INTO coding_exercises (role_kit_id, name, difficulty) VALUES (?, ?, ?)",
        [(kit_id, name, difficulty) for name, difficulty in rows],
    )
    conn.commit()
    conn.close()
    return TechnicalInterviewRouter(db, rng=random.Random(0)), kit_id


@pytest.mark.asyncio
async def test_stored_difficulty_is_matched_case_insensitively(test_db_path):
    router, kit_id = await _router_with_raw_exercises(
        test_db_path, [("Warmup", "easy"), ("Graph search", " Hard ")]
    )
    request = RoutingRequest(interview_mode="coding_technical", role_kit_id=kit_id, seniority="senior")

    routed = await router.route_and_select(request)
    assert routed.challenge.title == "Graph search"
    assert routed.challenge.difficulty == "hard"


@pytest.mark.asyncio
async def test_unknown_stored_difficulty_reads_as_medium(test_db_path):
    router, kit_id = await _router_with_raw_exercises(test_db_path, [("Compiler", "Extreme")])
    request = RoutingRequest(interview_mode="coding_technical", role_kit_id=kit_id, seniority="entry")

    routed = await router.route_and_select(request)
    assert routed.challenge.title == "Compiler"
    assert routed.challenge.difficulty == "medium"

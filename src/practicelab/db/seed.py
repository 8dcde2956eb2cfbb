"""Seed the exercise catalogue with default archetypes, role kits and exercises."""

import asyncio
import sys
from dataclasses import replace
from typing import Dict, List, Optional

from dotenv import load_dotenv

from ..logging_config import setup_logging
from ..models.db_models import CaseTemplate, CodingExercise, RoleArchetype, RoleKit
from ..routing.archetypes import ROLE_ARCHETYPES
from .repository import ExerciseDatabase

logger = setup_logging(__name__)

PRIMARY_SKILL_DIMENSIONS: Dict[str, List[str]] = {
    "tech": ["technical_depth", "problem_solving", "code_quality", "system_design"],
    "data": ["analytical_thinking", "technical_depth", "problem_solving", "communication"],
    "product": ["product_thinking", "prioritization", "stakeholder_management", "communication"],
    "sales": ["persuasion", "relationship_building", "communication", "business_acumen"],
    "business": ["structured_thinking", "business_acumen", "communication", "analytical_thinking"],
}

DEFAULT_ROLE_KITS = [
    {
        "kit": RoleKit(
            name="Backend Engineer",
            role_category="tech",
            level="mid",
            domain="software",
            skills=["Python", "SQL", "System Design", "REST API", "Docker"],
            role_archetype_id="core_software_engineer",
        ),
        "coding": [
            CodingExercise(
                name="Rate limiter",
                difficulty="medium",
                language="python",
                code_snippet="class RateLimiter:\n    def allow(self, client_id: str) -> bool:\n        ...",
                tags=["design", "hashing", "time windows"],
            ),
            CodingExercise(
                name="Two sum",
                difficulty="easy",
                language="python",
                code_snippet="def two_sum(nums: list[int], target: int) -> list[int]:\n    ...",
                tags=["arrays", "hashing"],
            ),
            CodingExercise(
                name="LRU cache",
                difficulty="hard",
                language="python",
                code_snippet="class LRUCache:\n    def __init__(self, capacity: int):\n        ...",
                tags=["linked lists", "hashing", "design"],
            ),
        ],
        "cases": [],
    },
    {
        "kit": RoleKit(
            name="Data Analyst",
            role_category="data",
            level="entry",
            domain="analytics",
            skills=["SQL", "Excel", "Tableau", "Statistics", "Stakeholder Management"],
            role_archetype_id="data_analyst",
        ),
        "coding": [
            CodingExercise(
                name="Monthly active users",
                difficulty="easy",
                language="sql",
                code_snippet="-- events(user_id, event_time)\n-- Return monthly active users per month.",
                tags=["sql", "aggregation"],
            ),
        ],
        "cases": [
            CaseTemplate(
                name="Conversion drop investigation",
                difficulty="medium",
                description="Checkout conversion fell 8% week over week. Find out why.",
            ),
        ],
    },
    {
        "kit": RoleKit(
            name="Product Manager",
            role_category="product",
            level="mid",
            domain="consumer",
            skills=["Product Strategy", "Prioritization", "Metrics", "User Research"],
            role_archetype_id="product_manager",
        ),
        "coding": [],
        "cases": [
            CaseTemplate(
                name="Grow a food delivery app",
                difficulty="medium",
                description="Weekly orders have plateaued. Propose and prioritise growth levers.",
            ),
            CaseTemplate(
                name="Launch a subscription tier",
                difficulty="hard",
                description="Design pricing and a launch plan for a premium subscription.",
            ),
        ],
    },
    {
        "kit": RoleKit(
            name="Management Consultant",
            role_category="consulting",
            level="entry",
            domain="strategy",
            skills=["Market Sizing", "Business Strategy", "Presentation", "Excel"],
            role_archetype_id="consulting_general",
        ),
        "coding": [],
        "cases": [
            CaseTemplate(
                name="Coffee chain market entry",
                difficulty="easy",
                description="Should a coffee chain enter a new city? Size the market and decide.",
            ),
        ],
    },
]


async def seed_defaults(db: ExerciseDatabase, force: bool = False) -> Dict[str, int]:
    """
    Seed archetypes, role kits and exercises.

    Archetypes are always upserted. Role kits and their exercises are only
    inserted into an empty catalogue unless ``force`` is set.

    Returns:
        Dict[str, int]: Row counts per catalogue table after seeding
    """
    await db.init_db()

    for archetype_id, definition in ROLE_ARCHETYPES.items():
        await db.upsert_role_archetype(
            RoleArchetype(
                id=archetype_id,
                name=definition.name,
                role_family=definition.role_family,
                primary_skill_dimensions=PRIMARY_SKILL_DIMENSIONS.get(definition.role_family, []),
            )
        )

    if force or await db.count_rows("role_kits") == 0:
        for entry in DEFAULT_ROLE_KITS:
            kit: RoleKit = entry["kit"]
            kit_id = await db.insert_role_kit(kit)
            for exercise in entry["coding"]:
                await db.insert_coding_exercise(replace(exercise, role_kit_id=kit_id))
            for template in entry["cases"]:
                await db.insert_case_template(replace(template, role_kit_id=kit_id))
    else:
        logger.info("Catalogue already has role kits; skipping role kit seed")

    stats = await db.get_stats()
    logger.info("Catalogue seeded", extra={"counts": stats})
    return stats


async def _run(db_path: Optional[str], force: bool) -> Dict[str, int]:
    db = ExerciseDatabase(db_path)
    try:
        return await seed_defaults(db, force=force)
    finally:
        await db.close()


def main() -> None:
    load_dotenv()
    args = sys.argv[1:]
    force = "--force" in args
    paths = [arg for arg in args if not arg.startswith("--")]
    stats = asyncio.run(_run(paths[0] if paths else None, force))
    for table, count in stats.items():
        print(f"{table}: {count}")


if __name__ == "__main__":
    main()

import sqlite3
from unittest.mock import AsyncMock, MagicMock, patch

import aiosqlite
import pytest

import practicelab.db  # noqa: F401 -- for coverage
from practicelab.db.repository import (
    DatabaseConnectionError,
    DatabaseError,
    ExerciseDatabase,
    ReadOnlyError,
    row_to_dict,
)
from practicelab.db.seed import DEFAULT_ROLE_KITS, seed_defaults
from practicelab.models.db_models import CaseTemplate, CodingExercise, RoleArchetype, RoleKit
from practicelab.routing.archetypes import ROLE_ARCHETYPES


@pytest.mark.asyncio
async def test_foreign_key_enforcement():
    """Test that foreign key constraints are enforced."""
    db = ExerciseDatabase(":memory:")
    await db.ainit()

    # Verify foreign keys are enabled
    async with db._get_connection() as conn:
        async with conn.execute("PRAGMA foreign_keys") as cursor:
            result = await cursor.fetchone()
            assert result[0] == 1, "Foreign keys should be enabled"

    # Exercise pointing at a role kit that does not exist
    with pytest.raises(DatabaseError):
        await db.insert_coding_exercise(CodingExercise(name="Orphan", role_kit_id=999))

    await db.close()


@pytest.mark.asyncio
async def test_memory_database_shares_one_connection():
    db = ExerciseDatabase(":memory:")
    await db.init_db()
    kit_id = await db.insert_role_kit(RoleKit(name="Backend Engineer", role_category="tech"))

    kit = await db.get_role_kit(kit_id)
    assert kit.name == "Backend Engineer"
    await db.close()


@pytest.mark.asyncio
async def test_role_kit_round_trip(test_db_path):
    db = ExerciseDatabase(test_db_path)
    await db.init_db()

    kit_id = await db.insert_role_kit(
        RoleKit(name="Data Analyst", role_category="data", level="entry", skills=["SQL", "Excel"])
    )
    await db.insert_role_kit(RoleKit(name="Product Manager", role_category="product"))

    kit = await db.get_role_kit(kit_id)
    assert kit.id == kit_id
    assert kit.skills == ["SQL", "Excel"]
    assert kit.is_active is True

    assert [k.name for k in await db.list_role_kits("data")] == ["Data Analyst"]
    assert len(await db.list_role_kits()) == 2
    assert await db.get_role_kit(12345) is None


@pytest.mark.asyncio
async def test_exercise_listing_filters_by_role_kit(test_db_path):
    db = ExerciseDatabase(test_db_path)
    await db.init_db()
    first = await db.insert_role_kit(RoleKit(name="Backend Engineer", role_category="tech"))
    second = await db.insert_role_kit(RoleKit(name="Consultant", role_category="consulting"))

    await db.insert_coding_exercise(
        CodingExercise(name="Two sum", difficulty="easy", tags=["arrays"], role_kit_id=first)
    )
    await db.insert_coding_exercise(CodingExercise(name="Unattached", difficulty="hard"))
    await db.insert_case_template(CaseTemplate(name="Market entry", role_kit_id=second))

    exercises = await db.list_coding_exercises(role_kit_id=first)
    assert [e.name for e in exercises] == ["Two sum"]
    assert exercises[0].tags == ["arrays"]
    assert len(await db.list_coding_exercises()) == 2
    assert len(await db.list_coding_exercises(limit=1)) == 1

    templates = await db.list_case_templates(role_kit_id=second)
    assert templates[0].difficulty == "medium"
    assert await db.list_case_templates(role_kit_id=first) == []


@pytest.mark.asyncio
async def test_archetype_upsert_replaces_row(test_db_path):
    db = ExerciseDatabase(test_db_path)
    await db.init_db()

    await db.upsert_role_archetype(
        RoleArchetype(id="data_analyst", name="Data Analyst", primary_skill_dimensions=["a"])
    )
    await db.upsert_role_archetype(
        RoleArchetype(id="data_analyst", name="Analyst", is_active=False)
    )

    archetype = await db.get_role_archetype("data_analyst")
    assert archetype.name == "Analyst"
    assert archetype.primary_skill_dimensions == []
    assert archetype.is_active is False
    assert await db.list_role_archetypes() == []
    assert len(await db.list_role_archetypes(active_only=False)) == 1


@pytest.mark.asyncio
async def test_readonly_handle_rejects_writes(test_db_path):
    await ExerciseDatabase(test_db_path).init_db()
    readonly = ExerciseDatabase(test_db_path, readonly=True)

    with pytest.raises(ReadOnlyError):
        await readonly.insert_role_kit(RoleKit(name="Nope"))

    # Reads still work
    assert await readonly.list_role_kits() == []


@pytest.mark.asyncio
async def test_count_rows_rejects_unknown_table(test_db_path):
    db = ExerciseDatabase(test_db_path)
    await db.init_db()

    with pytest.raises(ValueError):
        await db.count_rows("sqlite_master")


@pytest.mark.asyncio
async def test_malformed_list_column_reads_as_empty(test_db_path):
    db = ExerciseDatabase(test_db_path)
    await db.init_db()
    kit_id = await db.insert_role_kit(RoleKit(name="Broken"))

    conn = sqlite3.connect(test_db_path)
    conn.execute("UPDATE role_kits SET skills = ? WHERE id = ?", ("not json", kit_id))
    conn.commit()
    conn.close()

    kit = await db.get_role_kit(kit_id)
    assert kit.skills == []


@pytest.mark.asyncio
async def test_check_connection(test_db_path):
    assert await ExerciseDatabase(test_db_path).check_connection() is True


@pytest.mark.asyncio
async def test_query_errors_are_wrapped(test_db_path):
    # No init_db, so the tables do not exist
    db = ExerciseDatabase(test_db_path)

    with pytest.raises(DatabaseError) as excinfo:
        await db.list_role_kits()
    assert isinstance(excinfo.value.__cause__, aiosqlite.Error)


@pytest.mark.asyncio
async def test_seed_defaults_is_idempotent(test_db_path):
    db = ExerciseDatabase(test_db_path)

    stats = await seed_defaults(db)
    assert stats["role_archetypes"] == len(ROLE_ARCHETYPES)
    assert stats["role_kits"] == len(DEFAULT_ROLE_KITS)
    assert stats["coding_exercises"] == sum(len(entry["coding"]) for entry in DEFAULT_ROLE_KITS)
    assert stats["case_templates"] == sum(len(entry["cases"]) for entry in DEFAULT_ROLE_KITS)

    again = await seed_defaults(db)
    assert again == stats

    forced = await seed_defaults(db, force=True)
    assert forced["role_kits"] == 2 * len(DEFAULT_ROLE_KITS)
    assert forced["role_archetypes"] == len(ROLE_ARCHETYPES)


@pytest.mark.asyncio
async def test_seeded_exercises_belong_to_their_kit(test_db_path):
    db = ExerciseDatabase(test_db_path)
    await seed_defaults(db)

    kits = {kit.name: kit for kit in await db.list_role_kits()}
    backend = kits["Backend Engineer"]
    names = {e.name for e in await db.list_coding_exercises(role_kit_id=backend.id)}
    assert names == {"Rate limiter", "Two sum", "LRU cache"}

    # Template objects in DEFAULT_ROLE_KITS are left untouched
    assert all(e.role_kit_id is None for entry in DEFAULT_ROLE_KITS for e in entry["coding"])


def test_row_to_dict():
    kit = RoleKit(name="Backend Engineer", skills=["Python"], id=3)
    assert row_to_dict(kit)["skills"] == ["Python"]
    assert row_to_dict(kit)["id"] == 3


@pytest.mark.asyncio
async def test_difficulty_is_lowercased_on_insert(test_db_path):
    db = ExerciseDatabase(test_db_path)
    await db.init_db()
    kit_id = await db.insert_role_kit(RoleKit(name="Platform"))

    await db.insert_coding_exercise(CodingExercise(name="Sharding", difficulty="Hard", role_kit_id=kit_id))
    await db.insert_case_template(CaseTemplate(name="Capacity plan", difficulty=" EASY", role_kit_id=kit_id))

    assert [e.difficulty for e in await db.list_coding_exercises(role_kit_id=kit_id)] == ["hard"]
    assert [t.difficulty for t in await db.list_case_templates(role_kit_id=kit_id)] == ["easy"]


@pytest.mark.asyncio
async def test_connection_closed_when_setup_fails(test_db_path):
    conn = MagicMock()
    conn.execute = AsyncMock(side_effect=aiosqlite.OperationalError("database is locked"))
    conn.close = AsyncMock()

    with patch("practicelab.db.repository.aiosqlite.connect", AsyncMock(return_value=conn)):
        with pytest.raises(DatabaseConnectionError):
            await ExerciseDatabase(test_db_path)._open()

    conn.close.assert_awaited_once()

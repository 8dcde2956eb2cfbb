"""Integration tests for database safety and migration integrity."""

import os
import shutil
import sqlite3
from datetime import datetime

import pytest

from practicelab.db.repository import SCHEMA_VERSION, ExerciseDatabase, ReadOnlyError
from practicelab.db.seed import seed_defaults
from practicelab.models.db_models import CaseTemplate


@pytest.fixture(scope="function")
def test_db(test_db_path):
    """Create a test database handle."""
    return ExerciseDatabase(test_db_path)


@pytest.fixture(scope="function")
def backup_dir(tmp_path):
    """Create and clean up backup directory."""
    path = tmp_path / "backups"
    path.mkdir()
    yield str(path)
    shutil.rmtree(path)


@pytest.mark.asyncio
async def test_database_initialization(test_db):
    """Test that database initialization creates all required tables."""
    await test_db.init_db()

    conn = sqlite3.connect(test_db.db_path)
    cursor = conn.cursor()
    cursor.execute("SELECT name FROM sqlite_master WHERE type='table'")
    tables = {row[0] for row in cursor.fetchall()}

    required_tables = {
        "schema_version",
        "role_archetypes",
        "role_kits",
        "coding_exercises",
        "case_templates",
    }

    assert required_tables.issubset(tables)
    conn.close()


@pytest.mark.asyncio
async def test_migration_idempotency(test_db):
    """Test that migrations can be run multiple times safely."""
    await test_db.init_db()
    await test_db.init_db()

    conn = sqlite3.connect(test_db.db_path)
    cursor = conn.cursor()
    cursor.execute("SELECT version FROM schema_version")
    versions = [row[0] for row in cursor.fetchall()]
    assert versions == [SCHEMA_VERSION]
    conn.close()


@pytest.mark.asyncio
async def test_readonly_catalogue_for_routing(test_db):
    """A read-only handle can route but not modify the catalogue."""
    await seed_defaults(test_db)

    readonly = ExerciseDatabase(test_db.db_path, readonly=True)
    assert len(await readonly.list_role_kits()) == 4

    with pytest.raises(ReadOnlyError):
        await readonly.insert_case_template(CaseTemplate(name="Sneaky"))

    stats = await test_db.get_stats()
    assert stats["case_templates"] == 4


@pytest.mark.asyncio
async def test_database_backup(backup_dir, test_db):
    """Test that a copied catalogue keeps its data."""
    await seed_defaults(test_db)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = os.path.join(backup_dir, f"practicelab.db.backup_{timestamp}")
    shutil.copy2(test_db.db_path, backup_path)

    assert os.path.exists(backup_path)
    backup = ExerciseDatabase(backup_path, readonly=True)
    kits = await backup.list_role_kits()
    assert [kit.name for kit in kits][0] == "Backend Engineer"


def test_database_file_safety():
    """Test that database files are properly ignored by git."""
    with open(os.path.join(os.path.dirname(__file__), "..", "..", ".gitignore"), "r") as f:
        gitignore_content = f.read()

    assert "*.db" in gitignore_content
    assert "*.db-journal" in gitignore_content
    assert "databases/" in gitignore_content

"""Database operations for the exercise catalogue."""

import asyncio
import json
import logging
import os
from dataclasses import asdict
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List, Optional

import aiosqlite

from ..config import settings
from ..models.db_models import CaseTemplate, CodingExercise, RoleArchetype, RoleKit

# Set up logging
logger = logging.getLogger(__name__)

# Current schema version
SCHEMA_VERSION = 1

# Database configuration
BUSY_TIMEOUT_MS = 5000
DEFAULT_FETCH_LIMIT = 10

CATALOGUE_TABLES = ("role_archetypes", "role_kits", "coding_exercises", "case_templates")


class DatabaseError(Exception):
    """Custom exception for database operations."""

    pass


class DatabaseConnectionError(DatabaseError):
    """Exception raised when database connection fails."""

    pass


class ReadOnlyError(DatabaseError):
    """Exception raised when a write is attempted on a read-only handle."""

    pass


def _dump_list(values: Optional[List[str]]) -> str:
    return json.dumps(list(values or []))


def _load_list(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Discarding malformed JSON list column: %r", raw)
        return []
    return [str(item) for item in value] if isinstance(value, list) else []


def _clean_difficulty(value: Optional[str]) -> str:
    return (value or "medium").strip().lower() or "medium"


class ExerciseDatabase:
    """Handles database operations for role kits, archetypes and exercises."""

    def __init__(self, db_path: Optional[str] = None, *, readonly: bool = False):
        """Initialize the database handle.

        Args:
            db_path: Path to the database file, or ":memory:"
            readonly: If True, write operations raise ReadOnlyError
        """
        if db_path is None:
            db_path = os.getenv("PRACTICELAB_DB_PATH") or settings.practicelab_db_path

        self.db_path = db_path
        self._readonly = readonly
        self._memory = db_path == ":memory:"
        self._shared_conn: Optional[aiosqlite.Connection] = None
        self._memory_lock = asyncio.Lock()

        if not self._memory:
            db_dirname = os.path.dirname(self.db_path)
            if db_dirname:
                Path(db_dirname).mkdir(parents=True, exist_ok=True)

        logger.info(
            "Database handle created for: %s (readonly=%s)", self.db_path, readonly
        )

    async def ainit(self) -> "ExerciseDatabase":
        """
        Async helper so callers can do:

            db = await ExerciseDatabase(path).ainit()
        """
        await self.init_db()
        return self

    async def _open(self) -> aiosqlite.Connection:
        try:
            conn = await aiosqlite.connect(self.db_path)
        except (aiosqlite.Error, OSError) as e:
            raise DatabaseConnectionError(
                f"Could not open database {self.db_path}: {e}"
            ) from e
        try:
            conn.row_factory = aiosqlite.Row
            await conn.execute("PRAGMA foreign_keys = ON")
            await conn.execute(f"PRAGMA busy_timeout = {BUSY_TIMEOUT_MS}")
        except aiosqlite.Error as e:
            await conn.close()
            raise DatabaseConnectionError(
                f"Could not configure database {self.db_path}: {e}"
            ) from e
        return conn

    @asynccontextmanager
    async def _get_connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """Yield a connection; in-memory databases share a single one."""
        if self._memory:
            async with self._memory_lock:
                if self._shared_conn is None:
                    self._shared_conn = await self._open()
                yield self._shared_conn
            return

        conn = await self._open()
        try:
            yield conn
        finally:
            await conn.close()

    def _write_guard(self, op: str) -> None:
        """Guard against write operations in read-only mode.

        Raises:
            ReadOnlyError: If database is in read-only mode
        """
        if self._readonly:
            logger.debug("WRITE-GUARD tripped on %s", op)
            raise ReadOnlyError(f"{op} is disabled in read-only mode")

    async def check_connection(self) -> bool:
        """Check if the database connection is working."""
        try:
            async with self._get_connection() as conn:
                await conn.execute("SELECT 1")
            return True
        except (DatabaseError, aiosqlite.Error):
            return False

    async def init_db(self) -> None:
        """Initialize the database and create necessary tables."""
        try:
            logger.info("Creating database tables...")
            async with self._get_connection() as conn:
                await conn.execute("""
                    CREATE TABLE IF NOT EXISTS schema_version (
                        version INTEGER PRIMARY KEY,
                        applied_at DATETIME DEFAULT CURRENT_TIMESTAMP
                    )
                """)

                async with conn.execute(
                    "SELECT version FROM schema_version ORDER BY version DESC LIMIT 1"
                ) as cursor:
                    row = await cursor.fetchone()
                current_version = row[0] if row else 0

                if current_version >= SCHEMA_VERSION:
                    logger.info("Database schema is up to date (version %s)", current_version)
                    return

                logger.info(
                    "Upgrading schema from version %s to %s", current_version, SCHEMA_VERSION
                )

                await conn.execute("""
                    CREATE TABLE IF NOT EXISTS role_archetypes (
                        id TEXT PRIMARY KEY,
                        name TEXT NOT NULL,
                        role_family TEXT,
                        primary_skill_dimensions TEXT DEFAULT '[]',
                        is_active BOOLEAN DEFAULT 1,
                        created_at DATETIME DEFAULT CURRENT_TIMESTAMP
                    )
                """)
                logger.info("Created role_archetypes table")

                await conn.execute("""
                    CREATE TABLE IF NOT EXISTS role_kits (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        name TEXT NOT NULL,
                        role_category TEXT,
                        level TEXT,
                        domain TEXT,
                        skills TEXT DEFAULT '[]',
                        role_archetype_id TEXT,
                        is_active BOOLEAN DEFAULT 1,
                        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                        FOREIGN KEY (role_archetype_id) REFERENCES role_archetypes(id)
                    )
                """)
                await conn.execute(
                    "CREATE INDEX IF NOT EXISTS idx_role_kits_category ON role_kits(role_category)"
                )
                logger.info("Created role_kits table")

                await conn.execute("""
                    CREATE TABLE IF NOT EXISTS coding_exercises (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        role_kit_id INTEGER,
                        name TEXT NOT NULL,
                        difficulty TEXT DEFAULT 'medium',
                        language TEXT,
                        code_snippet TEXT,
                        tags TEXT DEFAULT '[]',
                        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                        FOREIGN KEY (role_kit_id) REFERENCES role_kits(id)
                    )
                """)
                await conn.execute(
                    "CREATE INDEX IF NOT EXISTS idx_coding_exercises_kit ON coding_exercises(role_kit_id)"
                )
                logger.info("Created coding_exercises table")

                await conn.execute("""
                    CREATE TABLE IF NOT EXISTS case_templates (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        role_kit_id INTEGER,
                        name TEXT NOT NULL,
                        difficulty TEXT DEFAULT 'medium',
                        description TEXT,
                        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                        FOREIGN KEY (role_kit_id) REFERENCES role_kits(id)
                    )
                """)
                await conn.execute(
                    "CREATE INDEX IF NOT EXISTS idx_case_templates_kit ON case_templates(role_kit_id)"
                )
                logger.info("Created case_templates table")

                await conn.execute(
                    "INSERT INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,)
                )
                await conn.commit()
                logger.info("Schema upgraded to version %s", SCHEMA_VERSION)
        except DatabaseError:
            raise
        except aiosqlite.Error as e:
            logger.error("Failed to initialize database: %s", e)
            raise DatabaseError(f"Failed to initialize database: {e}") from e

    async def _insert(self, op: str, query: str, params: tuple) -> int:
        self._write_guard(op)
        try:
            async with self._get_connection() as conn:
                cursor = await conn.execute(query, params)
                await conn.commit()
                return cursor.lastrowid
        except aiosqlite.Error as e:
            logger.error("Error in %s: %s", op, e)
            raise DatabaseError(f"{op} failed: {e}") from e

    async def _fetch_all(self, op: str, query: str, params: tuple = ()) -> List[aiosqlite.Row]:
        try:
            async with self._get_connection() as conn:
                async with conn.execute(query, params) as cursor:
                    return list(await cursor.fetchall())
        except aiosqlite.Error as e:
            logger.error("Error in %s: %s", op, e)
            raise DatabaseError(f"{op} failed: {e}") from e

    async def count_rows(self, table: str) -> int:
        """Count rows in one of the catalogue tables."""
        if table not in CATALOGUE_TABLES:
            raise ValueError(f"Unknown catalogue table: {table}")
        rows = await self._fetch_all("count_rows", f"SELECT COUNT(*) FROM {table}")
        return rows[0][0]

    async def get_stats(self) -> Dict[str, int]:
        return {table: await self.count_rows(table) for table in CATALOGUE_TABLES}

    # --- Role archetypes ---

    async def upsert_role_archetype(self, archetype: RoleArchetype) -> str:
        """Insert or replace a role archetype row."""
        await self._insert(
            "upsert_role_archetype",
            """
            INSERT INTO role_archetypes (id, name, role_family, primary_skill_dimensions, is_active)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                name = excluded.name,
                role_family = excluded.role_family,
                primary_skill_dimensions = excluded.primary_skill_dimensions,
                is_active = excluded.is_active
            """,
            (
                archetype.id,
                archetype.name,
                archetype.role_family,
                _dump_list(archetype.primary_skill_dimensions),
                int(archetype.is_active),
            ),
        )
        return archetype.id

    @staticmethod
    def _row_to_archetype(row: aiosqlite.Row) -> RoleArchetype:
        return RoleArchetype(
            id=row["id"],
            name=row["name"],
            role_family=row["role_family"],
            primary_skill_dimensions=_load_list(row["primary_skill_dimensions"]),
            is_active=bool(row["is_active"]),
        )

    async def get_role_archetype(self, archetype_id: str) -> Optional[RoleArchetype]:
        rows = await self._fetch_all(
            "get_role_archetype",
            "SELECT * FROM role_archetypes WHERE id = ? LIMIT 1",
            (archetype_id,),
        )
        return self._row_to_archetype(rows[0]) if rows else None

    async def list_role_archetypes(self, active_only: bool = True) -> List[RoleArchetype]:
        query = "SELECT * FROM role_archetypes"
        if active_only:
            query += " WHERE is_active = 1"
        rows = await self._fetch_all("list_role_archetypes", query + " ORDER BY id")
        return [self._row_to_archetype(row) for row in rows]

    # --- Role kits ---

    async def insert_role_kit(self, kit: RoleKit) -> int:
        kit_id = await self._insert(
            "insert_role_kit",
            """
            INSERT INTO role_kits (name, role_category, level, domain, skills, role_archetype_id, is_active)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                kit.name,
                kit.role_category,
                kit.level,
                kit.domain,
                _dump_list(kit.skills),
                kit.role_archetype_id,
                int(kit.is_active),
            ),
        )
        logger.info("Inserted role kit %s (id=%s)", kit.name, kit_id)
        return kit_id

    @staticmethod
    def _row_to_role_kit(row: aiosqlite.Row) -> RoleKit:
        return RoleKit(
            id=row["id"],
            name=row["name"],
            role_category=row["role_category"],
            level=row["level"],
            domain=row["domain"],
            skills=_load_list(row["skills"]),
            role_archetype_id=row["role_archetype_id"],
            is_active=bool(row["is_active"]),
        )

    async def get_role_kit(self, role_kit_id: int) -> Optional[RoleKit]:
        rows = await self._fetch_all(
            "get_role_kit", "SELECT * FROM role_kits WHERE id = ? LIMIT 1", (role_kit_id,)
        )
        return self._row_to_role_kit(rows[0]) if rows else None

    async def list_role_kits(self, role_category: Optional[str] = None) -> List[RoleKit]:
        if role_category:
            rows = await self._fetch_all(
                "list_role_kits",
                "SELECT * FROM role_kits WHERE role_category = ? ORDER BY id",
                (role_category,),
            )
        else:
            rows = await self._fetch_all("list_role_kits", "SELECT * FROM role_kits ORDER BY id")
        return [self._row_to_role_kit(row) for row in rows]

    # --- Coding exercises ---

    async def insert_coding_exercise(self, exercise: CodingExercise) -> int:
        return await self._insert(
            "insert_coding_exercise",
            """
            INSERT INTO coding_exercises (role_kit_id, name, difficulty, language, code_snippet, tags)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                exercise.role_kit_id,
                exercise.name,
                _clean_difficulty(exercise.difficulty),
                exercise.language,
                exercise.code_snippet,
                _dump_list(exercise.tags),
            ),
        )

    async def list_coding_exercises(
        self, role_kit_id: Optional[int] = None, limit: int = DEFAULT_FETCH_LIMIT
    ) -> List[CodingExercise]:
        """List coding exercises, optionally only those attached to one role kit."""
        query = "SELECT * FROM coding_exercises"
        params: tuple = ()
        if role_kit_id:
            query += " WHERE role_kit_id = ?"
            params = (role_kit_id,)
        rows = await self._fetch_all(
            "list_coding_exercises", query + " ORDER BY id LIMIT ?", params + (limit,)
        )
        return [
            CodingExercise(
                id=row["id"],
                role_kit_id=row["role_kit_id"],
                name=row["name"],
                difficulty=row["difficulty"],
                language=row["language"],
                code_snippet=row["code_snippet"],
                tags=_load_list(row["tags"]),
            )
            for row in rows
        ]

    # --- Case templates ---

    async def insert_case_template(self, template: CaseTemplate) -> int:
        return await self._insert(
            "insert_case_template",
            """
            INSERT INTO case_templates (role_kit_id, name, difficulty, description)
            VALUES (?, ?, ?, ?)
            """,
            (template.role_kit_id, template.name, _clean_difficulty(template.difficulty), template.description),
        )

    async def list_case_templates(
        self, role_kit_id: Optional[int] = None, limit: int = DEFAULT_FETCH_LIMIT
    ) -> List[CaseTemplate]:
        """List case templates, optionally only those attached to one role kit."""
        query = "SELECT * FROM case_templates"
        params: tuple = ()
        if role_kit_id:
            query += " WHERE role_kit_id = ?"
            params = (role_kit_id,)
        rows = await self._fetch_all(
            "list_case_templates", query + " ORDER BY id LIMIT ?", params + (limit,)
        )
        return [
            CaseTemplate(
                id=row["id"],
                role_kit_id=row["role_kit_id"],
                name=row["name"],
                difficulty=row["difficulty"],
                description=row["description"],
            )
            for row in rows
        ]

    async def close(self) -> None:
        """Close the shared in-memory connection, if any."""
        async with self._memory_lock:
            if self._shared_conn is not None:
                await self._shared_conn.close()
                self._shared_conn = None


def row_to_dict(obj: Any) -> Dict[str, Any]:
    """Convert a catalogue dataclass into a JSON-friendly dict."""
    return asdict(obj)

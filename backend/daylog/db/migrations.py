"""Database migration system.

Migrations are additive only: they create tables or add nullable columns,
never rebuild a table or rewrite existing rows. Columns listed in
``OPTIONAL_LOG_COLUMNS`` may be missing from older databases; the resolved
``SchemaVersionState`` tells the journal store which of them it can write.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, FrozenSet, List, Optional, Set, Tuple

import aiosqlite

from daylog.db.schema import create_tables

logger = logging.getLogger(__name__)

LOGS_TABLE_NAME = "logs"

# Optional columns of the logs table and their column definitions
OPTIONAL_LOG_COLUMNS: Dict[str, str] = {
    "updated_at": "DATETIME",
}

# Migration format: (version, description, up_sql)
MIGRATIONS: List[Tuple[int, str, str]] = [
    (
        1,
        "Initial schema",
        """-- This migration is handled by schema.py create_tables()""",
    ),
    (
        2,
        "Add updated_at tracking column to logs",
        f"""ALTER TABLE {LOGS_TABLE_NAME} ADD COLUMN updated_at {OPTIONAL_LOG_COLUMNS['updated_at']}""",
    ),
]

HARMLESS_ERRORS = (
    "duplicate column name",
    "table already exists",
    "index already exists",
    "column already exists",
)


@dataclass(frozen=True)
class SchemaVersionState:
    """Capabilities of the persisted schema, resolved once per process"""
    version: int = 0
    optional_columns: FrozenSet[str] = field(default_factory=frozenset)

    def supports(self, name: str) -> bool:
        return name in self.optional_columns


class SchemaManager:
    """Creates the schema, applies pending migrations and probes optional columns"""

    def __init__(self, db):
        self.db = db
        self._state: Optional[SchemaVersionState] = None

    async def get_current_version(self) -> int:
        """Get current schema version"""
        try:
            result = await self.db.fetch_one(
                "SELECT MAX(version) as version FROM schema_version"
            )
        except aiosqlite.OperationalError:
            # Table doesn't exist yet
            return 0
        return result["version"] if result and result["version"] else 0

    async def existing_columns(self, table: str = LOGS_TABLE_NAME) -> Set[str]:
        rows = await self.db.fetch_all(f"PRAGMA table_info({table})")
        return {row["name"] for row in rows}

    async def ensure_optional_attribute(self, name: str) -> bool:
        """Add an optional column to the logs table if it is missing.

        Safe to call on every start. Returns True when the column was added
        by this call.
        """
        if name not in OPTIONAL_LOG_COLUMNS:
            raise ValueError(f"Unknown optional attribute: {name}")

        if name in await self.existing_columns():
            return False

        try:
            await self.db.execute(
                f"ALTER TABLE {LOGS_TABLE_NAME} ADD COLUMN {name} {OPTIONAL_LOG_COLUMNS[name]}"
            )
        except aiosqlite.OperationalError as e:
            # Another process added it between the probe and the ALTER
            if "duplicate column name" in str(e).lower():
                return False
            raise

        logger.info(f"Added optional column {LOGS_TABLE_NAME}.{name}")
        self._state = None
        return True

    async def apply_migration(self, version: int, description: str, up_sql: str):
        """Apply a single migration"""
        async with self.db.connection() as conn:
            if up_sql.strip() and not up_sql.strip().startswith("--"):
                statements = [stmt.strip() for stmt in up_sql.split(";") if stmt.strip()]
                for statement in statements:
                    if statement.startswith("--"):
                        continue
                    try:
                        await conn.execute(statement)
                    except aiosqlite.OperationalError as e:
                        if any(phrase in str(e).lower() for phrase in HARMLESS_ERRORS):
                            logger.info(f"Migration {version}: skipping statement (already exists): {statement}")
                            continue
                        logger.error(f"Migration {version} failed on statement: {statement}: {e}")
                        raise

            await conn.execute(
                "INSERT INTO schema_version (version, applied_at, description) VALUES (?, ?, ?)",
                (version, datetime.now().isoformat(), description),
            )
            await conn.commit()
        logger.info(f"Applied migration {version}: {description}")

    async def run_migrations(self) -> int:
        """Create the base tables and run all pending migrations"""
        await create_tables(self.db)

        current_version = await self.get_current_version()
        logger.debug(f"Current database version: {current_version}")

        for version, description, up_sql in MIGRATIONS:
            if version > current_version:
                await self.apply_migration(version, description, up_sql)

        final_version = await self.get_current_version()
        if final_version > current_version:
            logger.info(f"Database migrated from version {current_version} to {final_version}")
        else:
            logger.info(f"Database is up to date at version {final_version}")

        self._state = None
        return final_version

    async def resolve(self) -> SchemaVersionState:
        """Probe the persisted structure once and cache the result"""
        if self._state is None:
            columns = await self.existing_columns()
            self._state = SchemaVersionState(
                version=await self.get_current_version(),
                optional_columns=frozenset(c for c in OPTIONAL_LOG_COLUMNS if c in columns),
            )
        return self._state

    def supports(self, name: str) -> bool:
        if self._state is None:
            raise RuntimeError("Schema state not resolved; call resolve() first")
        return self._state.supports(name)

    async def prepare(self) -> SchemaVersionState:
        """Startup entry point: migrate, make sure optional columns exist, resolve"""
        await self.run_migrations()
        for name in OPTIONAL_LOG_COLUMNS:
            await self.ensure_optional_attribute(name)
        return await self.resolve()

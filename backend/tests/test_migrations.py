"""Tests for additive schema evolution."""

import json

import pytest

from daylog.db.database import Database
from daylog.db.migrations import MIGRATIONS, SchemaManager, SchemaVersionState
from daylog.db.repositories.journal_repository import JournalRepository

# logs table as it existed before updated_at was introduced
LEGACY_LOGS_TABLE = """
CREATE TABLE logs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    username TEXT NOT NULL,
    date_key TEXT NOT NULL,
    recorded_at TEXT NOT NULL,
    payload TEXT NOT NULL,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    UNIQUE(username, date_key)
)
"""


@pytest.fixture
def raw_db(db_path):
    return Database(db_path)


class TestSchemaVersionState:
    def test_supports_listed_columns(self):
        state = SchemaVersionState(version=2, optional_columns=frozenset({"updated_at"}))
        assert state.supports("updated_at")
        assert not state.supports("deleted_at")

    def test_default_supports_nothing(self):
        assert not SchemaVersionState().supports("updated_at")


class TestPrepare:
    @pytest.mark.asyncio
    async def test_fresh_database_reaches_latest_version(self, raw_db):
        state = await SchemaManager(raw_db).prepare()

        assert state.version == MIGRATIONS[-1][0]
        assert state.supports("updated_at")

    @pytest.mark.asyncio
    async def test_prepare_is_repeatable(self, raw_db):
        first = await SchemaManager(raw_db).prepare()
        second = await SchemaManager(raw_db).prepare()

        assert first == second
        rows = await raw_db.fetch_all("SELECT version FROM schema_version")
        assert [row["version"] for row in rows] == [m[0] for m in MIGRATIONS]

    @pytest.mark.asyncio
    async def test_legacy_table_gains_column_and_keeps_rows(self, raw_db):
        await raw_db.execute(LEGACY_LOGS_TABLE)
        await raw_db.execute(
            "INSERT INTO logs (username, date_key, recorded_at, payload) VALUES (?, ?, ?, ?)",
            ("alice", "2024-01-01", "2024-01-01T08:00:00Z", json.dumps({"progress": 40})),
        )

        manager = SchemaManager(raw_db)
        state = await manager.prepare()

        assert state.supports("updated_at")
        assert "updated_at" in await manager.existing_columns()

        record = await JournalRepository(raw_db, state).get("alice", "2024-01-01")
        assert record.fields == {"progress": 40}
        assert record.recorded_at == "2024-01-01T08:00:00Z"
        assert record.updated_at is None


class TestEnsureOptionalAttribute:
    @pytest.mark.asyncio
    async def test_adds_missing_column(self, raw_db):
        await raw_db.execute(LEGACY_LOGS_TABLE)
        manager = SchemaManager(raw_db)

        assert await manager.ensure_optional_attribute("updated_at") is True
        assert await manager.ensure_optional_attribute("updated_at") is False

    @pytest.mark.asyncio
    async def test_unknown_attribute_rejected(self, raw_db):
        await raw_db.execute(LEGACY_LOGS_TABLE)
        with pytest.raises(ValueError, match="Unknown optional attribute"):
            await SchemaManager(raw_db).ensure_optional_attribute("mood")

    @pytest.mark.asyncio
    async def test_resolve_reflects_missing_column(self, raw_db):
        await raw_db.execute(LEGACY_LOGS_TABLE)
        manager = SchemaManager(raw_db)

        state = await manager.resolve()

        assert not state.supports("updated_at")
        assert not manager.supports("updated_at")

    def test_supports_requires_resolve(self, raw_db):
        with pytest.raises(RuntimeError):
            SchemaManager(raw_db).supports("updated_at")

import logging
from datetime import datetime
from typing import AsyncIterator, List, Optional, Union

import aiosqlite

from daylog.core.errors import NotFoundError, StorageError
from daylog.db.migrations import SchemaVersionState
from daylog.models.record import (
    Fields,
    JournalRecord,
    build_payload,
    normalize_recorded_at,
    validate_date_key,
)

logger = logging.getLogger(__name__)

UPSERT_SQL = """
INSERT INTO logs (username, date_key, recorded_at, payload)
VALUES (?, ?, ?, ?)
ON CONFLICT(username, date_key) DO UPDATE SET
    recorded_at = excluded.recorded_at,
    payload = excluded.payload{extra_assignments}
"""


class JournalRepository:
    """Per-user daily records.

    Every query is filtered by the owner's username. Writes go through a single
    ``INSERT ... ON CONFLICT DO UPDATE`` statement, so concurrent upserts to the
    same day never create a second row and never depend on a prior read.
    """

    def __init__(self, db, schema_state: SchemaVersionState):
        self.db = db
        self.schema_state = schema_state
        self._upsert_sql = self._build_upsert_sql(schema_state)

    @staticmethod
    def _build_upsert_sql(schema_state: SchemaVersionState) -> str:
        extra = ""
        if schema_state.supports("updated_at"):
            extra = ",\n    updated_at = CURRENT_TIMESTAMP"
        return UPSERT_SQL.format(extra_assignments=extra)

    @property
    def _columns(self) -> str:
        columns = "username, date_key, recorded_at, payload, created_at"
        if self.schema_state.supports("updated_at"):
            columns += ", updated_at"
        return columns

    async def upsert(
        self,
        username: str,
        date_key: str,
        fields: Optional[Fields] = None,
        recorded_at: Union[str, datetime, None] = None,
    ) -> None:
        """Insert the day's record or replace its payload wholesale"""
        validate_date_key(date_key)
        payload = build_payload(fields)
        recorded_at = normalize_recorded_at(recorded_at)

        try:
            await self.db.execute(
                self._upsert_sql, (username, date_key, recorded_at, payload)
            )
        except aiosqlite.Error as e:
            logger.error(f"Upsert failed for {username}/{date_key}: {e}")
            raise StorageError(f"Upsert failed: {e}")

    async def list(self, username: str) -> List[JournalRecord]:
        """All of the user's records, most recent day first"""
        try:
            rows = await self.db.fetch_all(
                f"""SELECT {self._columns} FROM logs
                    WHERE username = ?
                    ORDER BY date_key DESC""",
                (username,),
            )
        except aiosqlite.Error as e:
            logger.error(f"Listing records failed for {username}: {e}")
            raise StorageError(f"Listing records failed: {e}")
        return [JournalRecord.from_row(row) for row in rows]

    async def iterate(self, username: str) -> AsyncIterator[JournalRecord]:
        """Stream the user's records, most recent day first, from one read"""
        query = f"""SELECT {self._columns} FROM logs
                    WHERE username = ?
                    ORDER BY date_key DESC"""
        try:
            async for row in self.db.iterate(query, (username,)):
                yield JournalRecord.from_row(row)
        except aiosqlite.Error as e:
            logger.error(f"Streaming records failed for {username}: {e}")
            raise StorageError(f"Streaming records failed: {e}")

    async def get(self, username: str, date_key: str) -> JournalRecord:
        try:
            row = await self.db.fetch_one(
                f"SELECT {self._columns} FROM logs WHERE username = ? AND date_key = ?",
                (username, date_key),
            )
        except aiosqlite.Error as e:
            logger.error(f"Loading record failed for {username}/{date_key}: {e}")
            raise StorageError(f"Loading record failed: {e}")

        if not row:
            raise NotFoundError(f"No record for {date_key}")
        return JournalRecord.from_row(row)

    async def delete(self, username: str, date_key: str) -> None:
        try:
            rowcount = await self.db.execute(
                "DELETE FROM logs WHERE username = ? AND date_key = ?",
                (username, date_key),
            )
        except aiosqlite.Error as e:
            logger.error(f"Delete failed for {username}/{date_key}: {e}")
            raise StorageError(f"Delete failed: {e}")

        if rowcount == 0:
            raise NotFoundError(f"No record for {date_key}")

    async def count(self, username: str) -> int:
        try:
            result = await self.db.fetch_one(
                "SELECT COUNT(*) as count FROM logs WHERE username = ?", (username,)
            )
        except aiosqlite.Error as e:
            raise StorageError(f"Counting records failed: {e}")
        return result["count"] if result else 0

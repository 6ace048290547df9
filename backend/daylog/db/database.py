import logging
import os
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

import aiosqlite

logger = logging.getLogger(__name__)


class Database:
    """SQLite storage handle.

    Holds only the location and connection options. Every operation opens its
    own connection and closes it on the way out, so no handle outlives the call
    that needed it.
    """

    def __init__(self, db_path: str, busy_timeout_ms: int = 5000):
        self.db_path = db_path
        self.busy_timeout_ms = busy_timeout_ms

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """Open a connection scoped to the enclosing ``async with`` block"""
        async with aiosqlite.connect(
            self.db_path, timeout=self.busy_timeout_ms / 1000
        ) as conn:
            conn.row_factory = aiosqlite.Row
            await conn.execute(f"PRAGMA busy_timeout = {int(self.busy_timeout_ms)}")
            yield conn

    async def initialize(self):
        """Create the database file and switch it to WAL journaling"""
        directory = os.path.dirname(os.path.abspath(self.db_path))
        os.makedirs(directory, exist_ok=True)
        async with self.connection() as conn:
            cursor = await conn.execute("PRAGMA journal_mode = WAL")
            row = await cursor.fetchone()
            logger.info(f"Database opened at {self.db_path} (journal_mode={row[0]})")

    async def execute(self, query: str, params: tuple = ()) -> int:
        """Execute a single write statement and commit. Returns affected rows."""
        async with self.connection() as conn:
            cursor = await conn.execute(query, params)
            rowcount = cursor.rowcount
            await conn.commit()
            return rowcount

    async def execute_script(self, script: str):
        """Execute several statements in one go"""
        async with self.connection() as conn:
            await conn.executescript(script)
            await conn.commit()

    async def fetch_one(self, query: str, params: tuple = ()) -> Optional[Dict[str, Any]]:
        """Fetch one row"""
        async with self.connection() as conn:
            cursor = await conn.execute(query, params)
            row = await cursor.fetchone()
            return dict(row) if row else None

    async def fetch_all(self, query: str, params: tuple = ()) -> List[Dict[str, Any]]:
        """Fetch all rows"""
        async with self.connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [dict(row) for row in rows]

    async def iterate(self, query: str, params: tuple = ()) -> AsyncIterator[Dict[str, Any]]:
        """Yield rows one at a time from a single read.

        The connection stays open until the generator is exhausted or closed.
        """
        async with self.connection() as conn:
            async with conn.execute(query, params) as cursor:
                async for row in cursor:
                    yield dict(row)

    async def ping(self) -> bool:
        try:
            await self.fetch_one("SELECT 1")
            return True
        except aiosqlite.Error as e:
            logger.warning(f"Database ping failed: {e}")
            return False

import logging
from typing import Optional

import aiosqlite

from daylog.core.errors import ConflictError, StorageError
from daylog.models.account import Account

logger = logging.getLogger(__name__)


class AccountRepository:
    """Repository for the users table"""

    def __init__(self, db):
        self.db = db

    async def create(self, username: str, password_hash: str) -> Account:
        """Insert a new account. The unique constraint decides conflicts."""
        try:
            async with self.db.connection() as conn:
                await conn.execute(
                    "INSERT INTO users (username, password_hash) VALUES (?, ?)",
                    (username, password_hash),
                )
                await conn.commit()
        except aiosqlite.IntegrityError:
            raise ConflictError(f"Username already exists: {username}")
        except aiosqlite.Error as e:
            logger.error(f"Failed to create user {username!r}: {e}")
            raise StorageError(f"Failed to create user: {e}")

        return await self.get_by_username(username)

    async def create_if_missing(self, username: str, password_hash: str) -> bool:
        """Insert the account unless it already exists. Returns True if inserted."""
        try:
            rowcount = await self.db.execute(
                """INSERT INTO users (username, password_hash) VALUES (?, ?)
                   ON CONFLICT(username) DO NOTHING""",
                (username, password_hash),
            )
        except aiosqlite.Error as e:
            logger.error(f"Failed to bootstrap user {username!r}: {e}")
            raise StorageError(f"Failed to bootstrap user: {e}")
        return rowcount > 0

    async def get_by_username(self, username: str) -> Optional[Account]:
        try:
            row = await self.db.fetch_one(
                "SELECT * FROM users WHERE username = ?", (username,)
            )
        except aiosqlite.Error as e:
            logger.error(f"Failed to load user {username!r}: {e}")
            raise StorageError(f"Failed to load user: {e}")
        return Account.from_dict(row) if row else None

    async def exists(self, username: str) -> bool:
        return await self.get_by_username(username) is not None

    async def count(self) -> int:
        try:
            result = await self.db.fetch_one("SELECT COUNT(*) as count FROM users")
        except aiosqlite.Error as e:
            raise StorageError(f"Failed to count users: {e}")
        return result["count"] if result else 0

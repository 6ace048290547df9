"""Database schema definitions"""

# Accounts
USERS_TABLE = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    username TEXT UNIQUE NOT NULL,
    password_hash TEXT NOT NULL,  -- bcrypt hash
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP
)
"""

# One row per (username, date_key). updated_at is added by migration 2 so
# databases created before it keep working without a rebuild.
LOGS_TABLE = """
CREATE TABLE IF NOT EXISTS logs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    username TEXT NOT NULL,
    date_key TEXT NOT NULL,       -- YYYY-MM-DD
    recorded_at TEXT NOT NULL,    -- ISO 8601 time of the last write
    payload TEXT NOT NULL,        -- JSON object of caller-defined fields
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    UNIQUE(username, date_key)
)
"""

# Schema version table for migrations
SCHEMA_VERSION_TABLE = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at DATETIME NOT NULL,
    description TEXT
)
"""

# All tables in order of creation
ALL_TABLES = [
    SCHEMA_VERSION_TABLE,
    USERS_TABLE,
    LOGS_TABLE,
]


async def create_tables(db):
    """Create all tables"""
    async with db.connection() as conn:
        for table_sql in ALL_TABLES:
            await conn.execute(table_sql)

        await conn.commit()

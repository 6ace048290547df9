from .database import Database
from .migrations import SchemaManager, SchemaVersionState
from .repositories import AccountRepository, JournalRepository

__all__ = [
    "Database",
    "SchemaManager",
    "SchemaVersionState",
    "AccountRepository",
    "JournalRepository",
]

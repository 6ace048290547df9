from .account_repository import AccountRepository
from .journal_repository import JournalRepository

__all__ = [
    "AccountRepository",
    "JournalRepository",
]

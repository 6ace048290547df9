from .account import Account
from .record import JournalRecord, FieldValue, Fields

__all__ = [
    "Account",
    "JournalRecord",
    "FieldValue",
    "Fields",
]

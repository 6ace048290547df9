import json
import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Union

from daylog.core.errors import ValidationError

# Values a caller may store under a field name. Only "progress" is checked;
# everything else is kept exactly as received.
FieldValue = Union[str, int, float, bool, None, Dict[str, Any], List[Any]]
Fields = Dict[str, FieldValue]

PROGRESS_FIELD = "progress"
DEFAULT_PROGRESS = 0

DATE_KEY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def validate_date_key(date_key: Optional[str]) -> str:
    """Return the key unchanged if it names a real calendar day as YYYY-MM-DD"""
    if not date_key or not isinstance(date_key, str):
        raise ValidationError("dateKey", "dateKey is required")
    if not DATE_KEY_PATTERN.match(date_key):
        raise ValidationError("dateKey", "dateKey must be formatted as YYYY-MM-DD")
    try:
        date.fromisoformat(date_key)
    except ValueError:
        raise ValidationError("dateKey", f"dateKey is not a valid calendar date: {date_key}")
    return date_key


def validate_progress(value: Any):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(PROGRESS_FIELD, "progress must be a number")
    if not math.isfinite(value) or value < 0 or value > 100:
        raise ValidationError(PROGRESS_FIELD, "progress must be between 0 and 100")


def utc_now_iso() -> str:
    """Current time as an ISO 8601 UTC string with millisecond precision"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_recorded_at(recorded_at: Union[str, datetime, None]) -> str:
    if recorded_at is None:
        return utc_now_iso()
    if isinstance(recorded_at, datetime):
        return recorded_at.isoformat()
    try:
        # fromisoformat only accepts a trailing Z from Python 3.11 on
        datetime.fromisoformat(recorded_at.replace("Z", "+00:00"))
    except (AttributeError, TypeError, ValueError):
        raise ValidationError("date", "date must be an ISO 8601 timestamp")
    return recorded_at


def build_payload(fields: Optional[Fields]) -> str:
    """Serialize fields for storage, defaulting progress into the stored payload"""
    if fields is None:
        fields = {}
    if not isinstance(fields, dict):
        raise ValidationError("fields", "fields must be an object")

    payload = dict(fields)
    if PROGRESS_FIELD in payload and payload[PROGRESS_FIELD] is not None:
        validate_progress(payload[PROGRESS_FIELD])
    else:
        payload[PROGRESS_FIELD] = DEFAULT_PROGRESS

    try:
        return json.dumps(payload, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise ValidationError("fields", f"fields must be JSON serializable: {e}")


@dataclass
class JournalRecord:
    """One user's journal entry for one calendar day"""
    username: str
    date_key: str
    recorded_at: str
    fields: Fields = field(default_factory=dict)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def progress(self) -> FieldValue:
        return self.fields.get(PROGRESS_FIELD, DEFAULT_PROGRESS)

    @classmethod
    def from_row(cls, row: dict):
        """Create JournalRecord from a logs row.

        Rows written before progress was defaulted on write get it filled in
        here; the stored payload is left alone.
        """
        fields = json.loads(row["payload"]) if row.get("payload") else {}
        if fields.get(PROGRESS_FIELD) is None:
            fields[PROGRESS_FIELD] = DEFAULT_PROGRESS
        return cls(
            username=row["username"],
            date_key=row["date_key"],
            recorded_at=row["recorded_at"],
            fields=fields,
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

"""CSV export of a user's journal.

Rows are ordered by day, most recent first. The first chunk carries a UTF-8
byte-order mark so spreadsheet tools pick the right encoding.
"""
import csv
import io
import json
import re
from typing import AsyncIterator, List, Optional

from daylog.models.record import JournalRecord

BOM = "\ufeff"
CSV_MEDIA_TYPE = "text/csv; charset=utf-8"
CSV_HEADER = ["date", "recorded_at", "progress", "action", "details"]
DEFAULT_ACTION = "workout"


def format_progress(value) -> str:
    """Render progress as a percentage, e.g. 50 -> '50%'"""
    if not value or isinstance(value, bool):
        value = 0
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return f"{value}%"


def _or_default(value, default):
    """Fall back to ``default`` for missing, null, empty-string, zero or false values.

    Empty lists and objects are real values and are kept.
    """
    if value is None or value is False or value == "":
        return default
    if isinstance(value, (int, float)) and value == 0:
        return default
    return value


def render_row(record: JournalRecord) -> List[str]:
    fields = record.fields
    action = _or_default(fields.get("action"), DEFAULT_ACTION)
    details = json.dumps(
        _or_default(fields.get("details"), {}), ensure_ascii=False, separators=(",", ":")
    )
    return [
        record.date_key,
        record.recorded_at,
        format_progress(fields.get("progress")),
        str(action),
        details,
    ]


def _encode_line(row: List[str], quoting: int) -> bytes:
    buffer = io.StringIO()
    csv.writer(buffer, quoting=quoting, lineterminator="\n").writerow(row)
    return buffer.getvalue().encode("utf-8")


def export_filename(username: str) -> str:
    safe = re.sub(r"[^A-Za-z0-9._-]", "_", username)
    return f"workout_logs_{safe}.csv"


async def _stream(
    first: Optional[JournalRecord], records: AsyncIterator[JournalRecord]
) -> AsyncIterator[bytes]:
    yield BOM.encode("utf-8") + _encode_line(CSV_HEADER, csv.QUOTE_MINIMAL)
    if first is None:
        return
    yield _encode_line(render_row(first), csv.QUOTE_ALL)
    async for record in records:
        yield _encode_line(render_row(record), csv.QUOTE_ALL)


async def export_csv(journal, username: str) -> AsyncIterator[bytes]:
    """Open the export for ``username`` and return its chunk stream.

    The first record is read here, so a storage failure raises before any
    response has started instead of cutting a 200 body short.
    """
    records = journal.iterate(username)
    first = await anext(records, None)
    return _stream(first, records)

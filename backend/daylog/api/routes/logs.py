import logging
from typing import List

from fastapi import APIRouter, Depends, Path
from fastapi.responses import StreamingResponse

from daylog.api.schemas import AckResponse, RecordResponse, RecordUpsertRequest
from daylog.auth.dependencies import get_current_username, get_journal
from daylog.db.repositories.journal_repository import JournalRepository
from daylog.services.export_service import CSV_MEDIA_TYPE, export_csv, export_filename

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/logs", tags=["logs"])


@router.post("/upsert", response_model=AckResponse)
async def upsert_log(
    entry: RecordUpsertRequest,
    username: str = Depends(get_current_username),
    journal: JournalRepository = Depends(get_journal),
):
    """Create or replace the record for a day"""
    fields = entry.fields
    await journal.upsert(username, entry.date_key, fields, recorded_at=entry.date)
    logger.info(f"Upserted {username}/{entry.date_key} (progress: {fields.get('progress', 0)}%)")
    return AckResponse()


@router.get("", response_model=List[RecordResponse])
async def list_logs(
    username: str = Depends(get_current_username),
    journal: JournalRepository = Depends(get_journal),
):
    """List the caller's records, most recent day first"""
    records = await journal.list(username)
    return [RecordResponse.from_record(record) for record in records]


# Registered before /{date_key} so "export" is not taken for a date
@router.get("/export")
async def export_logs(
    username: str = Depends(get_current_username),
    journal: JournalRepository = Depends(get_journal),
):
    """Download the caller's records as CSV"""
    logger.info(f"CSV export for {username}")
    return StreamingResponse(
        await export_csv(journal, username),
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{export_filename(username)}"'},
    )


@router.get("/{date_key}", response_model=RecordResponse)
async def get_log(
    date_key: str = Path(..., description="Calendar day, YYYY-MM-DD"),
    username: str = Depends(get_current_username),
    journal: JournalRepository = Depends(get_journal),
):
    """Get the caller's record for one day"""
    record = await journal.get(username, date_key)
    return RecordResponse.from_record(record)


@router.delete("/{date_key}", response_model=AckResponse)
async def delete_log(
    date_key: str = Path(..., description="Calendar day, YYYY-MM-DD"),
    username: str = Depends(get_current_username),
    journal: JournalRepository = Depends(get_journal),
):
    """Delete the caller's record for one day"""
    await journal.delete(username, date_key)
    logger.info(f"Deleted {username}/{date_key}")
    return AckResponse()

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, Optional

from daylog.models.record import JournalRecord


class RecordUpsertRequest(BaseModel):
    """Schema for writing a day's record.

    ``dateKey`` and ``date`` are reserved; every other key in the body is
    stored as a record field.
    """
    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "dateKey": "2024-01-01",
                "progress": 50,
                "action": "workout",
                "details": {"pushups": 20, "note": "felt good"}
            }
        },
    )

    date_key: Optional[str] = Field(None, alias="dateKey", description="Calendar day, YYYY-MM-DD")
    date: Optional[str] = Field(None, description="ISO 8601 timestamp of the write; defaults to now")

    @property
    def fields(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


class RecordResponse(BaseModel):
    """Schema for record response"""
    date_key: str
    recorded_at: str
    fields: Dict[str, Any]
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_record(cls, record: JournalRecord):
        return cls(
            date_key=record.date_key,
            recorded_at=record.recorded_at,
            fields=record.fields,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

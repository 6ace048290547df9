from pydantic import BaseModel
from typing import Optional


class AckResponse(BaseModel):
    """Acknowledgement for writes"""
    ok: bool = True


class ErrorResponse(BaseModel):
    """Standard error response"""
    success: bool = False
    message: str
    status_code: int
    error_code: Optional[str] = None
    path: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "success": False,
                "message": "No record for 2024-01-01",
                "status_code": 404,
                "error_code": "NOT_FOUND",
                "path": "/api/logs/2024-01-01"
            }
        }


class HealthResponse(BaseModel):
    """Health check response"""
    status: str = "healthy"
    service: str = "daylog"
    version: str
    timestamp: str
    database: str = "connected"
    schema_version: int = 0
    optional_columns: list[str] = []
    active_sessions: int = 0

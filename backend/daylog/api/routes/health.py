from fastapi import APIRouter, Request
from datetime import datetime

from daylog.api.schemas import HealthResponse

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check(request: Request):
    """Health check endpoint"""
    state = request.app.state
    database_status = "connected" if await state.db.ping() else "disconnected"

    return HealthResponse(
        status="healthy" if database_status == "connected" else "unhealthy",
        service=state.settings.APP_NAME,
        version=state.settings.VERSION,
        timestamp=datetime.now().isoformat(),
        database=database_status,
        schema_version=state.schema_state.version,
        optional_columns=sorted(state.schema_state.optional_columns),
        active_sessions=state.sessions.get_active_sessions_count()
    )

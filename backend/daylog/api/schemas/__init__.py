from .auth import (
    CredentialsRequest,
    AuthResponse,
    MeResponse
)
from .record import (
    RecordUpsertRequest,
    RecordResponse
)
from .common import (
    AckResponse,
    ErrorResponse,
    HealthResponse
)

__all__ = [
    # Auth schemas
    "CredentialsRequest",
    "AuthResponse",
    "MeResponse",

    # Record schemas
    "RecordUpsertRequest",
    "RecordResponse",

    # Common schemas
    "AckResponse",
    "ErrorResponse",
    "HealthResponse"
]

from pydantic import BaseModel, Field
from typing import Optional


class CredentialsRequest(BaseModel):
    """Request model for registration and login.

    Length rules are enforced by the authentication service so both entry
    points report them the same way.
    """
    username: Optional[str] = Field(None, description="Account name, at least 3 characters")
    password: Optional[str] = Field(None, description="Password, at least 4 characters")

    class Config:
        json_schema_extra = {
            "example": {"username": "alice", "password": "s3cret"}
        }


class AuthResponse(BaseModel):
    """Response model for successful registration or login"""
    ok: bool = True
    user: str
    session_token: str


class MeResponse(BaseModel):
    """Identity bound to the current request, if any"""
    user: Optional[str] = None

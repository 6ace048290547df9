from fastapi import Request
from typing import Optional

from daylog.core.errors import AuthRequiredError
from daylog.db.repositories.journal_repository import JournalRepository
from daylog.services.auth_service import AuthenticationService
from daylog.services.session_manager import SessionManager


def get_bearer_token(request: Request) -> Optional[str]:
    """Session token from the Authorization header, if any"""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    return auth_header[len("Bearer "):].strip() or None


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.sessions


def get_auth_service(request: Request) -> AuthenticationService:
    return request.app.state.auth_service


def get_journal(request: Request) -> JournalRepository:
    return request.app.state.journal


async def get_optional_username(request: Request) -> Optional[str]:
    """Username bound to the request, or None"""
    return get_session_manager(request).current_username(get_bearer_token(request))


async def get_current_username(request: Request) -> str:
    """
    Dependency that resolves the caller's identity.
    Use this on all protected endpoints.
    """
    username = await get_optional_username(request)
    if not username:
        raise AuthRequiredError()
    return username

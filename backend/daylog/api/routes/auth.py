import logging

from fastapi import APIRouter, Depends, Request

from daylog.api.schemas import AckResponse, AuthResponse, CredentialsRequest, MeResponse
from daylog.auth.dependencies import (
    get_auth_service,
    get_bearer_token,
    get_optional_username,
    get_session_manager,
)
from daylog.services.auth_service import AuthenticationService
from daylog.services.session_manager import SessionManager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["authentication"])


@router.post("/register", response_model=AuthResponse)
async def register_user(
    request: CredentialsRequest,
    auth_service: AuthenticationService = Depends(get_auth_service),
    sessions: SessionManager = Depends(get_session_manager),
):
    """Register a new account and log it in"""
    account = await auth_service.register(request.username, request.password)
    session_token = sessions.create_session(account.username)
    return AuthResponse(user=account.username, session_token=session_token)


@router.post("/login", response_model=AuthResponse)
async def login_user(
    request: CredentialsRequest,
    auth_service: AuthenticationService = Depends(get_auth_service),
    sessions: SessionManager = Depends(get_session_manager),
):
    """Login with username and password"""
    account = await auth_service.authenticate(request.username, request.password)
    session_token = sessions.create_session(account.username)
    return AuthResponse(user=account.username, session_token=session_token)


@router.post("/logout", response_model=AckResponse)
async def logout_user(request: Request, sessions: SessionManager = Depends(get_session_manager)):
    """End current session"""
    session_token = get_bearer_token(request)
    if session_token:
        username = sessions.current_username(session_token)
        sessions.end_session(session_token)
        if username:
            logger.info(f"User {username!r} logged out")
    return AckResponse()


@router.get("/me", response_model=MeResponse)
async def current_user(username: str = Depends(get_optional_username)):
    """Identity bound to this request, null when not logged in"""
    return MeResponse(user=username)

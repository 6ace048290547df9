import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Optional


@dataclass
class UserSession:
    """User session data structure"""
    session_id: str
    username: str
    created_at: datetime
    last_activity: datetime
    expires_at: datetime


class SessionManager:
    """In-memory session management mapping bearer tokens to usernames"""

    def __init__(self, session_duration_hours: int = 24):
        self.active_sessions: Dict[str, UserSession] = {}
        self.user_sessions: Dict[str, str] = {}  # username -> session_id mapping
        self.session_duration = timedelta(hours=session_duration_hours)

    def create_session(self, username: str) -> str:
        """Create new user session and return its token.

        A user holds at most one session; logging in again ends the previous one.
        """
        self.end_user_session(username)
        self.cleanup_expired_sessions()

        session_id = secrets.token_urlsafe(32)
        now = datetime.now()

        self.active_sessions[session_id] = UserSession(
            session_id=session_id,
            username=username,
            created_at=now,
            last_activity=now,
            expires_at=now + self.session_duration,
        )
        self.user_sessions[username] = session_id
        return session_id

    def get_session(self, session_id: str) -> Optional[UserSession]:
        """Get active session by session ID"""
        session = self.active_sessions.get(session_id)

        if not session:
            return None

        if datetime.now() > session.expires_at:
            self.end_session(session_id)
            return None

        session.last_activity = datetime.now()
        return session

    def current_username(self, session_id: Optional[str]) -> Optional[str]:
        """Username bound to the token, or None when there is no live session"""
        if not session_id:
            return None
        session = self.get_session(session_id)
        return session.username if session else None

    def end_session(self, session_id: str) -> bool:
        """End a specific session"""
        session = self.active_sessions.pop(session_id, None)
        if session is None:
            return False
        if self.user_sessions.get(session.username) == session_id:
            del self.user_sessions[session.username]
        return True

    def end_user_session(self, username: str) -> bool:
        """End the session held by a specific user"""
        session_id = self.user_sessions.get(username)
        if session_id:
            return self.end_session(session_id)
        return False

    def cleanup_expired_sessions(self) -> int:
        """Remove expired sessions"""
        now = datetime.now()
        expired = [sid for sid, s in self.active_sessions.items() if now > s.expires_at]
        for session_id in expired:
            self.end_session(session_id)
        return len(expired)

    def get_active_sessions_count(self) -> int:
        """Get count of active sessions"""
        self.cleanup_expired_sessions()
        return len(self.active_sessions)

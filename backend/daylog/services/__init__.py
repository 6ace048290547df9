from .auth_service import AuthenticationService
from .session_manager import SessionManager
from .export_service import export_csv

__all__ = [
    "AuthenticationService",
    "SessionManager",
    "export_csv",
]

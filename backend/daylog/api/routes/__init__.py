from .auth import router as auth_router
from .logs import router as logs_router
from .health import router as health_router

__all__ = [
    "auth_router",
    "logs_router",
    "health_router"
]

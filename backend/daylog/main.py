import logging
import socket
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from daylog.api.api import build_api_router
from daylog.api.errors import (
    daylog_exception_handler,
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from daylog.core.config import Settings, get_settings
from daylog.core.errors import DaylogError
from daylog.core.logging_config import configure_logging
from daylog.db.database import Database
from daylog.db.migrations import SchemaManager
from daylog.db.repositories.account_repository import AccountRepository
from daylog.db.repositories.journal_repository import JournalRepository
from daylog.services.auth_service import AuthenticationService
from daylog.services.session_manager import SessionManager

logger = logging.getLogger(__name__)


def network_addresses() -> List[str]:
    """Non-loopback addresses of this host, IPv4 first"""
    try:
        infos = socket.getaddrinfo(socket.gethostname(), None)
    except socket.gaierror:
        return []

    addresses = []
    for family, _, _, _, sockaddr in infos:
        address = sockaddr[0]
        if address.startswith("127.") or address == "::1" or address in addresses:
            continue
        if family in (socket.AF_INET, socket.AF_INET6):
            addresses.append(address)
    return sorted(addresses, key=lambda a: ":" in a)


def format_url(address: str, port: int) -> str:
    # IPv6 literals go in brackets inside URLs
    host = f"[{address}]" if ":" in address else address
    return f"http://{host}:{port}"


def log_access_hints(settings: Settings):
    port = settings.APP_PORT
    if settings.HOST:
        logger.info(f"Listening on {format_url(settings.HOST, port)}")
    logger.info("Available URLs:")
    logger.info(f"  - local: http://localhost:{port}")
    logger.info(f"  - loopback: http://127.0.0.1:{port}")
    for address in network_addresses():
        logger.info(f"  - network: {format_url(address, port)}")
    logger.info(f"Initial user: {settings.ADMIN_USER}")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application. Storage is opened by the lifespan, not at import."""
    if settings is None:
        settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup. Any failure here stops the process before it serves traffic.
        configure_logging(settings.LOG_LEVEL)

        db = Database(settings.DATABASE_PATH, busy_timeout_ms=settings.DB_BUSY_TIMEOUT_MS)
        await db.initialize()

        schema_state = await SchemaManager(db).prepare()
        logger.info(
            f"Schema version {schema_state.version}, "
            f"optional columns: {sorted(schema_state.optional_columns) or 'none'}"
        )

        accounts = AccountRepository(db)
        auth_service = AuthenticationService(accounts, bcrypt_rounds=settings.BCRYPT_ROUNDS)
        await auth_service.bootstrap_default_account(settings.ADMIN_USER, settings.ADMIN_PASS)

        app.state.settings = settings
        app.state.db = db
        app.state.schema_state = schema_state
        app.state.accounts = accounts
        app.state.journal = JournalRepository(db, schema_state)
        app.state.auth_service = auth_service
        app.state.sessions = SessionManager(settings.SESSION_DURATION_HOURS)

        log_access_hints(settings)

        yield

        # Shutdown. Connections are per operation, so only sessions remain.
        app.state.sessions.active_sessions.clear()
        app.state.sessions.user_sessions.clear()
        logger.info("Server stopped")

    app = FastAPI(
        title="daylog API",
        description="Per-user daily journal with one record per calendar day",
        version=settings.VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"]
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        if request.url.path != "/favicon.ico":
            logger.info(f"{request.method} {request.url.path}")
        return await call_next(request)

    # Add exception handlers
    app.add_exception_handler(DaylogError, daylog_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # Include API routes
    app.include_router(build_api_router(settings.API_PREFIX))

    @app.get("/")
    async def root():
        return {
            "message": "daylog API",
            "version": settings.VERSION,
            "status": "operational",
            "docs_url": "/docs"
        }

    return app


app = create_app()

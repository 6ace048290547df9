from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
import logging

from daylog.core.errors import DaylogError, StorageError

logger = logging.getLogger(__name__)


def _error_body(request: Request, status_code: int, message: str, error_code: str = None) -> dict:
    body = {
        "success": False,
        "message": message,
        "status_code": status_code,
        "path": str(request.url.path)
    }
    if error_code:
        body["error_code"] = error_code
    return body


async def daylog_exception_handler(request: Request, exc: DaylogError):
    """Map domain errors to their HTTP status with a caller-safe message"""
    if isinstance(exc, StorageError):
        logger.error(f"Storage error: {exc.message} - {request.url.path}")
    else:
        logger.warning(f"{type(exc).__name__}: {exc.message} - {request.url.path}")

    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc.status_code, exc.public_message, exc.error_code),
        headers=headers
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with structured error response"""
    logger.warning(f"HTTP {exc.status_code}: {exc.detail} - {request.url.path}")

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc.status_code, str(exc.detail)),
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request body validation errors"""
    logger.warning(f"Validation error: {exc.errors()} - {request.url.path}")

    body = _error_body(request, 422, "Validation error", "VALIDATION_ERROR")
    body["errors"] = jsonable_encoder(exc.errors())
    return JSONResponse(status_code=422, content=body)


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions"""
    logger.error(f"Unexpected error: {exc} - {request.url.path}", exc_info=exc)

    return JSONResponse(
        status_code=500,
        content=_error_body(request, 500, "Internal server error")
    )

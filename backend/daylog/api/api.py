from fastapi import APIRouter

from daylog.api.routes import (
    auth_router,
    logs_router,
    health_router
)


def build_api_router(prefix: str) -> APIRouter:
    """Main API router with every route module mounted under ``prefix``"""
    api_router = APIRouter(prefix=prefix)

    api_router.include_router(auth_router)
    api_router.include_router(logs_router)
    api_router.include_router(health_router)

    return api_router

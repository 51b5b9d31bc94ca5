"""API routes."""

from fastapi import APIRouter

from vault_api.routes.health import router as health_router
from vault_api.routes.secrets import access_router as secrets_access_router
from vault_api.routes.secrets import router as secrets_router

# Public routes (no session; the access-key route authenticates itself)
v1_public_router = APIRouter(prefix="/api/v1")
v1_public_router.include_router(secrets_access_router)

# Session routes; each endpoint takes the owner from ``require_owner``
v1_router = APIRouter(prefix="/api/v1")
v1_router.include_router(secrets_router)

__all__ = [
    "v1_public_router",
    "v1_router",
    "health_router",
]

"""Shared FastAPI dependencies for route handlers and the authorization gate.

The database and the auth client are built once in the application lifespan
and kept on ``app.state``; handlers reach them only through these functions,
so tests can put their own instances on a bare ``FastAPI()`` app.
"""

from fastapi import Depends, Request

from vault_api.config import get_settings
from vault_api.db.session import Database
from vault_api.errors import ServiceUnavailable
from vault_api.services import AuthServiceClient, IdentityResolver, SecretService


def require_database(request: Request) -> Database:
    """Return the app's database or raise 503."""
    db: Database | None = getattr(request.app.state, "database", None)
    if db is None or not db.is_connected:
        raise ServiceUnavailable("Database not available")
    return db


def get_auth_client(request: Request) -> AuthServiceClient:
    client: AuthServiceClient | None = getattr(request.app.state, "auth_client", None)
    if client is None:
        raise ServiceUnavailable("Auth service client not available")
    return client


def get_identity_resolver(
    db: Database = Depends(require_database),
) -> IdentityResolver:
    return IdentityResolver(db, timeout=get_settings().store_timeout_seconds)


def get_secret_service(db: Database = Depends(require_database)) -> SecretService:
    return SecretService(db, timeout=get_settings().store_timeout_seconds)

"""Owner-scoped secret operations on top of the secrets repository."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from vault_api.db.repositories import SecretsRepository
from vault_api.db.session import Database
from vault_api.db.tables import Secret
from vault_api.errors import NotFound, Unauthorized, UpstreamFailure, ValidationFailed
from vault_api.middleware import call_timeout
from vault_api.services.auth_client import AuthServiceClient

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)

SECRET_NOT_FOUND = "Secret not found"


def _require_content(name: str, data: dict[str, str]) -> None:
    if not name:
        raise ValidationFailed("Secret name is required")
    if not data:
        raise ValidationFailed("Secret data is required")


class SecretService:
    """CRUD over secrets for one owner at a time.

    Each call runs in its own session under a store timeout capped by the
    request deadline. Database errors (a refused connection included) and
    timeouts become ``UpstreamFailure`` prefixed with what was being attempted.
    """

    def __init__(self, db: Database, *, timeout: float = 10.0) -> None:
        self._db = db
        self._timeout = timeout

    @asynccontextmanager
    async def _store(self, action: str) -> AsyncIterator[SecretsRepository]:
        try:
            async with asyncio.timeout(call_timeout(self._timeout)):
                async with self._db.session() as session:
                    yield SecretsRepository(session)
        except TimeoutError as exc:
            raise UpstreamFailure(f"{action}: database timed out") from exc
        except (SQLAlchemyError, OSError) as exc:
            raise UpstreamFailure(f"{action}: {exc}") from exc

    async def list_secrets(self, owner_id: str) -> list[Secret]:
        async with self._store("Failed to fetch secrets") as repo:
            return await repo.list_secrets(owner_id)

    async def get_secret(self, owner_id: str, secret_id: str) -> Secret:
        async with self._store("Failed to fetch secret") as repo:
            secret = await repo.get_secret(owner_id, secret_id)
        if secret is None:
            raise NotFound(SECRET_NOT_FOUND)
        return secret

    async def get_secret_by_name(self, owner_id: str, name: str) -> Secret:
        async with self._store("Failed to fetch secret") as repo:
            secret = await repo.get_secret_by_name(owner_id, name)
        if secret is None:
            raise NotFound(SECRET_NOT_FOUND)
        return secret

    async def create_secret(
        self,
        owner_id: str,
        *,
        name: str,
        description: str = "",
        data: dict[str, str],
    ) -> Secret:
        _require_content(name, data)
        async with self._store("Failed to create secret") as repo:
            secret = await repo.create_secret(owner_id, name, description, data)
        logger.info(
            "Created secret", extra={"secret_id": secret.id, "owner_id": owner_id}
        )
        return secret

    async def update_secret(
        self,
        owner_id: str,
        secret_id: str,
        *,
        name: str,
        description: str = "",
        data: dict[str, str],
    ) -> Secret:
        _require_content(name, data)
        async with self._store("Failed to update secret") as repo:
            secret = await repo.update_secret(
                owner_id, secret_id, name=name, description=description, data=data
            )
        if secret is None:
            raise NotFound(SECRET_NOT_FOUND)
        return secret

    async def delete_secret(self, owner_id: str, secret_id: str) -> None:
        async with self._store("Failed to delete secret") as repo:
            deleted = await repo.delete_secret(owner_id, secret_id)
        if not deleted:
            raise NotFound(SECRET_NOT_FOUND)
        logger.info(
            "Deleted secret", extra={"secret_id": secret_id, "owner_id": owner_id}
        )

    async def get_secret_with_access_key(
        self,
        auth_client: AuthServiceClient,
        *,
        access_key: str,
        secret_key: str,
        name: str,
    ) -> Secret:
        """Fetch a secret by name for a machine client.

        The owner comes from the auth service's access-key validation, not
        from a session token.
        """
        if not access_key or not secret_key:
            raise ValidationFailed("Access key and secret key are required")
        if not name:
            raise ValidationFailed("Secret name is required")

        try:
            identity = await auth_client.validate_access_key(access_key, secret_key)
        except Unauthorized as exc:
            logger.info("Access key rejected: %s", exc.message)
            raise Unauthorized("Authentication failed") from exc

        return await self.get_secret_by_name(identity.owner_id, name)

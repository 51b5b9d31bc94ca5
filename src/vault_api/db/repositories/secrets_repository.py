"""Repository for owner-scoped secret operations."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from vault_api.db.tables import Secret


class SecretsRepository:
    """Repository for secret CRUD operations.

    Every method takes the owner id and filters on it; a secret owned by
    someone else behaves exactly like a missing one.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_secrets(self, owner_id: str) -> list[Secret]:
        """List the owner's secrets, newest first."""
        result = await self._session.execute(
            select(Secret)
            .where(Secret.user_id == owner_id)
            .order_by(Secret.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_secret(self, owner_id: str, secret_id: str) -> Secret | None:
        result = await self._session.execute(
            select(Secret).where(Secret.id == secret_id, Secret.user_id == owner_id)
        )
        return result.scalar_one_or_none()

    async def get_secret_by_name(self, owner_id: str, name: str) -> Secret | None:
        """Oldest secret with this name for the owner, if any."""
        result = await self._session.execute(
            select(Secret)
            .where(Secret.name == name, Secret.user_id == owner_id)
            .order_by(Secret.created_at.asc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def create_secret(
        self,
        owner_id: str,
        name: str,
        description: str,
        data: dict[str, str],
    ) -> Secret:
        now = datetime.now(UTC)
        secret = Secret(
            user_id=owner_id,
            name=name,
            description=description,
            data=dict(data),
            created_at=now,
            updated_at=now,
        )
        self._session.add(secret)
        await self._session.flush()
        return secret

    async def replace_secret(
        self,
        owner_id: str,
        secret_id: str,
        *,
        name: str,
        description: str,
        data: dict[str, str],
    ) -> bool:
        """Overwrite name/description/data. Returns False if no row matched."""
        result = await self._session.execute(
            update(Secret)
            .where(Secret.id == secret_id, Secret.user_id == owner_id)
            .values(
                name=name,
                description=description,
                data=dict(data),
                updated_at=datetime.now(UTC),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def update_secret(
        self,
        owner_id: str,
        secret_id: str,
        *,
        name: str,
        description: str,
        data: dict[str, str],
    ) -> Secret | None:
        """Replace a secret's content and return the stored result.

        Checks existence first, then writes, then re-reads. The write can
        still match nothing if the row was deleted after the check; that is
        reported as None, same as a missing row.
        """
        existing = await self.get_secret(owner_id, secret_id)
        if existing is None:
            return None
        replaced = await self.replace_secret(
            owner_id, secret_id, name=name, description=description, data=data
        )
        if not replaced:
            return None
        self._session.expunge(existing)
        return await self.get_secret(owner_id, secret_id)

    async def delete_secret(self, owner_id: str, secret_id: str) -> bool:
        """Delete a secret. Returns True if a row was removed."""
        result = await self._session.execute(
            delete(Secret)
            .where(Secret.id == secret_id, Secret.user_id == owner_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

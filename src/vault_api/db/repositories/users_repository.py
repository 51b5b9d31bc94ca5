"""Read-only repository over the user directory."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vault_api.db.tables import DirectoryUser


class UserDirectoryRepository:
    """Lookups against the externally owned ``users`` table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_user_by_username(self, username: str) -> DirectoryUser | None:
        result = await self._session.execute(
            select(DirectoryUser).where(DirectoryUser.username == username)
        )
        return result.scalar_one_or_none()

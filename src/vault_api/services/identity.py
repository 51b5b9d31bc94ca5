"""Username to owner-identifier resolution via the user directory."""

from __future__ import annotations

import asyncio
import logging
import re
import uuid

from sqlalchemy.exc import SQLAlchemyError

from vault_api.db.repositories import UserDirectoryRepository
from vault_api.db.session import Database
from vault_api.errors import InternalInconsistency, NotFound, UpstreamFailure
from vault_api.middleware import call_timeout

logger = logging.getLogger(__name__)

_OBJECT_ID_RE = re.compile(r"^[0-9a-fA-F]{24}$")


def canonical_owner_id(raw: object) -> str:
    """Canonical string form of a directory identifier.

    Accepts a 24-hex-digit object id (lowercased) or a UUID (hyphenated,
    lowercase). Anything else raises ``InternalInconsistency``.
    """
    if isinstance(raw, uuid.UUID):
        return str(raw)
    if isinstance(raw, str):
        if _OBJECT_ID_RE.match(raw):
            return raw.lower()
        try:
            return str(uuid.UUID(raw))
        except ValueError:
            pass
    raise InternalInconsistency("Invalid user ID format")


class IdentityResolver:
    """Maps a validated username to the identifier secrets are owned by."""

    def __init__(self, db: Database, *, timeout: float = 10.0) -> None:
        self._db = db
        self._timeout = timeout

    async def resolve_owner_id(self, username: str) -> str:
        try:
            async with asyncio.timeout(call_timeout(self._timeout)):
                async with self._db.session() as session:
                    user = await UserDirectoryRepository(session).get_user_by_username(
                        username
                    )
        except TimeoutError as exc:
            raise UpstreamFailure("User directory lookup timed out") from exc
        except (SQLAlchemyError, OSError) as exc:
            raise UpstreamFailure(f"Failed to look up user: {exc}") from exc

        if user is None:
            raise NotFound("User not found")
        return canonical_owner_id(user.id)

"""Authorization gate for session-authenticated routes."""

import logging

from fastapi import Depends, Request

from vault_api.deps import get_auth_client, get_identity_resolver
from vault_api.errors import Unauthorized, VaultError
from vault_api.services import AuthServiceClient, IdentityResolver

logger = logging.getLogger(__name__)

# Every rejection looks the same to the caller; the reason is only logged.
UNAUTHORIZED_USER = "Unauthorized User"


async def require_owner(
    request: Request,
    auth_client: AuthServiceClient = Depends(get_auth_client),
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> str:
    """FastAPI dependency resolving the caller's owner id from a bearer token.

    Expects ``Authorization: Bearer <token>``. The token is validated with the
    auth service on every request (nothing is cached), the username it yields
    is looked up in the user directory, and the resulting owner id is stored
    on ``request.state.owner_id`` and returned.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        logger.info("Rejected request: Authorization header is required")
        raise Unauthorized(UNAUTHORIZED_USER)

    try:
        username = await auth_client.validate_token(auth_header)
        owner_id = await resolver.resolve_owner_id(username)
    except VaultError as exc:
        logger.info("Rejected request: %s", exc.message)
        raise Unauthorized(UNAUTHORIZED_USER) from exc

    request.state.owner_id = owner_id
    return owner_id

"""Services used by the route handlers."""

from vault_api.services.auth_client import (
    AccessKeyIdentity,
    AuthServiceClient,
    strip_bearer,
)
from vault_api.services.identity import IdentityResolver, canonical_owner_id
from vault_api.services.secrets import SecretService

__all__ = [
    "AccessKeyIdentity",
    "AuthServiceClient",
    "IdentityResolver",
    "SecretService",
    "canonical_owner_id",
    "strip_bearer",
]

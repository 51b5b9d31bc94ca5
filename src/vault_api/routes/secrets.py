"""Secrets routes.

- List / Get / Create / Update / Delete: bearer-token session, scoped to the
  caller's own secrets
- Access (fetch by name with an access key + secret key): no session, the
  owner comes from the auth service
"""

import logging

from fastapi import APIRouter, Depends
from vault_shared.contracts import (
    AccessSecretRequest,
    CreateSecretRequest,
    MessageResponse,
    SecretResponse,
    SecretValuesResponse,
    SecretsListResponse,
    UpdateSecretRequest,
)

from vault_api.auth import require_owner
from vault_api.db.tables import Secret
from vault_api.deps import get_auth_client, get_secret_service
from vault_api.services import AuthServiceClient, SecretService
from vault_api.shared_utils import to_rfc3339

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/secrets", tags=["secrets"])

access_router = APIRouter(prefix="/secrets", tags=["secrets"])


def _to_response(secret: Secret) -> SecretResponse:
    return SecretResponse(
        id=secret.id,
        user_id=secret.user_id,
        name=secret.name,
        description=secret.description,
        data=secret.data,
        created_at=to_rfc3339(secret.created_at),
        updated_at=to_rfc3339(secret.updated_at),
    )


@router.get("", response_model=SecretsListResponse)
async def list_secrets(
    owner_id: str = Depends(require_owner),
    service: SecretService = Depends(get_secret_service),
):
    """List the caller's secrets."""
    secrets = await service.list_secrets(owner_id)
    items = [_to_response(s) for s in secrets]
    return SecretsListResponse(secrets=items, total=len(items))


@router.get("/{secret_id}", response_model=SecretResponse)
async def get_secret(
    secret_id: str,
    owner_id: str = Depends(require_owner),
    service: SecretService = Depends(get_secret_service),
):
    """Get one of the caller's secrets."""
    return _to_response(await service.get_secret(owner_id, secret_id))


@router.post("", response_model=SecretResponse, status_code=201)
async def create_secret(
    body: CreateSecretRequest,
    owner_id: str = Depends(require_owner),
    service: SecretService = Depends(get_secret_service),
):
    """Create a new secret owned by the caller."""
    secret = await service.create_secret(
        owner_id, name=body.name, description=body.description or "", data=body.data
    )
    return _to_response(secret)


@router.put("/{secret_id}", response_model=SecretResponse)
async def update_secret(
    secret_id: str,
    body: UpdateSecretRequest,
    owner_id: str = Depends(require_owner),
    service: SecretService = Depends(get_secret_service),
):
    """Replace a secret's name, description and data."""
    secret = await service.update_secret(
        owner_id,
        secret_id,
        name=body.name,
        description=body.description or "",
        data=body.data,
    )
    return _to_response(secret)


@router.delete("/{secret_id}", response_model=MessageResponse)
async def delete_secret(
    secret_id: str,
    owner_id: str = Depends(require_owner),
    service: SecretService = Depends(get_secret_service),
):
    """Delete a secret."""
    await service.delete_secret(owner_id, secret_id)
    return MessageResponse(message="Secret deleted successfully")


@access_router.post("/access", response_model=SecretValuesResponse)
async def get_secret_by_access_key(
    body: AccessSecretRequest,
    auth_client: AuthServiceClient = Depends(get_auth_client),
    service: SecretService = Depends(get_secret_service),
):
    """Fetch a secret's values by name using an access key pair."""
    secret = await service.get_secret_with_access_key(
        auth_client,
        access_key=body.access_key,
        secret_key=body.secret_key,
        name=body.name,
    )
    return SecretValuesResponse(
        name=secret.name, description=secret.description, data=secret.data
    )

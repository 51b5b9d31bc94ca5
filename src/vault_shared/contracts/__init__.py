"""API contract models."""

from vault_shared.contracts.common import ErrorResponse, MessageResponse
from vault_shared.contracts.health import HealthResponse
from vault_shared.contracts.secrets import (
    AccessSecretRequest,
    CreateSecretRequest,
    SecretResponse,
    SecretValuesResponse,
    SecretsListResponse,
    UpdateSecretRequest,
)

__all__ = [
    "AccessSecretRequest",
    "CreateSecretRequest",
    "ErrorResponse",
    "HealthResponse",
    "MessageResponse",
    "SecretResponse",
    "SecretValuesResponse",
    "SecretsListResponse",
    "UpdateSecretRequest",
]

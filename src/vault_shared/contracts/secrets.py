"""Secrets contract payloads.

Wire names are camelCase (``userId``, ``createdAt``, ``accessKey``); models
accept either the wire name or the Python attribute name on input.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SecretResponse(_CamelModel):
    """Secret as returned to its owner."""

    id: str
    user_id: str
    name: str
    description: str
    data: dict[str, str]
    created_at: str
    updated_at: str


class SecretsListResponse(_CamelModel):
    """All secrets owned by the caller."""

    secrets: list[SecretResponse]
    total: int


class CreateSecretRequest(_CamelModel):
    """Request body to create a secret."""

    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    data: dict[str, str] = Field(min_length=1)


class UpdateSecretRequest(_CamelModel):
    """Request body to replace a secret's name, description and data."""

    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    data: dict[str, str] = Field(min_length=1)


class AccessSecretRequest(_CamelModel):
    """Request body for the access-key fetch."""

    access_key: str = Field(min_length=1)
    secret_key: str = Field(min_length=1)
    name: str = Field(min_length=1)


class SecretValuesResponse(_CamelModel):
    """Secret values returned to an access-key client."""

    name: str
    description: str
    data: dict[str, str]


__all__ = [
    "AccessSecretRequest",
    "CreateSecretRequest",
    "SecretResponse",
    "SecretValuesResponse",
    "SecretsListResponse",
    "UpdateSecretRequest",
]

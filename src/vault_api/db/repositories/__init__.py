"""Repository classes for vault persistence."""

from vault_api.db.repositories.secrets_repository import SecretsRepository
from vault_api.db.repositories.users_repository import UserDirectoryRepository

__all__ = [
    "SecretsRepository",
    "UserDirectoryRepository",
]

"""Database module for the vault server."""

from vault_api.db.repositories import SecretsRepository, UserDirectoryRepository
from vault_api.db.session import Database
from vault_api.db.tables import Base, DirectoryUser, Secret

__all__ = [
    # Models
    "Base",
    "DirectoryUser",
    "Secret",
    # Repositories
    "SecretsRepository",
    "UserDirectoryRepository",
    # Database
    "Database",
]

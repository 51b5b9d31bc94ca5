"""Shared helpers."""

from vault_api.shared_utils.time_utils import to_rfc3339

__all__ = [
    "to_rfc3339",
]

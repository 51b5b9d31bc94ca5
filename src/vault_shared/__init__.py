"""Shared contracts for simple-vault packages."""

from vault_shared._version import __version__

__all__ = ["__version__"]

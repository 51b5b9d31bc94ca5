"""Error variants surfaced by the vault API.

Every failure that reaches the HTTP layer is one of these. The exception
handlers registered in ``vault_api.main`` render them as
``{"error": message}`` with the variant's status code.
"""

from __future__ import annotations

import logging
from typing import cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class VaultError(Exception):
    """Base class for all handled failures."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class Unauthorized(VaultError):
    """Missing, invalid or unverifiable credential."""

    status_code = 401


class NotFound(VaultError):
    """Record absent or not owned by the caller, or owning user unknown."""

    status_code = 404


class ValidationFailed(VaultError):
    """Malformed or incomplete request."""

    status_code = 400


class UpstreamFailure(VaultError):
    """Auth service or database unreachable, timed out, or answered oddly."""

    status_code = 500


class ServiceUnavailable(UpstreamFailure):
    """A dependency was never initialised for this process."""

    status_code = 503


class InternalInconsistency(VaultError):
    """An authenticated response is missing a field we rely on."""

    status_code = 500


async def vault_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    error = cast(VaultError, exc)
    if error.status_code >= 500:
        logger.warning("%s: %s", type(error).__name__, error.message)
    return JSONResponse(status_code=error.status_code, content={"error": error.message})


async def request_validation_handler(
    _request: Request, exc: Exception
) -> JSONResponse:
    """Render body validation errors as 400 instead of FastAPI's 422."""
    problems = []
    for err in cast(RequestValidationError, exc).errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        message = err.get("msg", "invalid value")
        problems.append(f"{location}: {message}" if location else message)
    return JSONResponse(
        status_code=400,
        content={"error": "; ".join(problems) or "Invalid request body"},
    )


INTERNAL_SERVER_ERROR = "Internal server error"


async def unhandled_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler so unexpected failures keep the JSON error shape."""
    logger.error("Unhandled error: %r", exc, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": INTERNAL_SERVER_ERROR})


__all__ = [
    "InternalInconsistency",
    "NotFound",
    "ServiceUnavailable",
    "Unauthorized",
    "UpstreamFailure",
    "ValidationFailed",
    "VaultError",
    "request_validation_handler",
    "unhandled_error_handler",
    "vault_error_handler",
]

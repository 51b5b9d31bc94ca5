"""Client for the external authentication service."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from vault_api.errors import InternalInconsistency, Unauthorized, UpstreamFailure
from vault_api.middleware import call_timeout

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class TokenValidationResponse(BaseModel):
    """Body of ``POST /validate``."""

    valid: bool
    username: str = ""
    message: str = ""


class AccessKeyAuthResponse(BaseModel):
    """Body of ``POST /auth/apikey``."""

    model_config = ConfigDict(populate_by_name=True)

    token: str = ""
    user_id: str = Field(default="", alias="userID")
    username: str = ""
    email: str = ""
    message: str = ""


@dataclass(frozen=True)
class AccessKeyIdentity:
    """Owner resolved from an access-key/secret-key pair."""

    owner_id: str
    username: str
    email: str


def strip_bearer(token: str) -> str:
    """Drop a leading ``Bearer `` if present."""
    if len(token) > len(BEARER_PREFIX) and token.startswith(BEARER_PREFIX):
        return token[len(BEARER_PREFIX) :]
    return token


class AuthServiceClient:
    """Validates bearer tokens and access keys against the auth service.

    One outbound request per call, no retries. Each request's timeout is
    ``timeout`` capped by whatever is left of the current request deadline.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = httpx.AsyncClient(base_url=self._base_url, transport=transport)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _post(self, path: str, payload: dict[str, Any]) -> httpx.Response:
        timeout = call_timeout(self._timeout)
        try:
            response = await self._client.post(path, json=payload, timeout=timeout)
        except httpx.TimeoutException as exc:
            raise UpstreamFailure(
                f"Auth service call {path} timed out after {timeout:.1f}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamFailure(f"Failed to call auth service {path}: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            raise Unauthorized(
                f"Auth service returned error: {response.status_code} - {response.text}"
            )
        return response

    async def validate_token(self, bearer_token: str) -> str:
        """Return the username the token belongs to."""
        response = await self._post("/validate", {"token": strip_bearer(bearer_token)})
        try:
            body = TokenValidationResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise UpstreamFailure(f"Failed to decode token validation response: {exc}") from exc

        if not body.valid:
            raise Unauthorized(f"Token validation failed: {body.message}")
        if not body.username:
            raise InternalInconsistency("Token validation response has no username")
        return body.username

    async def validate_access_key(
        self, access_key: str, secret_key: str
    ) -> AccessKeyIdentity:
        """Return the owner identity behind an access-key/secret-key pair."""
        response = await self._post(
            "/auth/apikey", {"accessKey": access_key, "secretKey": secret_key}
        )
        try:
            body = AccessKeyAuthResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise UpstreamFailure(f"Failed to decode access key response: {exc}") from exc

        if not body.user_id:
            raise InternalInconsistency("User ID not found in auth response")
        return AccessKeyIdentity(
            owner_id=body.user_id, username=body.username, email=body.email
        )

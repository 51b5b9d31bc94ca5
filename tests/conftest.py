from __future__ import annotations

import json
import os
from collections.abc import AsyncIterator, Iterator
from dataclasses import dataclass, field
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
import vault_api.config as config_module
from httpx import ASGITransport, AsyncClient

from vault_api.db.session import Database
from vault_api.db.tables import DirectoryUser
from vault_api.services import AuthServiceClient

AUTH_BASE_URL = "http://auth.test"

ALICE_ID = "64b7f0c2a1d3e4f5a6b7c8d9"
BOB_ID = "64b7f0c2a1d3e4f5a6b7c8da"


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for key in list(os.environ):
        if key.startswith("VAULT_"):
            monkeypatch.delenv(key, raising=False)
    config_module.get_settings.cache_clear()
    yield
    config_module.get_settings.cache_clear()


@pytest_asyncio.fixture
async def sqlite_db(tmp_path: Path) -> AsyncIterator[Database]:
    db_path = tmp_path / "vault-test.db"
    db = Database(f"sqlite+aiosqlite:///{db_path}")
    await db.connect()
    await db.create_tables()
    try:
        yield db
    finally:
        await db.disconnect()


async def seed_user(db: Database, *, user_id: str, username: str) -> None:
    async with db.session() as session:
        session.add(
            DirectoryUser(id=user_id, username=username, email=f"{username}@example.test")
        )


@dataclass
class FakeAuthService:
    """In-memory stand-in for the auth service, served through MockTransport."""

    tokens: dict[str, str] = field(default_factory=dict)
    access_keys: dict[tuple[str, str], str] = field(default_factory=dict)
    requests: list[tuple[str, dict]] = field(default_factory=list)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content or b"{}")
        self.requests.append((request.url.path, body))

        if request.url.path == "/validate":
            username = self.tokens.get(body.get("token", ""))
            if username is None:
                return httpx.Response(
                    200, json={"valid": False, "message": "token expired"}
                )
            return httpx.Response(200, json={"valid": True, "username": username})

        if request.url.path == "/auth/apikey":
            owner_id = self.access_keys.get(
                (body.get("accessKey", ""), body.get("secretKey", ""))
            )
            if owner_id is None:
                return httpx.Response(401, json={"message": "Invalid credentials"})
            return httpx.Response(
                200,
                json={
                    "token": "session-token",
                    "userID": owner_id,
                    "username": "machine",
                    "email": "machine@example.test",
                    "message": "ok",
                },
            )

        return httpx.Response(404, json={"message": "no such endpoint"})

    @property
    def paths(self) -> list[str]:
        return [path for path, _ in self.requests]


@pytest.fixture
def fake_auth() -> FakeAuthService:
    return FakeAuthService()


@pytest_asyncio.fixture
async def auth_client(fake_auth: FakeAuthService) -> AsyncIterator[AuthServiceClient]:
    client = AuthServiceClient(
        AUTH_BASE_URL, timeout=5.0, transport=httpx.MockTransport(fake_auth)
    )
    try:
        yield client
    finally:
        await client.aclose()


@pytest_asyncio.fixture
async def api_client(
    sqlite_db: Database, auth_client: AuthServiceClient
) -> AsyncIterator[AsyncClient]:
    from vault_api.main import create_app

    app = create_app()
    app.state.database = sqlite_db
    app.state.auth_client = auth_client

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
    ) as client:
        yield client

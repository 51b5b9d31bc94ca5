from __future__ import annotations

from contextlib import asynccontextmanager

import pytest

from vault_api.db.repositories import SecretsRepository
from vault_api.errors import (
    InternalInconsistency,
    NotFound,
    Unauthorized,
    UpstreamFailure,
    ValidationFailed,
)
from vault_api.services import SecretService


@pytest.mark.asyncio
async def test_other_owners_cannot_read_update_or_delete(sqlite_db) -> None:
    service = SecretService(sqlite_db)
    secret = await service.create_secret(
        "u1", name="db-creds", data={"user": "a", "pass": "b"}
    )

    with pytest.raises(NotFound, match="Secret not found"):
        await service.get_secret("u2", secret.id)
    with pytest.raises(NotFound):
        await service.update_secret("u2", secret.id, name="stolen", data={"x": "y"})
    with pytest.raises(NotFound):
        await service.delete_secret("u2", secret.id)

    untouched = await service.get_secret("u1", secret.id)
    assert untouched.name == "db-creds"
    assert untouched.data == {"user": "a", "pass": "b"}


@pytest.mark.asyncio
async def test_create_then_get_round_trips_content(sqlite_db) -> None:
    service = SecretService(sqlite_db)
    created = await service.create_secret(
        "u1", name="api", description="prod key", data={"key": "k-123"}
    )

    fetched = await service.get_secret("u1", created.id)

    assert created.id
    assert fetched.id == created.id
    assert fetched.user_id == "u1"
    assert (fetched.name, fetched.description, fetched.data) == (
        "api",
        "prod key",
        {"key": "k-123"},
    )


@pytest.mark.asyncio
async def test_repeated_update_is_stable_and_timestamps_do_not_go_back(
    sqlite_db,
) -> None:
    service = SecretService(sqlite_db)
    created = await service.create_secret("u1", name="svc", data={"a": "1"})

    first = await service.update_secret(
        "u1", created.id, name="svc", description="d", data={"a": "2"}
    )
    second = await service.update_secret(
        "u1", created.id, name="svc", description="d", data={"a": "2"}
    )

    assert (first.name, first.description, first.data) == (
        second.name,
        second.description,
        second.data,
    )
    assert second.updated_at >= first.updated_at
    assert second.created_at == first.created_at


@pytest.mark.asyncio
async def test_delete_twice_reports_not_found_the_second_time(sqlite_db) -> None:
    service = SecretService(sqlite_db)
    created = await service.create_secret("u1", name="tmp", data={"a": "1"})

    await service.delete_secret("u1", created.id)
    with pytest.raises(NotFound):
        await service.delete_secret("u1", created.id)


@pytest.mark.asyncio
async def test_list_is_scoped_per_owner(sqlite_db) -> None:
    service = SecretService(sqlite_db)
    created = await service.create_secret(
        "u1", name="db-creds", data={"user": "a", "pass": "b"}
    )

    assert [s.id for s in await service.list_secrets("u1")] == [created.id]
    assert await service.list_secrets("u2") == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("name", "data", "message"),
    [
        ("", {"a": "1"}, "name is required"),
        ("x", {}, "data is required"),
    ],
)
async def test_create_and_update_validate_required_fields(
    sqlite_db, name: str, data: dict[str, str], message: str
) -> None:
    service = SecretService(sqlite_db)

    with pytest.raises(ValidationFailed, match=message):
        await service.create_secret("u1", name=name, data=data)
    with pytest.raises(ValidationFailed, match=message):
        await service.update_secret("u1", "any-id", name=name, data=data)


@pytest.mark.asyncio
async def test_update_surfaces_concurrent_delete_as_not_found(
    sqlite_db, monkeypatch
) -> None:
    service = SecretService(sqlite_db)
    created = await service.create_secret("u1", name="racy", data={"a": "1"})

    original_replace = SecretsRepository.replace_secret

    async def delete_then_replace(self, owner_id, secret_id, **fields):  # type: ignore[no-untyped-def]
        await self.delete_secret(owner_id, secret_id)
        return await original_replace(self, owner_id, secret_id, **fields)

    monkeypatch.setattr(SecretsRepository, "replace_secret", delete_then_replace)

    with pytest.raises(NotFound, match="Secret not found"):
        await service.update_secret("u1", created.id, name="racy", data={"a": "2"})


@pytest.mark.asyncio
async def test_store_errors_are_wrapped_with_context(sqlite_db) -> None:
    service = SecretService(sqlite_db)
    await sqlite_db.drop_tables()

    with pytest.raises(UpstreamFailure, match="^Failed to fetch secrets: "):
        await service.list_secrets("u1")
    with pytest.raises(UpstreamFailure, match="^Failed to create secret: "):
        await service.create_secret("u1", name="n", data={"a": "1"})


class _RefusingDatabase:
    @asynccontextmanager
    async def session(self):  # type: ignore[no-untyped-def]
        raise ConnectionRefusedError(111, "Connection refused")
        yield  # pragma: no cover


@pytest.mark.asyncio
async def test_refused_connections_are_wrapped_with_context() -> None:
    service = SecretService(_RefusingDatabase())  # type: ignore[arg-type]

    with pytest.raises(UpstreamFailure, match="^Failed to fetch secret: "):
        await service.get_secret("u1", "s-1")
    with pytest.raises(UpstreamFailure, match="^Failed to delete secret: "):
        await service.delete_secret("u1", "s-1")


@pytest.mark.asyncio
async def test_access_key_lookup_is_scoped_to_the_key_owner(
    sqlite_db, fake_auth, auth_client
) -> None:
    service = SecretService(sqlite_db)
    await service.create_secret(
        "owner-1", name="deploy", description="ci", data={"token": "t1"}
    )
    await service.create_secret("owner-2", name="other", data={"token": "t2"})
    fake_auth.access_keys[("AK", "SK")] = "owner-1"

    secret = await service.get_secret_with_access_key(
        auth_client, access_key="AK", secret_key="SK", name="deploy"
    )
    assert (secret.name, secret.description, secret.data) == (
        "deploy",
        "ci",
        {"token": "t1"},
    )

    with pytest.raises(NotFound):
        await service.get_secret_with_access_key(
            auth_client, access_key="AK", secret_key="SK", name="missing"
        )
    with pytest.raises(NotFound):
        await service.get_secret_with_access_key(
            auth_client, access_key="AK", secret_key="SK", name="other"
        )


@pytest.mark.asyncio
async def test_access_key_lookup_failures(sqlite_db, auth_client) -> None:
    service = SecretService(sqlite_db)

    with pytest.raises(ValidationFailed, match="Access key and secret key"):
        await service.get_secret_with_access_key(
            auth_client, access_key="", secret_key="SK", name="x"
        )
    with pytest.raises(ValidationFailed, match="name is required"):
        await service.get_secret_with_access_key(
            auth_client, access_key="AK", secret_key="SK", name=""
        )
    with pytest.raises(Unauthorized, match="^Authentication failed$"):
        await service.get_secret_with_access_key(
            auth_client, access_key="AK", secret_key="bad", name="x"
        )


@pytest.mark.asyncio
async def test_access_key_lookup_without_owner_in_response(sqlite_db) -> None:
    class _NoOwnerClient:
        async def validate_access_key(self, access_key: str, secret_key: str):  # type: ignore[no-untyped-def]
            raise InternalInconsistency("User ID not found in auth response")

    with pytest.raises(InternalInconsistency):
        await SecretService(sqlite_db).get_secret_with_access_key(
            _NoOwnerClient(),  # type: ignore[arg-type]
            access_key="AK",
            secret_key="SK",
            name="x",
        )

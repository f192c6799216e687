"""
Tests for the token store and endpoints.
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit_log import AuditLogEntry
from app.models.token import Token
from app.schemas.tokens import TokenPayload
from app.services.access_control import Identity
from app.services.audit_service import AuditService
from app.services.crypto_service import FieldCipher
from app.services.token_service import TokenStore
from app.utils.exceptions import AuthorizationError, NotFoundError, ValidationError

from factories import token_payload

ADMIN = Identity(id=1, username="admin", role="admin")
USER = Identity(id=2, username="alice", role="user")


@pytest.fixture
def store(db_session: AsyncSession, audit: AuditService, cipher: FieldCipher) -> TokenStore:
    return TokenStore(db_session, audit, cipher)


def _payload(**overrides) -> TokenPayload:
    return TokenPayload(**token_payload(**overrides))


async def test_tokens_are_encrypted_at_rest(store: TokenStore, db_session: AsyncSession, cipher: FieldCipher):
    created = await store.create(USER, _payload())

    assert created.access_token == "access-abcdef"
    assert created.refresh_token == "refresh-abcdef"

    row = (await db_session.execute(select(Token))).scalar_one()
    assert row.access_token != "access-abcdef"
    assert row.refresh_token != "refresh-abcdef"
    assert cipher.decrypt(row.refresh_token) == "refresh-abcdef"


@pytest.mark.parametrize(
    "overrides",
    [
        {"integration_id": 0},
        {"access_token": "short"},
        {"refresh_token": "short"},
    ],
)
async def test_validation(store: TokenStore, db_session: AsyncSession, overrides):
    with pytest.raises(ValidationError):
        await store.create(USER, _payload(**overrides))

    assert (await db_session.execute(select(Token))).scalars().all() == []
    assert (await db_session.execute(select(AuditLogEntry))).scalars().all() == []


async def test_expiry_is_required(store: TokenStore):
    payload = _payload()
    payload.expires_at = None

    with pytest.raises(ValidationError):
        await store.create(USER, payload)


async def test_minimum_datetime_counts_as_missing(store: TokenStore):
    payload = _payload()
    payload.expires_at = datetime.min

    with pytest.raises(ValidationError):
        await store.create(USER, payload)


def test_expiry_must_be_a_timestamp():
    body = token_payload()
    body["expires_at"] = "tomorrow"

    with pytest.raises(SchemaValidationError):
        TokenPayload(**body)


async def test_soft_delete(store: TokenStore, db_session: AsyncSession):
    created = await store.create(USER, _payload())

    await store.delete(ADMIN, created.id)

    # The row survives with a tombstone
    row = (await db_session.execute(select(Token))).scalar_one()
    assert row.deleted_at is not None
    assert row.is_deleted()

    assert await store.list(USER) == []
    with pytest.raises(NotFoundError):
        await store.get(USER, created.id)
    with pytest.raises(NotFoundError):
        await store.update(USER, created.id, _payload())
    with pytest.raises(NotFoundError):
        await store.delete(ADMIN, created.id)


async def test_delete_requires_admin(store: TokenStore, db_session: AsyncSession):
    created = await store.create(USER, _payload())

    with pytest.raises(AuthorizationError):
        await store.delete(USER, created.id)

    result = await db_session.execute(select(AuditLogEntry).where(AuditLogEntry.action == "delecao_token"))
    assert result.scalars().all() == []


async def test_update(store: TokenStore):
    created = await store.create(USER, _payload())
    new_expiry = datetime.now(timezone.utc) + timedelta(days=2)

    updated = await store.update(
        USER,
        created.id,
        _payload(integration_id=5, access_token="access-rotated", expires_at=new_expiry),
    )

    assert updated.integration_id == 5
    assert updated.access_token == "access-rotated"
    assert updated.refresh_token == "refresh-abcdef"


async def test_every_operation_is_audited(store: TokenStore, db_session: AsyncSession):
    created = await store.create(USER, _payload())
    await store.list(USER)
    await store.get(USER, created.id)
    await store.update(USER, created.id, _payload())
    await store.delete(ADMIN, created.id)

    result = await db_session.execute(select(AuditLogEntry).order_by(AuditLogEntry.id))
    entries = result.scalars().all()
    assert [(e.action, e.status) for e in entries] == [
        ("cadastro_token", "OK"),
        ("listagem_tokens", "OK"),
        ("consulta_token_id", "OK"),
        ("atualizacao_token", "OK"),
        ("delecao_token", "OK"),
    ]


def test_token_endpoints(client: TestClient, auth_headers, admin_headers):
    response = client.post("/tokens", json=token_payload(), headers=auth_headers)
    assert response.status_code == 201
    created = response.json()
    assert created["access_token"] == "access-abcdef"

    response = client.get(f"/tokens/{created['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["refresh_token"] == "refresh-abcdef"

    response = client.put(
        f"/tokens/{created['id']}",
        json=token_payload(access_token="access-rotated"),
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["access_token"] == "access-rotated"

    response = client.delete(f"/tokens/{created['id']}", headers=auth_headers)
    assert response.status_code == 403

    response = client.delete(f"/tokens/{created['id']}", headers=admin_headers)
    assert response.status_code == 204

    response = client.get("/tokens", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == []


def test_token_missing_expiry_is_rejected(client: TestClient, auth_headers):
    body = token_payload()
    del body["expires_at"]

    response = client.post("/tokens", json=body, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["field"] == "expires_at"

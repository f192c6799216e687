"""
Tests for the audit log service and endpoint.
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit_log import AuditLogEntry
from app.services.access_control import Identity
from app.services.audit_service import AuditLogQuery, AuditService
from app.utils.exceptions import AuthorizationError, ValidationError

ADMIN = Identity(id=1, username="admin", role="admin")
USER = Identity(id=2, username="alice", role="user")


async def _insert(db: AsyncSession, timestamp: datetime, user: str, action: str, status: str = "OK") -> AuditLogEntry:
    entry = AuditLogEntry(timestamp=timestamp, user=user, action=action, status=status, details="")
    db.add(entry)
    await db.commit()
    await db.refresh(entry)
    return entry


@pytest.mark.parametrize(
    "page, page_size, expected_page, expected_size",
    [
        (None, None, 1, 50),
        (0, 0, 1, 50),
        (-3, 201, 1, 50),
        (2, 200, 2, 200),
        (3, 1, 3, 1),
    ],
)
def test_query_pagination_clamping(page, page_size, expected_page, expected_size):
    params = AuditLogQuery(page=page, page_size=page_size)

    assert params.page == expected_page
    assert params.page_size == expected_size
    assert params.offset == (expected_page - 1) * expected_size


async def test_append_persists_entry(audit: AuditService):
    entry = await audit.append("alice", "cadastro_token", "OK", "id=1")

    assert entry.id is not None
    assert entry.user == "alice"
    assert entry.timestamp is not None


async def test_append_anonymous_actor(audit: AuditService):
    entry = await audit.append(None, "cadastro_usuario", "FAIL")

    assert entry.user == ""
    assert entry.details == ""


async def test_append_rejects_unknown_status(audit: AuditService):
    with pytest.raises(ValidationError):
        await audit.append("alice", "cadastro_token", "MAYBE")


async def test_query_newest_first(db_session: AsyncSession, audit: AuditService):
    # Inserted out of chronological order
    await _insert(db_session, datetime(2024, 1, 2, 12, 0), "alice", "b")
    await _insert(db_session, datetime(2024, 1, 3, 12, 0), "alice", "c")
    await _insert(db_session, datetime(2024, 1, 1, 12, 0), "alice", "a")

    entries = await audit.query(ADMIN, AuditLogQuery())

    assert [e.action for e in entries] == ["c", "b", "a"]


async def test_query_filters_are_conjunctive(db_session: AsyncSession, audit: AuditService):
    await _insert(db_session, datetime(2024, 1, 1, 12, 0), "alice", "cadastro_token", "OK")
    await _insert(db_session, datetime(2024, 1, 2, 12, 0), "alice", "cadastro_token", "FAIL")
    await _insert(db_session, datetime(2024, 1, 2, 13, 0), "bob", "cadastro_token", "OK")
    await _insert(db_session, datetime(2024, 1, 3, 12, 0), "alice", "delecao_token", "OK")

    by_user = await audit.query(ADMIN, AuditLogQuery(user="alice"))
    assert len(by_user) == 3

    by_user_and_action = await audit.query(ADMIN, AuditLogQuery(user="alice", action="cadastro_token"))
    assert len(by_user_and_action) == 2

    failed = await audit.query(ADMIN, AuditLogQuery(user="alice", action="cadastro_token", status="FAIL"))
    assert len(failed) == 1
    assert failed[0].timestamp.day == 2


async def test_query_time_range_is_inclusive(db_session: AsyncSession, audit: AuditService):
    await _insert(db_session, datetime(2024, 1, 1, 12, 0), "alice", "a")
    await _insert(db_session, datetime(2024, 1, 2, 12, 0), "alice", "b")
    await _insert(db_session, datetime(2024, 1, 3, 12, 0), "alice", "c")

    entries = await audit.query(
        ADMIN,
        AuditLogQuery(start=datetime(2024, 1, 2, 12, 0), end=datetime(2024, 1, 3, 12, 0)),
    )

    assert [e.action for e in entries] == ["c", "b"]


def test_query_bounds_are_normalised_to_utc():
    plus_two = timezone(timedelta(hours=2))
    params = AuditLogQuery(start=datetime(2024, 1, 2, 14, 0, tzinfo=plus_two), end=datetime(2024, 1, 3, 12, 0))

    assert params.start == datetime(2024, 1, 2, 12, 0, tzinfo=timezone.utc)
    assert params.start.utcoffset() == timedelta(0)
    # Naive bounds are taken as UTC already
    assert params.end == datetime(2024, 1, 3, 12, 0)


async def test_query_time_range_with_offset(db_session: AsyncSession, audit: AuditService):
    await _insert(db_session, datetime(2024, 1, 1, 12, 0), "alice", "a")
    await _insert(db_session, datetime(2024, 1, 2, 12, 0), "alice", "b")
    await _insert(db_session, datetime(2024, 1, 3, 12, 0), "alice", "c")
    plus_two = timezone(timedelta(hours=2))

    entries = await audit.query(
        ADMIN,
        AuditLogQuery(
            start=datetime(2024, 1, 2, 14, 0, tzinfo=plus_two),
            end=datetime(2024, 1, 3, 14, 0, tzinfo=plus_two),
        ),
    )

    assert [e.action for e in entries] == ["c", "b"]


async def test_query_pages(db_session: AsyncSession, audit: AuditService):
    for day in range(1, 6):
        await _insert(db_session, datetime(2024, 1, day), "alice", f"a{day}")

    first = await audit.query(ADMIN, AuditLogQuery(page=1, page_size=2))
    third = await audit.query(ADMIN, AuditLogQuery(page=3, page_size=2))

    assert [e.action for e in first] == ["a5", "a4"]
    assert [e.action for e in third] == ["a1"]


async def test_query_requires_admin(audit: AuditService):
    with pytest.raises(AuthorizationError):
        await audit.query(USER, AuditLogQuery())


def test_audit_logs_endpoint_forbidden_for_user(client: TestClient, auth_headers):
    response = client.get("/audit-logs", headers=auth_headers)

    assert response.status_code == 403


def test_audit_logs_endpoint_requires_token(client: TestClient):
    response = client.get("/audit-logs")

    assert response.status_code == 401


def test_audit_logs_endpoint_lists_registrations(client: TestClient, admin_headers):
    response = client.get(
        "/audit-logs",
        params={"action": "cadastro_usuario", "status": "OK", "page": 0, "page_size": 500},
        headers=admin_headers,
    )

    assert response.status_code == 200
    entries = response.json()
    assert len(entries) == 1
    assert entries[0]["user"] == "admin"
    assert entries[0]["status"] == "OK"

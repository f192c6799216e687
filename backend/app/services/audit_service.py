"""
Audit trail service.

Entries are only ever appended and queried. Stores call record(), which is
best-effort: a failed audit write is logged and dropped so it can never undo
or block the operation it documents.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import Depends
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.audit_log import AuditLogEntry, AUDIT_STATUS_OK, AUDIT_STATUS_FAIL
from app.services.access_control import Identity, ensure_admin
from app.services.repository import Repository
from app.utils.exceptions import StorageError, ValidationError

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc)


@dataclass
class AuditLogQuery:
    """Conjunctive audit filters; a None filter matches every value."""

    user: Optional[str] = None
    action: Optional[str] = None
    status: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    page: Optional[int] = 1
    page_size: Optional[int] = DEFAULT_PAGE_SIZE

    def __post_init__(self):
        if self.page is None or self.page < 1:
            self.page = 1
        if self.page_size is None or self.page_size < 1 or self.page_size > MAX_PAGE_SIZE:
            self.page_size = DEFAULT_PAGE_SIZE
        # Stored timestamps are UTC; SQLite drops the offset on bind
        self.start = _as_utc(self.start)
        self.end = _as_utc(self.end)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


class AuditService:
    """Append and query audit log entries."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = Repository(db, AuditLogEntry)

    async def append(self, actor: Optional[str], action: str, status: str, details: str = "") -> AuditLogEntry:
        """
        Persist one audit entry.

        Raises:
            StorageError: If the durable write fails.
        """
        if status not in (AUDIT_STATUS_OK, AUDIT_STATUS_FAIL):
            raise ValidationError("status must be OK or FAIL", field="status")
        entry = AuditLogEntry(
            user=actor or "",
            action=action,
            status=status,
            details=details or "",
        )
        entry = await self.repo.create(entry)
        logger.info(f"[AUDIT] [{status}] {action} | user={actor or '-'} | {details}")
        return entry

    async def record(self, actor: Optional[str], action: str, status: str, details: str = "") -> None:
        """Best-effort append; failures are logged and never re-raised."""
        try:
            await self.append(actor, action, status, details)
        except StorageError as e:
            logger.error(f"[AUDIT] dropped {action} ({status}) for user={actor or '-'}: {e.message}")

    async def ok(self, actor: Optional[str], action: str, details: str = "") -> None:
        await self.record(actor, action, AUDIT_STATUS_OK, details)

    async def fail(self, actor: Optional[str], action: str, details: str = "") -> None:
        await self.record(actor, action, AUDIT_STATUS_FAIL, details)

    async def query(self, identity: Identity, params: AuditLogQuery) -> List[AuditLogEntry]:
        """List entries newest first. Admin only."""
        ensure_admin(identity)

        criteria = []
        if params.user:
            criteria.append(AuditLogEntry.user == params.user)
        if params.action:
            criteria.append(AuditLogEntry.action == params.action)
        if params.status:
            criteria.append(AuditLogEntry.status == params.status)
        if params.start is not None:
            criteria.append(AuditLogEntry.timestamp >= params.start)
        if params.end is not None:
            criteria.append(AuditLogEntry.timestamp <= params.end)

        return await self.repo.find_all(
            *criteria,
            order_by=(AuditLogEntry.timestamp.desc(), AuditLogEntry.id.desc()),
            offset=params.offset,
            limit=params.page_size,
        )


def get_audit_service(db: AsyncSession = Depends(get_db)) -> AuditService:
    """Dependency for the request-scoped audit service."""
    return AuditService(db)

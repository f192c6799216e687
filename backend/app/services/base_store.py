"""
Shared plumbing for the audited entity stores.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.services.audit_service import AuditService
from app.utils.exceptions import VaultException


class AuditedOperation:
    """Mutable details of an operation in flight; the store fills them in."""

    def __init__(self, details: str = ""):
        self.details = details


class AuditedStore:
    """
    Base for stores whose operations each leave exactly one audit entry.

    Validation and authorization checks run before an operation is opened, so
    they never produce an entry.
    """

    def __init__(self, db: AsyncSession, audit: AuditService):
        self.db = db
        self.audit = audit

    @asynccontextmanager
    async def audited(self, actor: Optional[str], action: str, details: str = "") -> AsyncIterator[AuditedOperation]:
        op = AuditedOperation(details)
        try:
            yield op
        except VaultException as e:
            await self.audit.fail(actor, action, _join(op.details, f"error={e.message}"))
            raise
        except Exception as e:
            await self.audit.fail(actor, action, _join(op.details, f"error={e}"))
            raise
        await self.audit.ok(actor, action, op.details)


def _join(*parts: str) -> str:
    return " ".join(p for p in parts if p)

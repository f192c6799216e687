"""
Append-only audit trail of sensitive operations.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime

from app.core.database import Base


AUDIT_STATUS_OK = "OK"
AUDIT_STATUS_FAIL = "FAIL"


class AuditLogEntry(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)

    timestamp = Column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
        default=lambda: datetime.now(timezone.utc),
    )

    # Acting username; empty for anonymous/system actions
    user = Column(String(64), nullable=False, default="", index=True)
    action = Column(String(64), nullable=False, index=True)
    status = Column(String(8), nullable=False)  # OK, FAIL
    details = Column(Text, nullable=False, default="")

    def __repr__(self):
        return f"<AuditLogEntry(id={self.id}, action='{self.action}', status='{self.status}')>"

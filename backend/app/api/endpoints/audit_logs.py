"""
Audit log query endpoint (admin only).
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends

from app.schemas.audit import AuditLogResponse
from app.services.access_control import Identity
from app.services.audit_service import AuditLogQuery, AuditService, get_audit_service
from app.services.auth_service import get_current_identity

router = APIRouter()


@router.get("", response_model=List[AuditLogResponse])
async def list_audit_logs(
    user: Optional[str] = None,
    action: Optional[str] = None,
    status: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    page: Optional[int] = None,
    page_size: Optional[int] = None,
    identity: Identity = Depends(get_current_identity),
    audit: AuditService = Depends(get_audit_service),
):
    """
    Query audit entries, newest first.

    Args:
        user: Exact acting username
        action: Exact action identifier
        status: OK or FAIL
        start: Inclusive lower timestamp bound
        end: Inclusive upper timestamp bound
        page: 1-based page; values below 1 read as 1
        page_size: 1-200; anything else reads as 50
    """
    params = AuditLogQuery(
        user=user,
        action=action,
        status=status,
        start=start,
        end=end,
        page=page,
        page_size=page_size,
    )
    entries = await audit.query(identity, params)
    return [AuditLogResponse.model_validate(e) for e in entries]

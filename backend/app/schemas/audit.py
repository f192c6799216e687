from datetime import datetime

from pydantic import BaseModel


class AuditLogResponse(BaseModel):
    id: int
    timestamp: datetime
    user: str
    action: str
    status: str
    details: str

    class Config:
        from_attributes = True

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class TokenPayload(BaseModel):
    """Create/update body for a stored token pair."""
    integration_id: int
    access_token: str
    refresh_token: str
    expires_at: Optional[datetime] = None


class TokenResponse(BaseModel):
    id: int
    integration_id: int
    access_token: str
    refresh_token: str
    expires_at: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

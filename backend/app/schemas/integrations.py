from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class IntegrationPayload(BaseModel):
    """Create/update body for an integration."""
    name: str
    auth_type: str
    client_id: str
    client_secret: str
    token_url: str


class IntegrationResponse(BaseModel):
    id: int
    name: str
    auth_type: str
    client_id: str
    client_secret: str  # decrypted, or the stored ciphertext if decryption failed
    token_url: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

"""
User schemas. Length and role rules are enforced by the user store so that
they surface as 400 errors without touching storage.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class UserCreate(BaseModel):
    """Schema for user registration."""
    username: str
    password: str
    role: str


class UserResponse(BaseModel):
    """Schema for user response; the password hash is never exposed."""
    id: int
    username: str
    role: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

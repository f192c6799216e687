"""
Authentication-related Pydantic schemas.
"""

from datetime import datetime
from pydantic import BaseModel


class UserLogin(BaseModel):
    """Schema for user login."""
    username: str
    password: str


class LoginResponse(BaseModel):
    """Schema for an issued bearer token."""
    access_token: str
    token_type: str = "bearer"
    expire: datetime

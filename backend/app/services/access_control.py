"""
Role-based access control.

The bearer credential is decoded once into an Identity at the request
boundary; every downstream check takes that typed value.
"""

from pydantic import BaseModel

from app.utils.exceptions import AuthorizationError

ADMIN_ROLE = "admin"


class Identity(BaseModel):
    """Authenticated caller, as carried by the bearer token claims."""

    id: int
    username: str
    role: str


def is_admin(identity: Identity) -> bool:
    """True iff the identity's role claim is exactly "admin"."""
    return identity.role == ADMIN_ROLE


def ensure_admin(identity: Identity) -> Identity:
    """Raise AuthorizationError unless the identity is an admin."""
    if not is_admin(identity):
        raise AuthorizationError("Access allowed only for admin")
    return identity

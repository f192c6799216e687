"""
Database models for the API Vault application.
"""

from .user import User
from .integration import Integration
from .token import Token
from .audit_log import AuditLogEntry

__all__ = [
    "User",
    "Integration",
    "Token",
    "AuditLogEntry",
]

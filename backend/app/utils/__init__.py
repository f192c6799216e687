"""
Utility modules for the API Vault application.
"""

from .exceptions import (
    VaultException,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    EncryptionKeyError,
    CryptoError,
    HashError,
    StorageError,
)

__all__ = [
    "VaultException",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "EncryptionKeyError",
    "CryptoError",
    "HashError",
    "StorageError",
]

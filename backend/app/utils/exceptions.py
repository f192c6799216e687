"""
Custom exception classes for the API Vault application.
"""

from typing import Optional


class VaultException(Exception):
    """Base exception for all API Vault errors."""

    def __init__(self, message: str, detail: Optional[str] = None):
        self.message = message
        self.detail = detail
        super().__init__(self.message)


class ValidationError(VaultException):
    """Raised when caller input is malformed or out of range."""

    def __init__(self, message: str, field: Optional[str] = None, detail: Optional[str] = None):
        if field:
            message = f"Validation error for field '{field}': {message}"
        super().__init__(message, detail)
        self.field = field


class AuthenticationError(VaultException):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication failed", detail: Optional[str] = None):
        super().__init__(message, detail)


class AuthorizationError(VaultException):
    """Raised when an authenticated caller lacks the required role."""

    def __init__(self, message: str = "Admin privileges required", detail: Optional[str] = None):
        super().__init__(message, detail)


class NotFoundError(VaultException):
    """Raised when no record exists for the given id."""

    def __init__(self, resource: str, resource_id, detail: Optional[str] = None):
        message = f"{resource} not found: {resource_id}"
        super().__init__(message, detail)
        self.resource = resource
        self.resource_id = resource_id


class EncryptionKeyError(VaultException):
    """Raised when the data encryption key is missing or malformed."""

    def __init__(self, message: str = "DATA_ENCRYPTION_KEY must be exactly 32 bytes", detail: Optional[str] = None):
        super().__init__(message, detail)


class CryptoError(VaultException):
    """Raised when a ciphertext cannot be opened or a cipher operation fails."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(f"Crypto error: {message}", detail)


class HashError(VaultException):
    """Raised when password hashing fails."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(f"Password hashing error: {message}", detail)


class StorageError(VaultException):
    """Raised when the persistence layer fails."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(f"Storage error: {message}", detail)

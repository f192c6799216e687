"""
Password hashing and field-level encryption.

Secrets stored by the vault are sealed with AES-256-GCM under a single static
key taken from DATA_ENCRYPTION_KEY. The stored form is
base64(nonce || ciphertext || tag), so every value carries its own nonce and
authentication tag.
"""

import base64
import binascii
import hashlib
import os
from typing import Optional, Union

import bcrypt
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from loguru import logger

from app.core.config import settings
from app.utils.exceptions import CryptoError, EncryptionKeyError, HashError

NONCE_SIZE = 12  # 96 bits, standard for AES-GCM
KEY_SIZE = 32  # 256 bits for AES-256

BCRYPT_MIN_COST = 4
BCRYPT_MAX_COST = 31
BCRYPT_DEFAULT_COST = 12  # bcrypt.gensalt() default

BCRYPT_MAX_PASSWORD_BYTES = 72


def resolve_bcrypt_cost(raw: Union[str, int, None]) -> int:
    """Return a usable bcrypt cost, falling back to the default when raw is unusable."""
    if raw is None or raw == "":
        return BCRYPT_DEFAULT_COST
    try:
        cost = int(raw)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-numeric BCRYPT_COST={raw!r}")
        return BCRYPT_DEFAULT_COST
    if cost < BCRYPT_MIN_COST or cost > BCRYPT_MAX_COST:
        logger.warning(f"Ignoring out-of-range BCRYPT_COST={cost}")
        return BCRYPT_DEFAULT_COST
    return cost


def _password_bytes(password: str) -> bytes:
    password_bytes = password.encode("utf-8")
    # Bcrypt has a 72-byte limit - pre-hash longer passwords
    if len(password_bytes) > BCRYPT_MAX_PASSWORD_BYTES:
        password_bytes = hashlib.sha256(password_bytes).hexdigest().encode("utf-8")
    return password_bytes


def hash_password(password: str, cost: Union[str, int, None] = None) -> str:
    """Hash a password using bcrypt."""
    rounds = resolve_bcrypt_cost(cost if cost is not None else settings.BCRYPT_COST)
    try:
        salt = bcrypt.gensalt(rounds=rounds)
        hashed = bcrypt.hashpw(_password_bytes(password), salt)
    except (ValueError, TypeError) as e:
        raise HashError(str(e))
    return hashed.decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """Verify a password against its hash. Never raises on mismatch."""
    try:
        return bcrypt.checkpw(_password_bytes(password), hashed_password.encode("utf-8"))
    except (ValueError, TypeError):
        # Malformed stored hash
        return False


class FieldCipher:
    """AES-256-GCM sealing of individual secret fields."""

    def __init__(self, key: Union[str, bytes, None]):
        if isinstance(key, str):
            key = key.encode("utf-8")
        self._key = key

    def _aead(self) -> AESGCM:
        if not self._key or len(self._key) != KEY_SIZE:
            raise EncryptionKeyError()
        return AESGCM(self._key)

    def encrypt(self, plaintext: str) -> str:
        """Seal plaintext under a fresh random nonce."""
        aead = self._aead()
        nonce = os.urandom(NONCE_SIZE)
        try:
            sealed = aead.encrypt(nonce, plaintext.encode("utf-8"), None)
        except (ValueError, OverflowError) as e:
            raise CryptoError(str(e))
        return base64.b64encode(nonce + sealed).decode("ascii")

    def decrypt(self, ciphertext: str) -> str:
        """
        Open a value produced by encrypt.

        Raises:
            EncryptionKeyError: If the key is missing or not 32 bytes.
            CryptoError: If the value is not valid base64, is shorter than a
                nonce, or fails authentication (tampered data or wrong key).
        """
        aead = self._aead()
        try:
            data = base64.b64decode(ciphertext, validate=True)
        except (binascii.Error, ValueError) as e:
            raise CryptoError(f"invalid base64 payload: {e}")
        if len(data) < NONCE_SIZE:
            raise CryptoError("ciphertext too short")
        nonce, sealed = data[:NONCE_SIZE], data[NONCE_SIZE:]
        try:
            plaintext = aead.decrypt(nonce, sealed, None)
        except InvalidTag:
            raise CryptoError("authentication failed")
        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CryptoError(str(e))

    def reveal(self, stored: Optional[str]) -> Optional[str]:
        """
        Decrypt a stored secret for display.

        Fail-open: when the value cannot be decrypted (missing or wrong key,
        corrupted data, legacy plaintext) the stored value is returned as-is
        so a single bad field never breaks a read or list response.
        """
        if stored is None:
            return None
        try:
            return self.decrypt(stored)
        except (CryptoError, EncryptionKeyError) as e:
            logger.warning(f"Returning stored ciphertext, decrypt failed: {e.message}")
            return stored


def get_field_cipher() -> FieldCipher:
    """Dependency returning a cipher bound to the configured key."""
    return FieldCipher(settings.DATA_ENCRYPTION_KEY)

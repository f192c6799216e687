"""
Token store.

Access and refresh tokens are sealed on write and opened on read. Deletion
sets a tombstone; tombstoned rows are invisible to every other operation.
"""

from datetime import datetime, timezone
from typing import List

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.token import Token
from app.schemas.tokens import TokenPayload, TokenResponse
from app.services.access_control import Identity, ensure_admin
from app.services.audit_service import AuditService, get_audit_service
from app.services.base_store import AuditedStore
from app.services.crypto_service import FieldCipher, get_field_cipher
from app.services.repository import Repository
from app.utils.exceptions import NotFoundError, ValidationError

TOKEN_MIN_LENGTH = 6

_LIVE = Token.deleted_at.is_(None)


def validate_token_payload(payload: TokenPayload) -> None:
    if not payload.integration_id:
        raise ValidationError("integration reference is required", field="integration_id")
    if len(payload.access_token) < TOKEN_MIN_LENGTH:
        raise ValidationError(f"must be at least {TOKEN_MIN_LENGTH} characters", field="access_token")
    if len(payload.refresh_token) < TOKEN_MIN_LENGTH:
        raise ValidationError(f"must be at least {TOKEN_MIN_LENGTH} characters", field="refresh_token")
    if payload.expires_at is None or payload.expires_at.replace(tzinfo=None) == datetime.min:
        raise ValidationError("expiry timestamp is required", field="expires_at")


class TokenStore(AuditedStore):
    """CRUD for token pairs; every call leaves one audit entry."""

    def __init__(self, db: AsyncSession, audit: AuditService, cipher: FieldCipher):
        super().__init__(db, audit)
        self.cipher = cipher
        self.repo = Repository(db, Token)

    def _to_response(self, row: Token) -> TokenResponse:
        return TokenResponse(
            id=row.id,
            integration_id=row.integration_id,
            access_token=self.cipher.reveal(row.access_token),
            refresh_token=self.cipher.reveal(row.refresh_token),
            expires_at=row.expires_at,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    async def _require(self, token_id: int) -> Token:
        row = await self.repo.find_by_id(token_id, _LIVE)
        if row is None:
            raise NotFoundError("Token", token_id)
        return row

    async def create(self, identity: Identity, payload: TokenPayload) -> TokenResponse:
        validate_token_payload(payload)

        async with self.audited(
            identity.username, "cadastro_token", f"integration_id={payload.integration_id}"
        ) as op:
            row = Token(
                integration_id=payload.integration_id,
                access_token=self.cipher.encrypt(payload.access_token),
                refresh_token=self.cipher.encrypt(payload.refresh_token),
                expires_at=payload.expires_at,
            )
            row = await self.repo.create(row)
            op.details = f"id={row.id} integration_id={row.integration_id}"
            response = self._to_response(row)
        return response

    async def list(self, identity: Identity) -> List[TokenResponse]:
        async with self.audited(identity.username, "listagem_tokens") as op:
            rows = await self.repo.find_all(_LIVE)
            items = [self._to_response(r) for r in rows]
            op.details = f"total={len(items)}"
        return items

    async def get(self, identity: Identity, token_id: int) -> TokenResponse:
        async with self.audited(identity.username, "consulta_token_id", f"id={token_id}"):
            response = self._to_response(await self._require(token_id))
        return response

    async def update(self, identity: Identity, token_id: int, payload: TokenPayload) -> TokenResponse:
        validate_token_payload(payload)

        async with self.audited(identity.username, "atualizacao_token", f"id={token_id}"):
            row = await self._require(token_id)
            access_token = self.cipher.encrypt(payload.access_token)
            refresh_token = self.cipher.encrypt(payload.refresh_token)
            row.integration_id = payload.integration_id
            row.access_token = access_token
            row.refresh_token = refresh_token
            row.expires_at = payload.expires_at
            row = await self.repo.save(row)
            response = self._to_response(row)
        return response

    async def delete(self, identity: Identity, token_id: int) -> None:
        """Tombstone a token. Admin only."""
        ensure_admin(identity)

        async with self.audited(identity.username, "delecao_token", f"id={token_id}"):
            row = await self._require(token_id)
            row.deleted_at = datetime.now(timezone.utc)
            await self.repo.save(row)


def get_token_store(
    db: AsyncSession = Depends(get_db),
    audit: AuditService = Depends(get_audit_service),
    cipher: FieldCipher = Depends(get_field_cipher),
) -> TokenStore:
    return TokenStore(db, audit, cipher)

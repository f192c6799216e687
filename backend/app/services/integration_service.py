"""
Integration store.

client_secret is sealed with the field cipher before every write and opened
before every read-back. The ORM row only ever holds ciphertext; plaintext
lives in the response objects built here.
"""

from typing import List

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.integration import Integration, AUTH_TYPES
from app.schemas.integrations import IntegrationPayload, IntegrationResponse
from app.services.access_control import Identity, ensure_admin
from app.services.audit_service import AuditService, get_audit_service
from app.services.base_store import AuditedStore
from app.services.crypto_service import FieldCipher, get_field_cipher
from app.services.repository import Repository
from app.utils.exceptions import NotFoundError, ValidationError

NAME_MIN_LENGTH = 3
CLIENT_FIELD_MIN_LENGTH = 3
TOKEN_URL_MIN_LENGTH = 10
TOKEN_URL_PREFIX = "http"


def validate_integration_payload(payload: IntegrationPayload) -> None:
    if len(payload.name) < NAME_MIN_LENGTH:
        raise ValidationError(f"must be at least {NAME_MIN_LENGTH} characters", field="name")
    if payload.auth_type not in AUTH_TYPES:
        raise ValidationError(f"must be one of {', '.join(AUTH_TYPES)}", field="auth_type")
    if len(payload.client_id) < CLIENT_FIELD_MIN_LENGTH:
        raise ValidationError(f"must be at least {CLIENT_FIELD_MIN_LENGTH} characters", field="client_id")
    if len(payload.client_secret) < CLIENT_FIELD_MIN_LENGTH:
        raise ValidationError(f"must be at least {CLIENT_FIELD_MIN_LENGTH} characters", field="client_secret")
    if len(payload.token_url) < TOKEN_URL_MIN_LENGTH or not payload.token_url.startswith(TOKEN_URL_PREFIX):
        raise ValidationError("invalid token URL", field="token_url")


class IntegrationStore(AuditedStore):
    """CRUD for integrations; every call leaves one audit entry."""

    def __init__(self, db: AsyncSession, audit: AuditService, cipher: FieldCipher):
        super().__init__(db, audit)
        self.cipher = cipher
        self.repo = Repository(db, Integration)

    def _to_response(self, row: Integration) -> IntegrationResponse:
        return IntegrationResponse(
            id=row.id,
            name=row.name,
            auth_type=row.auth_type,
            client_id=row.client_id,
            client_secret=self.cipher.reveal(row.client_secret),
            token_url=row.token_url,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    async def _require(self, integration_id: int) -> Integration:
        row = await self.repo.find_by_id(integration_id)
        if row is None:
            raise NotFoundError("Integration", integration_id)
        return row

    async def create(self, identity: Identity, payload: IntegrationPayload) -> IntegrationResponse:
        validate_integration_payload(payload)

        async with self.audited(identity.username, "cadastro_integracao", f"name={payload.name}") as op:
            row = Integration(
                name=payload.name,
                auth_type=payload.auth_type,
                client_id=payload.client_id,
                client_secret=self.cipher.encrypt(payload.client_secret),
                token_url=payload.token_url,
            )
            row = await self.repo.create(row)
            op.details = f"name={row.name} id={row.id}"
            response = self._to_response(row)
        return response

    async def list(self, identity: Identity) -> List[IntegrationResponse]:
        async with self.audited(identity.username, "listagem_integracoes") as op:
            rows = await self.repo.find_all()
            items = [self._to_response(r) for r in rows]
            op.details = f"total={len(items)}"
        return items

    async def get(self, identity: Identity, integration_id: int) -> IntegrationResponse:
        async with self.audited(identity.username, "consulta_integracao_id", f"id={integration_id}"):
            response = self._to_response(await self._require(integration_id))
        return response

    async def update(
        self,
        identity: Identity,
        integration_id: int,
        payload: IntegrationPayload,
    ) -> IntegrationResponse:
        validate_integration_payload(payload)

        async with self.audited(identity.username, "atualizacao_integracao", f"id={integration_id}"):
            row = await self._require(integration_id)
            encrypted_secret = self.cipher.encrypt(payload.client_secret)
            # Last write wins; there is no version check
            row.name = payload.name
            row.auth_type = payload.auth_type
            row.client_id = payload.client_id
            row.client_secret = encrypted_secret
            row.token_url = payload.token_url
            row = await self.repo.save(row)
            response = self._to_response(row)
        return response

    async def delete(self, identity: Identity, integration_id: int) -> None:
        """Physically delete an integration. Its tokens are left in place."""
        ensure_admin(identity)

        async with self.audited(identity.username, "delecao_integracao", f"id={integration_id}"):
            row = await self._require(integration_id)
            await self.repo.delete(row)


def get_integration_store(
    db: AsyncSession = Depends(get_db),
    audit: AuditService = Depends(get_audit_service),
    cipher: FieldCipher = Depends(get_field_cipher),
) -> IntegrationStore:
    return IntegrationStore(db, audit, cipher)

"""
User store: registration, listing and admin-only deletion.
"""

from typing import List

from fastapi import Depends
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.user import User, USER_ROLES
from app.schemas.users import UserCreate, UserResponse
from app.services.access_control import Identity, ensure_admin
from app.services.audit_service import AuditService, get_audit_service
from app.services.base_store import AuditedStore
from app.services.crypto_service import hash_password
from app.services.repository import Repository
from app.utils.exceptions import NotFoundError, ValidationError

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 32
PASSWORD_MIN_LENGTH = 6


def validate_user_payload(payload: UserCreate) -> None:
    if len(payload.password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"must be at least {PASSWORD_MIN_LENGTH} characters", field="password")
    if not USERNAME_MIN_LENGTH <= len(payload.username) <= USERNAME_MAX_LENGTH:
        raise ValidationError(
            f"must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters",
            field="username",
        )
    if payload.role not in USER_ROLES:
        raise ValidationError("must be 'user' or 'admin'", field="role")


class UserStore(AuditedStore):
    """Persistence for users; passwords are stored only as bcrypt hashes."""

    def __init__(self, db: AsyncSession, audit: AuditService):
        super().__init__(db, audit)
        self.repo = Repository(db, User)

    async def register(self, payload: UserCreate) -> UserResponse:
        """Create a user. Registration is open; the new username is the audit actor."""
        validate_user_payload(payload)

        async with self.audited(payload.username, "cadastro_usuario", f"role={payload.role}") as op:
            user = User(
                username=payload.username,
                hashed_password=hash_password(payload.password),
                role=payload.role,
            )
            user = await self.repo.create(user)
            op.details = f"id={user.id} role={user.role}"
            response = UserResponse.model_validate(user)

        logger.info(f"Created new user: {response.username}")
        return response

    async def list_users(self, identity: Identity) -> List[UserResponse]:
        async with self.audited(identity.username, "listagem_usuarios") as op:
            users = await self.repo.find_all()
            items = [UserResponse.model_validate(u) for u in users]
            op.details = f"total={len(items)}"
        return items

    async def delete_user(self, identity: Identity, user_id: int) -> None:
        ensure_admin(identity)

        async with self.audited(identity.username, "delecao_usuario", f"id={user_id}"):
            user = await self.repo.find_by_id(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            await self.repo.delete(user)


def get_user_store(
    db: AsyncSession = Depends(get_db),
    audit: AuditService = Depends(get_audit_service),
) -> UserStore:
    return UserStore(db, audit)

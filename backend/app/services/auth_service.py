"""
Authentication service: credential checks and JWT issuance/validation.
"""

from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional, Tuple

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.user import User
from app.services.access_control import Identity
from app.services.crypto_service import hash_password, verify_password
from app.utils.exceptions import AuthenticationError

TOKEN_QUERY_PARAM = "token"
TOKEN_COOKIE_NAME = "jwt"

bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("not-a-real-password")


class AuthService:
    """Service for authentication and bearer token handling."""

    def __init__(
        self,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        expire_minutes: Optional[int] = None,
        max_refresh_minutes: Optional[int] = None,
    ):
        self.secret = secret or settings.JWT_SECRET
        self.algorithm = algorithm or settings.JWT_ALGORITHM
        self.expire_minutes = expire_minutes if expire_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
        self.max_refresh_minutes = (
            max_refresh_minutes if max_refresh_minutes is not None else settings.MAX_REFRESH_MINUTES
        )

    async def get_user_by_username(self, username: str, db: AsyncSession) -> Optional[User]:
        """Get user by username."""
        result = await db.execute(
            select(User).where(User.username == username)
        )
        return result.scalar_one_or_none()

    async def authenticate_user(self, username: str, password: str, db: AsyncSession) -> User:
        """Authenticate a user with username and password."""
        user = await self.get_user_by_username(username, db)

        if user is None:
            # Unknown usernames still pay for one bcrypt check
            verify_password(password, _dummy_hash())
            logger.info(f"Failed login for username={username}")
            raise AuthenticationError("Incorrect username or password")

        if not verify_password(password, user.hashed_password):
            logger.info(f"Failed login for username={username}")
            raise AuthenticationError("Incorrect username or password")

        return user

    def _issue(self, identity: Identity, orig_iat: int) -> Tuple[str, datetime]:
        expire = datetime.now(timezone.utc) + timedelta(minutes=self.expire_minutes)
        to_encode = {
            "sub": str(identity.id),
            "id": identity.id,
            "username": identity.username,
            "role": identity.role,
            "exp": expire,
            "orig_iat": orig_iat,
        }
        encoded_jwt = jwt.encode(to_encode, self.secret, algorithm=self.algorithm)
        return encoded_jwt, expire

    def create_access_token(self, user: User) -> Tuple[str, datetime]:
        """Create a JWT access token carrying the user's id, username and role."""
        identity = Identity(id=user.id, username=user.username, role=user.role)
        return self._issue(identity, int(datetime.now(timezone.utc).timestamp()))

    def _decode(self, token: str, verify_exp: bool = True) -> dict:
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"verify_exp": verify_exp},
            )
        except JWTError as e:
            raise AuthenticationError("Could not validate credentials", detail=str(e))

    @staticmethod
    def _identity_from_claims(claims: dict) -> Identity:
        try:
            return Identity(
                id=int(claims["id"]),
                username=str(claims["username"]),
                role=str(claims.get("role") or ""),
            )
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Could not validate credentials", detail="malformed claims")

    def decode_token(self, token: str) -> Identity:
        """Validate a bearer token and return the identity it carries."""
        return self._identity_from_claims(self._decode(token))

    def refresh_access_token(self, token: str) -> Tuple[str, datetime]:
        """
        Issue a fresh token for a possibly expired one.

        The original issue time travels with the token; refresh is refused once
        it is older than MAX_REFRESH_MINUTES.
        """
        claims = self._decode(token, verify_exp=False)
        identity = self._identity_from_claims(claims)
        try:
            orig_iat = int(claims["orig_iat"])
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Could not validate credentials", detail="missing orig_iat")

        now = datetime.now(timezone.utc)
        if now.timestamp() > orig_iat + self.max_refresh_minutes * 60:
            raise AuthenticationError("Token is expired")

        return self._issue(identity, orig_iat)

    @staticmethod
    def extract_token(
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials] = None,
    ) -> Optional[str]:
        """Find the bearer token in the Authorization header, query string, or cookie."""
        if credentials and credentials.credentials:
            return credentials.credentials
        token = request.query_params.get(TOKEN_QUERY_PARAM)
        if token:
            return token
        return request.cookies.get(TOKEN_COOKIE_NAME) or None


# Global instance for dependency injection
auth_service = AuthService()


def get_auth_service() -> AuthService:
    return auth_service


def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    service: AuthService = Depends(get_auth_service),
) -> Identity:
    """Dependency decoding the caller's bearer token into an Identity."""
    token = service.extract_token(request, credentials)
    if not token:
        raise AuthenticationError("Missing bearer token")
    return service.decode_token(token)
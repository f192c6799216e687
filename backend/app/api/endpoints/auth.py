"""
Authentication-related API endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.rate_limit import limiter, AUTH_LIMIT
from app.schemas.auth import UserLogin, LoginResponse
from app.services.auth_service import AuthService, bearer_scheme, get_auth_service
from app.utils.exceptions import AuthenticationError

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
@limiter.limit(AUTH_LIMIT)
async def login(
    request: Request,
    user_data: UserLogin,
    db: AsyncSession = Depends(get_db),
    service: AuthService = Depends(get_auth_service),
):
    """Exchange username and password for a bearer token."""
    user = await service.authenticate_user(
        username=user_data.username,
        password=user_data.password,
        db=db,
    )
    access_token, expire = service.create_access_token(user)
    logger.info(f"User {user.username} logged in")
    return LoginResponse(access_token=access_token, expire=expire)


@router.post("/refresh_token", response_model=LoginResponse)
async def refresh_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    service: AuthService = Depends(get_auth_service),
):
    """Reissue a token, provided it is still inside its refresh window."""
    token = service.extract_token(request, credentials)
    if not token:
        raise AuthenticationError("Missing bearer token")
    access_token, expire = service.refresh_access_token(token)
    return LoginResponse(access_token=access_token, expire=expire)

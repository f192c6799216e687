"""
User management API endpoints.
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from app.schemas.users import UserCreate, UserResponse
from app.services.access_control import Identity
from app.services.auth_service import get_current_identity
from app.services.user_service import UserStore, get_user_store

router = APIRouter()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    store: UserStore = Depends(get_user_store),
):
    """Register a user. Open to unauthenticated callers."""
    return await store.register(user_data)


@router.get("", response_model=List[UserResponse])
async def list_users(
    identity: Identity = Depends(get_current_identity),
    store: UserStore = Depends(get_user_store),
):
    return await store.list_users(identity)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    identity: Identity = Depends(get_current_identity),
    store: UserStore = Depends(get_user_store),
):
    """Delete a user (admin only)."""
    await store.delete_user(identity, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

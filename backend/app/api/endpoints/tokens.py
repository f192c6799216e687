"""
Token API endpoints.
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from app.schemas.tokens import TokenPayload, TokenResponse
from app.services.access_control import Identity
from app.services.auth_service import get_current_identity
from app.services.token_service import TokenStore, get_token_store

router = APIRouter()


@router.post("", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def create_token(
    payload: TokenPayload,
    identity: Identity = Depends(get_current_identity),
    store: TokenStore = Depends(get_token_store),
):
    return await store.create(identity, payload)


@router.get("", response_model=List[TokenResponse])
async def list_tokens(
    identity: Identity = Depends(get_current_identity),
    store: TokenStore = Depends(get_token_store),
):
    return await store.list(identity)


@router.get("/{token_id}", response_model=TokenResponse)
async def get_token(
    token_id: int,
    identity: Identity = Depends(get_current_identity),
    store: TokenStore = Depends(get_token_store),
):
    return await store.get(identity, token_id)


@router.put("/{token_id}", response_model=TokenResponse)
async def update_token(
    token_id: int,
    payload: TokenPayload,
    identity: Identity = Depends(get_current_identity),
    store: TokenStore = Depends(get_token_store),
):
    return await store.update(identity, token_id, payload)


@router.delete("/{token_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_token(
    token_id: int,
    identity: Identity = Depends(get_current_identity),
    store: TokenStore = Depends(get_token_store),
):
    """Soft-delete a token (admin only)."""
    await store.delete(identity, token_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

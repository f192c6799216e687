"""
Integration API endpoints.

Responses carry the decrypted client secret.
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from app.schemas.integrations import IntegrationPayload, IntegrationResponse
from app.services.access_control import Identity
from app.services.auth_service import get_current_identity
from app.services.integration_service import IntegrationStore, get_integration_store

router = APIRouter()


@router.post("", response_model=IntegrationResponse, status_code=status.HTTP_201_CREATED)
async def create_integration(
    payload: IntegrationPayload,
    identity: Identity = Depends(get_current_identity),
    store: IntegrationStore = Depends(get_integration_store),
):
    return await store.create(identity, payload)


@router.get("", response_model=List[IntegrationResponse])
async def list_integrations(
    identity: Identity = Depends(get_current_identity),
    store: IntegrationStore = Depends(get_integration_store),
):
    return await store.list(identity)


@router.get("/{integration_id}", response_model=IntegrationResponse)
async def get_integration(
    integration_id: int,
    identity: Identity = Depends(get_current_identity),
    store: IntegrationStore = Depends(get_integration_store),
):
    return await store.get(identity, integration_id)


@router.put("/{integration_id}", response_model=IntegrationResponse)
async def update_integration(
    integration_id: int,
    payload: IntegrationPayload,
    identity: Identity = Depends(get_current_identity),
    store: IntegrationStore = Depends(get_integration_store),
):
    return await store.update(identity, integration_id, payload)


@router.delete("/{integration_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_integration(
    integration_id: int,
    identity: Identity = Depends(get_current_identity),
    store: IntegrationStore = Depends(get_integration_store),
):
    """Delete an integration (admin only)."""
    await store.delete(identity, integration_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""
Main API router configuration.
"""

from fastapi import APIRouter
from app.api.endpoints import auth, users, integrations, tokens, audit_logs

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(auth.router, tags=["authentication"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(integrations.router, prefix="/integrations", tags=["integrations"])
api_router.include_router(tokens.router, prefix="/tokens", tags=["tokens"])
api_router.include_router(audit_logs.router, prefix="/audit-logs", tags=["audit"])

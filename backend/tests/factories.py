"""
Test factories for creating test data.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi.testclient import TestClient


def register_user(client: TestClient, username: str, password: str, role: str = "user") -> dict:
    """Register a user through the API."""
    response = client.post(
        "/users",
        json={"username": username, "password": password, "role": role},
    )
    assert response.status_code == 201, response.text
    return response.json()


def login(client: TestClient, username: str, password: str) -> str:
    """Log in through the API and return the bearer token."""
    response = client.post("/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["access_token"]


def integration_payload(name: str = "acme", client_secret: str = "csecret", **overrides) -> dict:
    payload = {
        "name": name,
        "auth_type": "client_credentials",
        "client_id": "cid-123",
        "client_secret": client_secret,
        "token_url": "https://auth.example.com/oauth/token",
    }
    payload.update(overrides)
    return payload


def token_payload(integration_id: int = 1, expires_at: Optional[datetime] = None, **overrides) -> dict:
    if expires_at is None:
        expires_at = datetime.now(timezone.utc) + timedelta(hours=1)
    payload = {
        "integration_id": integration_id,
        "access_token": "access-abcdef",
        "refresh_token": "refresh-abcdef",
        "expires_at": expires_at.isoformat(),
    }
    payload.update(overrides)
    return payload

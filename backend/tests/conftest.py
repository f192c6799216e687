"""
Pytest configuration and fixtures for backend tests.
"""

import os
import tempfile
from pathlib import Path
from typing import AsyncGenerator

# Settings are read at import time, so the test environment must be in place
# before anything under app/ is imported.
TEST_DIR = Path(tempfile.mkdtemp(prefix="api-vault-tests-"))
TEST_DB_PATH = TEST_DIR / "vault.db"
TEST_ENCRYPTION_KEY = "0123456789abcdef0123456789abcdef"

os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["DATA_ENCRYPTION_KEY"] = TEST_ENCRYPTION_KEY
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["BCRYPT_COST"] = "4"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from app.core.database import Base
from app.services.audit_service import AuditService
from app.services.crypto_service import FieldCipher

from factories import register_user, login


# In-memory SQLite for service-level tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session on a private in-memory database."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def cipher() -> FieldCipher:
    return FieldCipher(TEST_ENCRYPTION_KEY)


@pytest.fixture
def audit(db_session: AsyncSession) -> AuditService:
    return AuditService(db_session)


@pytest.fixture(scope="function")
def client() -> TestClient:
    """Create a test client backed by a fresh database file."""
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()

    # Lifespan creates the tables
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers(client: TestClient) -> dict:
    """Register an admin and return its authentication headers."""
    register_user(client, "admin", "admin123", role="admin")
    return {"Authorization": f"Bearer {login(client, 'admin', 'admin123')}"}


@pytest.fixture
def auth_headers(client: TestClient) -> dict:
    """Register a regular user and return its authentication headers."""
    register_user(client, "testuser", "testpassword123")
    return {"Authorization": f"Bearer {login(client, 'testuser', 'testpassword123')}"}


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during the test."""
    messages = []
    handler_id = logger.add(messages.append, format="{message}", level="INFO")
    yield messages
    logger.remove(handler_id)

"""
Database configuration and connection management.
"""

from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from loguru import logger

from .config import settings


def build_engine(database_url: str):
    """Create an async engine for the given URL."""
    if database_url.startswith("sqlite"):
        # aiosqlite connections are not shared across event loops
        return create_async_engine(
            database_url,
            echo=settings.DEBUG,
            connect_args={"check_same_thread": False},
            poolclass=NullPool,
        )
    return create_async_engine(
        database_url,
        echo=settings.DEBUG,
        pool_pre_ping=True,
        pool_recycle=300,
    )


# Create async engine
engine = build_engine(settings.async_database_url)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# Create declarative base
Base = declarative_base()


async def get_db() -> AsyncSession:
    """
    Get database session.

    Yields:
        AsyncSession: Database session
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception as e:
            from app.utils.exceptions import VaultException
            if not isinstance(e, VaultException):
                logger.error("Database session error: {}", str(e))
            await session.rollback()
            raise
        finally:
            await session.close()


async def create_tables(bind=None):
    """Create database tables."""
    target = bind or engine
    try:
        async with target.begin() as conn:
            # Import all models to ensure they're registered
            from app.models import user, integration, token, audit_log  # noqa: F401

            await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Error creating database tables: {e}")
        raise

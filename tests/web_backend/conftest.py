"""
Pytest configuration and fixtures for web backend tests.
"""

import pytest
from typing import AsyncGenerator
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from prompt_framework.config.limits import EngineLimits

# Import app components
from src.web_backend.main import app
from src.web_backend.database.connection import Base, get_db
from src.web_backend.config import Settings
from src.web_backend.models import PromptRecord  # noqa: F401
from src.web_backend.services.session_registry import SessionRegistry, get_session_registry


# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        future=True,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session_factory = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def registry(generation_client) -> SessionRegistry:
    """Live session registry wired to the mock provider."""
    return SessionRegistry(
        max_sessions=10,
        generation=generation_client,
        limits=EngineLimits(),
    )


@pytest.fixture(scope="function")
async def client(test_engine, registry) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""
    # Create session factory for test database
    async_session_factory = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    # Override the get_db dependency
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with async_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_registry] = lambda: registry

    # Create test client
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    # Clean up
    app.dependency_overrides.clear()


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    return Settings(
        DEBUG=True,
        DATABASE_URL=TEST_DATABASE_URL,
    )


@pytest.fixture
def user_headers() -> dict:
    """Headers of a signed-in user."""
    return {"X-User-Id": "user-123"}


@pytest.fixture
def sample_session_data() -> dict:
    """Sample session creation data."""
    return {
        "original_input": "help me write an email to my team",
        "mode": "super_lazy",
    }

"""
Pytest configuration and fixtures for backend tests.
"""

import os

# Settings are read at import time; point them at test values first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_FILE", "")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from typing import AsyncGenerator
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from recipebox.core.database import create_tables, drop_tables, get_db
from recipebox.core.rate_limit import limiter
from recipebox.models.user import User
from recipebox.services.auth_service import auth_service

from tests.factories import create_test_user


# Test database URL (in-memory SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

limiter.enabled = False


@pytest.fixture
async def db_engine():
    """Create a fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_tables(engine)

    yield engine

    await drop_tables(engine)
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an HTTP client bound to the app with the test session."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user."""
    return await create_test_user(db_session)


@pytest.fixture
async def other_user(db_session: AsyncSession) -> User:
    """Create a second, unrelated user."""
    return await create_test_user(db_session, username="otheruser", email="other@example.com")


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    """Create an admin test user."""
    return await create_test_user(
        db_session, username="admin", email="admin@example.com", is_admin=True
    )


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    """Get authentication headers for test user."""
    token = auth_service.create_access_token(test_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_headers(other_user: User) -> dict:
    token = auth_service.create_access_token(other_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin_user: User) -> dict:
    """Get authentication headers for admin user."""
    token = auth_service.create_access_token(admin_user.id)
    return {"Authorization": f"Bearer {token}"}

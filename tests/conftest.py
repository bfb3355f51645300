"""
Pytest Configuration and Fixtures
Shared fixtures and configuration for all tests
"""

import os

# Settings are read at import time
os.environ.setdefault("SECRET_KEY", "braincache-test-secret-key-0123456789abcdef")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import uuid
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from braincache.db import session as db_session_module
from braincache.db.models import User
from braincache.db.session import close_db, init_db


# ============================================
# PYTEST CONFIGURATION
# ============================================

def pytest_collection_modifyitems(config, items):
    """Add default markers based on test file path"""
    for item in items:
        path = str(item.fspath)
        if "/unit/" in path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in path:
            item.add_marker(pytest.mark.integration)


# ============================================
# DATABASE FIXTURES
# ============================================

@pytest_asyncio.fixture
async def database(tmp_path) -> AsyncGenerator[str, None]:
    """Fresh SQLite database file per test"""
    url = f"sqlite+aiosqlite:///{tmp_path / 'braincache.db'}"
    await init_db(url)
    yield url
    await close_db()


@pytest_asyncio.fixture
async def db_session(database) -> AsyncGenerator[AsyncSession, None]:
    """Session on the per-test database"""
    async with db_session_module.async_session_maker() as session:
        yield session


@pytest.fixture
def make_user(db_session: AsyncSession):
    """Factory persisting users directly, bypassing the auth routes"""

    async def _make_user(email: str = None, **kwargs) -> User:
        user = User(
            email=email or f"user_{uuid.uuid4().hex[:8]}@example.com",
            first_name=kwargs.pop("first_name", "Test"),
            last_name=kwargs.pop("last_name", "User"),
            hashed_password=kwargs.pop("hashed_password", "not-a-real-hash"),
            **kwargs,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _make_user


# ============================================
# HTTP CLIENT FIXTURES
# ============================================

@pytest_asyncio.fixture
async def client(database) -> AsyncGenerator[AsyncClient, None]:
    """
    Test HTTP client for FastAPI app
    Uses ASGI transport for testing without running server
    """
    from braincache.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

"""
Foundry — Test Configuration (conftest.py)
===========================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment variables are set BEFORE any foundry import so the
       module-level settings and engine point at a throwaway SQLite file.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock AsyncSession (pure unit tests)
    ├── db_schema:       Creates all tables in the SQLite test database
    ├── db_session:      Real AsyncSession on that database
    ├── test_client:     HTTPX AsyncClient wired to the FastAPI app
    └── make_user:       Factory that inserts a user and returns (user, token)
"""

import os
import tempfile

# Override settings for testing BEFORE any foundry imports
_TEST_DIR = tempfile.mkdtemp(prefix="foundry_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/test.db"
os.environ["REDIS_URL"] = "redis://localhost:6399/0"
os.environ["ENVIRONMENT"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key-for-jwt-signing-000000"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["VITE_DEV_MODE"] = "true"
os.environ["VITE_BUNDLE_DIR"] = os.path.join(_TEST_DIR, "public")

from typing import Any, Dict, Optional, Tuple  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from foundry.auth.security import create_access_token  # noqa: E402
from foundry.database import Base, async_session_factory, engine, session_scope  # noqa: E402
from foundry.models.user import User  # noqa: E402
from foundry.services import RoleService, UserService  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Unit-test doubles
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Mock async database session.

    Usage:
        async def test_get(mock_db_session):
            mock_db_session.get.return_value = None
            with pytest.raises(NotFoundError):
                await UserService(mock_db_session).get(uuid4())
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Database fixtures (SQLite through aiosqlite)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_schema():
    """Fresh tables for each test; pooled connections are closed afterwards."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    # Each test runs on its own event loop; pooled aiosqlite connections
    # must not outlive it
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_schema):
    async with async_session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def default_roles(db_schema):
    async with session_scope() as db:
        await RoleService(db).ensure_default_roles()


@pytest_asyncio.fixture
async def make_user(db_schema):
    """
    Factory inserting a committed user.

    Usage:
        user, token = await make_user("alice@example.com", is_superuser=True)
        headers = {"Authorization": f"Bearer {token}"}
    """

    async def _make_user(
        email: str,
        password: str = "correct-horse-battery",
        name: Optional[str] = None,
        **fields: Any,
    ) -> Tuple[User, str]:
        data: Dict[str, Any] = {"email": email, "password": password, "name": name}
        data.update(fields)
        async with session_scope() as db:
            user = await UserService(db).create(data)
        token, _ = create_access_token(str(user.id))
        return user, token

    return _make_user


@pytest.fixture
def auth_headers():
    def _headers(token: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest_asyncio.fixture
async def test_client(db_schema):
    """
    HTTPX AsyncClient talking to the FastAPI app through ASGITransport.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
    """
    from foundry.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

"""
Journal API: Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the whole suite.
How:   HTTP tests run the real app against an in-memory SQLite database
       through httpx's ASGITransport. ASGITransport does not run the
       lifespan, so the fixtures put the Database and CredentialService on
       `app.state` themselves.

Fixture Hierarchy (all function-scoped):
    ├── credential_service: fast bcrypt (4 rounds), fixed secret, no expiry
    ├── database: fresh in-memory schema per test
    ├── app / client: application wired to the two above
    ├── signup: coroutine that registers a user and returns its token
    └── mock_db_session: AsyncMock session for service unit tests
"""

import os

# Must be set before journal_api is imported: main.py builds the module-level
# app from the environment.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET"] = "test-secret-that-is-long-enough-for-hs256-signing"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

from journal_api import models  # noqa: F401
from journal_api.database import Database, create_engine
from journal_api.main import create_app
from journal_api.services.credential_service import CredentialService

TEST_SECRET = os.environ["JWT_SECRET"]


@pytest.fixture
def credential_service():
    return CredentialService(secret=TEST_SECRET, token_lifetime=None, bcrypt_rounds=4)


@pytest_asyncio.fixture
async def database():
    """
    One shared in-memory SQLite connection per test.

    StaticPool keeps every session on the same connection; with the default
    pool each connection would get its own empty database.
    """
    engine = create_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
    )
    db = Database(engine)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def app(database, credential_service):
    application = create_app()
    application.state.database = database
    application.state.credentials = credential_service
    return application


@pytest_asyncio.fixture
async def client(app):
    """
    Usage:
        async def test_health(client):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http


@pytest.fixture
def signup(client):
    """Register `username` over HTTP and return the issued token."""

    async def _signup(username: str, password: str = "password") -> str:
        response = await client.post(
            "/users/signup", json={"username": username, "password": password}
        )
        assert response.status_code == 201, response.text
        return response.text

    return _signup


@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession; no database needed.

    Usage:
        mock_db_session.get.return_value = account
        await entry_service.get_entry(mock_db_session, "dean", 1)
    """
    session = AsyncMock()
    session.get = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session

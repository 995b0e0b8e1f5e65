"""
Shared fixtures.

Tests run against an in-memory SQLite database (aiosqlite + StaticPool so
every session sees the same data) and talk to the FastAPI app through
httpx's ASGI transport. No real Postgres or Supabase is contacted.
"""

import os

# Must be set before app.core.config builds the global Settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["AUTH_PROVIDER"] = "local"

from typing import Dict, List, Tuple

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401
from app.api.deps import get_session_issuer
from app.core.database import Base, get_async_session
from app.main import app


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_async_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_async_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
    get_session_issuer.cache_clear()


async def register_and_login(client: AsyncClient, email: str, password: str = "superSecretPassword123") -> Dict[str, str]:
    """Register a user, log in and return bearer headers."""
    response = await client.post("/register", json={"email": email, "password": password})
    assert response.status_code == 201, response.text
    response = await client.post("/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


async def get_accounts(client: AsyncClient, headers: Dict[str, str]) -> List[dict]:
    response = await client.get("/accounts", headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


async def account_by_name(client: AsyncClient, headers: Dict[str, str], name: str) -> dict:
    return next(acc for acc in await get_accounts(client, headers) if acc["name"] == name)


@pytest.fixture
async def user_headers(client) -> Dict[str, str]:
    return await register_and_login(client, "user@test.com")


@pytest.fixture
async def two_users(client) -> Tuple[Dict[str, str], Dict[str, str]]:
    alice = await register_and_login(client, "alice@test.com")
    bob = await register_and_login(client, "bob@test.com")
    return alice, bob

"""Pytest configuration and shared fixtures.

Settings are validated when ``pawboard.core.config`` is imported, so the required
environment variables get test defaults before any application import.
"""

from __future__ import annotations

import os

os.environ.setdefault("POSTGRES_USER", "pawboard")
os.environ.setdefault("POSTGRES_PASSWORD", "pawboard")
os.environ.setdefault("POSTGRES_HOST", "localhost")
os.environ.setdefault("POSTGRES_PORT", "5432")
os.environ.setdefault("POSTGRES_DB", "pawboard")
os.environ.setdefault("REDIS_HOST", "localhost")
os.environ.setdefault("REDIS_PORT", "6379")
os.environ.setdefault("REDIS_DB", "0")
os.environ.setdefault("JWT_SECRET_KEY", "Test-Secret-Key-With-Enough-Length-123!")
os.environ.setdefault("JWT_ACCESS_TOKEN_EXPIRE_MINUTES", "30")
os.environ.setdefault("RATE_LIMIT_STORAGE_URL", "memory://")
os.environ.setdefault("ENVIRONMENT", "test")

from collections.abc import AsyncIterator, Awaitable, Callable, Iterator  # noqa: E402
from pathlib import Path  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import update  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from pawboard.api.schemas import (  # noqa: E402
    AccessTokenResponse,
    LoginUserRequest,
    RegisterUserRequest,
    UserResponse,
)
from pawboard.core import config  # noqa: E402
from pawboard.core.rate_limit import limiter  # noqa: E402
from pawboard.db import models  # noqa: E402, F401
from pawboard.db.base import Base  # noqa: E402
from pawboard.db.models.user import User  # noqa: E402
from pawboard.db.session import get_engine, get_session_maker  # noqa: E402
from pawboard.main import create_app  # noqa: E402

TEST_PASSWORD = "password123"

TokenFactory = Callable[..., Awaitable[str]]


def _test_database_url(tmp_path: Path) -> str:
    """An explicit TEST_DATABASE_URL wins; otherwise each test gets its own SQLite file."""
    return os.getenv("TEST_DATABASE_URL") or f"sqlite+aiosqlite:///{tmp_path / 'pawboard.db'}"


def _use_test_settings(database_url: str) -> None:
    config.settings.environment = "test"
    config.settings.database_url = database_url


@pytest.fixture(autouse=True)
def reset_rate_limits() -> Iterator[None]:
    """Rate limit counters live in process memory; start every test from zero."""
    limiter.reset()
    yield
    limiter.reset()


# Async fixtures (function-scoped, for async tests that need database access).


@pytest_asyncio.fixture(scope="function")
async def setup_test_db(tmp_path: Path) -> AsyncIterator[None]:
    """Points the app at the test database and creates the tables."""
    _use_test_settings(_test_database_url(tmp_path))
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(setup_test_db: None) -> AsyncIterator[AsyncSession]:
    """Creates a database session on the same engine the app uses."""
    async with get_session_maker()() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def async_app(setup_test_db: None) -> FastAPI:
    """Creates a FastAPI app bound to the test database."""
    return create_app()


@pytest_asyncio.fixture(scope="function")
async def async_http_client(async_app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Creates an async http client."""
    transport = ASGITransport(app=async_app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


async def register_and_login(
    client: AsyncClient,
    email: str,
    role: str | None = None,
    password: str = TEST_PASSWORD,
) -> str:
    """Register a user through the API, optionally promote them, and return a token."""
    register_payload = RegisterUserRequest(
        email=email, password=password, confirm_password=password
    ).model_dump()
    register_response = await client.post("/api/auth/register", json=register_payload)
    user = UserResponse.model_validate(register_response.json())

    if role is not None:
        async with get_session_maker()() as session:
            await session.execute(update(User).where(User.id == user.id).values(role=role))
            await session.commit()

    login_payload = LoginUserRequest(email=email, password=password).model_dump()
    login_response = await client.post("/api/auth/login", json=login_payload)
    return AccessTokenResponse.model_validate(login_response.json()).access_token


@pytest_asyncio.fixture(scope="function")
async def user_token_factory(async_http_client: AsyncClient) -> TokenFactory:
    """Returns an async callable that creates a user with a role and returns its token."""

    async def factory(email: str, role: str | None = None) -> str:
        return await register_and_login(async_http_client, email, role)

    return factory


@pytest_asyncio.fixture(scope="function")
async def member_token(user_token_factory: TokenFactory) -> str:
    return await user_token_factory("member@example.com")


@pytest_asyncio.fixture(scope="function")
async def moderator_token(user_token_factory: TokenFactory) -> str:
    return await user_token_factory("moderator@example.com", "moderator")


# Synchronous fixtures (function-scoped, for synchronous tests that don't need database access)


@pytest.fixture(scope="function")
def app(tmp_path: Path) -> FastAPI:
    """Creates a FastAPI app for synchronous tests (function-scoped)."""
    _use_test_settings(_test_database_url(tmp_path))
    return create_app()


@pytest.fixture(scope="function")
def http_client(app: FastAPI) -> Iterator[TestClient]:
    """Creates a synchronous http client (for synchronous tests)."""
    with TestClient(app) as client:
        yield client

"""
Pytest fixtures: a fresh in-memory SQLite database per test.

Set TEST_DATABASE_URL to run against another async driver (for example
``postgresql+asyncpg://...``); tables are dropped and recreated per test.
"""

from __future__ import annotations

import os
from typing import Any, Dict, List

import httpx
import pytest
import pytest_asyncio

from api.app import create_app
from auth.jwt import TokenIssuer
from config.settings import Settings
from database.models import Base, User
from tests.helpers import (
    FIXED_IAT,
    TEST_BCRYPT_ROUNDS,
    TEST_JWT_SECRET,
    make_users_array,
    seed_users,
)

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite://")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url=TEST_DATABASE_URL,
        jwt_secret=TEST_JWT_SECRET,
        bcrypt_rounds=TEST_BCRYPT_ROUNDS,
        create_tables=False,
    )


@pytest.fixture
def token_issuer() -> TokenIssuer:
    return TokenIssuer(TEST_JWT_SECRET, clock=lambda: FIXED_IAT)


@pytest_asyncio.fixture
async def app(settings, token_issuer):
    app = create_app(settings)
    app.state.token_issuer = token_issuer

    engine = app.state.engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield app

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def db(app):
    """A session independent of the ones the request handlers use."""
    async with app.state.session_factory() as session:
        yield session


@pytest.fixture
def test_users() -> List[Dict[str, Any]]:
    return make_users_array()


@pytest_asyncio.fixture
async def seeded_users(app, test_users) -> List[User]:
    async with app.state.session_factory() as session:
        return await seed_users(session, test_users)

"""
Shared test data and database helpers.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from auth.password import hash_password
from database.models import User

TEST_JWT_SECRET = "test-jwt-secret-for-testing-only"
# Fixed signing time so tokens compare byte-for-byte.
FIXED_IAT = 1_700_000_000
# bcrypt's minimum work factor keeps the suite fast.
TEST_BCRYPT_ROUNDS = 4

VALID_PASSWORD = "TestPassw0rd!"


def make_users_array() -> List[Dict[str, Any]]:
    """Seed users with plaintext passwords; ``seed_users`` hashes them."""
    return [
        {
            "user_name": "test-user-1",
            "full_name": "Test user 1",
            "nick_name": "TU1",
            "password": "password",
        },
        {
            "user_name": "test-user-2",
            "full_name": "Test user 2",
            "nick_name": "TU2",
            "password": "password",
        },
        {
            "user_name": "test-user-3",
            "full_name": "Test user 3",
            "nick_name": None,
            "password": "password",
        },
    ]


async def seed_users(session: AsyncSession, users: List[Dict[str, Any]]) -> List[User]:
    """Insert *users* with bcrypt-hashed passwords and return the rows."""
    now = datetime.now(timezone.utc)
    rows = [
        User(
            user_name=u["user_name"],
            full_name=u["full_name"],
            nick_name=u["nick_name"],
            password=hash_password(u["password"], rounds=TEST_BCRYPT_ROUNDS),
            date_created=now,
        )
        for u in users
    ]
    session.add_all(rows)
    await session.commit()
    return rows


async def fetch_user(session: AsyncSession, user_name: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.user_name == user_name))
    return result.scalar_one_or_none()


async def count_users(session: AsyncSession, user_name: str) -> int:
    result = await session.execute(
        select(func.count()).select_from(User).where(User.user_name == user_name)
    )
    return result.scalar_one()


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; treat them as UTC."""
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def parse_timestamp(text: str) -> datetime:
    # fromisoformat only accepts a trailing "Z" from Python 3.11 on.
    return as_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))

"""
Data access for the ``users`` table.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.exceptions import BackendError, UserNameTakenError
from database.models import User

logger = logging.getLogger(__name__)


def _is_unique_violation(exc: IntegrityError) -> bool:
    text = str(exc.orig).lower() if exc.orig is not None else str(exc).lower()
    return "unique" in text or "duplicate key" in text


class UserRepository:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def find_by_user_name(self, user_name: str) -> Optional[User]:
        try:
            result = await self._session.execute(
                select(User).where(User.user_name == user_name)
            )
        except SQLAlchemyError as exc:
            raise BackendError() from exc
        return result.scalar_one_or_none()

    async def get_by_id(self, user_id: int) -> Optional[User]:
        try:
            result = await self._session.execute(
                select(User).where(User.id == user_id)
            )
        except SQLAlchemyError as exc:
            raise BackendError() from exc
        return result.scalar_one_or_none()

    async def exists_by_user_name(self, user_name: str) -> bool:
        try:
            result = await self._session.execute(
                select(func.count()).select_from(User).where(User.user_name == user_name)
            )
        except SQLAlchemyError as exc:
            raise BackendError() from exc
        return result.scalar_one() > 0

    async def add(
        self,
        user_name: str,
        password_hash: str,
        full_name: str,
        nick_name: Optional[str] = None,
    ) -> User:
        """
        Insert a user row and flush it so ``id`` is populated.

        A unique-constraint violation on ``user_name`` becomes
        ``UserNameTakenError``; any other store failure becomes
        ``BackendError``. The session is rolled back in both cases.
        """
        user = User(
            user_name=user_name,
            password=password_hash,
            full_name=full_name,
            nick_name=nick_name,
            date_created=datetime.now(timezone.utc),
        )
        self._session.add(user)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            await self._session.rollback()
            if _is_unique_violation(exc):
                logger.info("Insert rejected by unique constraint: %s", user_name)
                raise UserNameTakenError(user_name) from exc
            raise BackendError() from exc
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise BackendError() from exc

        logger.debug("Inserted user %s (%s)", user.user_name, user.id)
        return user

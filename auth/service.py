"""
Registration and authentication services.

Both services are built per request with their collaborators injected:
the repository wraps the request's DB session, and the token issuer and
bcrypt work factor come from the application settings.
"""

from __future__ import annotations

import asyncio
import logging

from auth.exceptions import (
    InvalidCredentialsError,
    InvalidTokenError,
    PasswordPolicyError,
    UserNameTakenError,
    UserNotFoundError,
)
from auth.jwt import TokenIssuer
from auth.password import (
    DEFAULT_ROUNDS,
    dummy_hash,
    hash_password_async,
    verify_password_async,
)
from auth.policy import validate_password
from auth.schemas import LoginRequest, RegisterRequest
from database.models import User
from database.repository import UserRepository

logger = logging.getLogger(__name__)


class RegistrationService:
    def __init__(self, users: UserRepository, rounds: int = DEFAULT_ROUNDS):
        self._users = users
        self._rounds = rounds

    async def register(self, req: RegisterRequest) -> User:
        """
        Create a user from a validated registration request.

        Raises ``PasswordPolicyError`` or ``UserNameTakenError``. The
        existence check is advisory: a concurrent insert that wins the race
        trips the unique constraint, which the repository reports as the
        same ``UserNameTakenError``.
        """
        violation = validate_password(req.password)
        if violation is not None:
            raise PasswordPolicyError(violation)

        if await self._users.exists_by_user_name(req.user_name):
            raise UserNameTakenError(req.user_name)

        password_hash = await hash_password_async(req.password, self._rounds)
        user = await self._users.add(
            user_name=req.user_name,
            password_hash=password_hash,
            full_name=req.full_name,
            nick_name=req.nickname,
        )
        logger.info("Registered user %s (%s)", user.user_name, user.id)
        return user

    async def get_user(self, user_id: int) -> User:
        user = await self._users.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user


class AuthenticationService:
    def __init__(
        self,
        users: UserRepository,
        issuer: TokenIssuer,
        rounds: int = DEFAULT_ROUNDS,
    ):
        self._users = users
        self._issuer = issuer
        self._rounds = rounds

    async def login(self, req: LoginRequest) -> str:
        """Verify credentials and return a signed auth token."""
        user = await self._users.find_by_user_name(req.user_name)
        if user is None:
            # Unknown users pay the same bcrypt cost as a wrong password.
            decoy = await asyncio.to_thread(dummy_hash, self._rounds)
            await verify_password_async(req.password, decoy)
            logger.info("Login failed: unknown user %s", req.user_name)
            raise InvalidCredentialsError()

        if not await verify_password_async(req.password, user.password):
            logger.info("Login failed: bad password for %s", req.user_name)
            raise InvalidCredentialsError()

        token = self._issuer.create_token(user.id, user.user_name)
        logger.info("Login: %s (%s)", user.user_name, user.id)
        return token

    async def authenticate_token(self, token: str) -> User:
        """Resolve a bearer token to the user named by its subject.

        The token's ``user_id`` must match the row, so a token for a
        deleted account does not carry over to a new one with the same name.
        """
        payload = self._issuer.verify_token(token)
        user = await self._users.find_by_user_name(payload.user_name)
        if user is None or user.id != payload.user_id:
            raise InvalidTokenError()
        return user

    def refresh(self, user: User) -> str:
        return self._issuer.create_token(user.id, user.user_name)

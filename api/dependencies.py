"""
FastAPI dependencies (shared across routes).

Everything process-wide (settings, session factory, token issuer) is read
from ``request.app.state``, where ``create_app`` put it.
"""

from __future__ import annotations

from typing import AsyncGenerator, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from auth.exceptions import MissingTokenError
from auth.jwt import TokenIssuer
from auth.service import AuthenticationService, RegistrationService
from config.settings import Settings
from database.models import User
from database.repository import UserRepository
from database.session import session_scope


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


async def db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    async with session_scope(request.app.state.session_factory) as session:
        yield session


def user_repository(session: AsyncSession = Depends(db_session)) -> UserRepository:
    return UserRepository(session)


def registration_service(
    users: UserRepository = Depends(user_repository),
    settings: Settings = Depends(get_settings),
) -> RegistrationService:
    return RegistrationService(users, rounds=settings.bcrypt_rounds)


def authentication_service(
    users: UserRepository = Depends(user_repository),
    issuer: TokenIssuer = Depends(get_token_issuer),
    settings: Settings = Depends(get_settings),
) -> AuthenticationService:
    return AuthenticationService(users, issuer, rounds=settings.bcrypt_rounds)


async def get_current_user(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    service: AuthenticationService = Depends(authentication_service),
) -> User:
    """
    Extract and verify the Bearer token from the Authorization header.
    Returns the user named by the token's subject.
    """
    if not authorization or not authorization.lower().startswith("bearer "):
        raise MissingTokenError()
    token = authorization[7:].strip()
    return await service.authenticate_token(token)

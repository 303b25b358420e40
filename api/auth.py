"""
Auth API routes — login and token refresh.

Route prefix: /api/auth
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.dependencies import authentication_service, get_current_user
from auth.schemas import AuthTokenResponse, LoginRequest
from auth.service import AuthenticationService
from database.models import User

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/login", response_model=AuthTokenResponse)
async def login(
    req: LoginRequest,
    service: AuthenticationService = Depends(authentication_service),
) -> AuthTokenResponse:
    """Login with user name + password."""
    token = await service.login(req)
    return AuthTokenResponse(authToken=token)


@router.post("/refresh", response_model=AuthTokenResponse)
async def refresh(
    user: User = Depends(get_current_user),
    service: AuthenticationService = Depends(authentication_service),
) -> AuthTokenResponse:
    """Issue a fresh token for the bearer of a valid one."""
    token = service.refresh(user)
    logger.info("Refreshed token for %s (%s)", user.user_name, user.id)
    return AuthTokenResponse(authToken=token)

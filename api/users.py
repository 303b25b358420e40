"""
User API routes — registration and lookup.

Route prefix: /api/users
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import db_session, registration_service
from auth.schemas import RegisterRequest, UserOut
from auth.service import RegistrationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users"])


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def register(
    req: RegisterRequest,
    response: Response,
    service: RegistrationService = Depends(registration_service),
    session: AsyncSession = Depends(db_session),
) -> UserOut:
    """Register a new user."""
    user = await service.register(req)
    # Commit before responding so the row is visible to the next request.
    await session.commit()

    response.headers["Location"] = f"api/users/{user.id}"
    return UserOut.model_validate(user)


@router.get("/{user_id}", response_model=UserOut)
async def get_user(
    user_id: int,
    service: RegistrationService = Depends(registration_service),
) -> UserOut:
    """Fetch a single user by id."""
    user = await service.get_user(user_id)
    return UserOut.model_validate(user)

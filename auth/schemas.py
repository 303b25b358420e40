"""
Request and response schemas for the user and auth endpoints.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, field_validator


# ── Requests ──────────────────────────────────────────────────────────
# Field order is the order in which missing fields are reported.


class _RequestBody(BaseModel):
    @field_validator("*")
    @classmethod
    def _encodable(cls, value):
        # JSON allows lone surrogate escapes; they cannot be hashed or stored.
        if isinstance(value, str):
            try:
                value.encode("utf-8")
            except UnicodeEncodeError as exc:
                raise ValueError("must be valid UTF-8 text") from exc
        return value


class RegisterRequest(_RequestBody):
    user_name: str
    password: str
    full_name: str
    nickname: Optional[str] = None


class LoginRequest(_RequestBody):
    user_name: str
    password: str


# ── Responses ─────────────────────────────────────────────────────────


class UserOut(BaseModel):
    """Public representation of a user. The password hash is never included."""

    id: int
    user_name: str
    full_name: str
    nick_name: str = ""
    date_created: datetime

    model_config = {"from_attributes": True}

    @field_validator("nick_name", mode="before")
    @classmethod
    def _null_nick_name(cls, value: Optional[str]) -> str:
        return value if value is not None else ""

    @field_validator("date_created")
    @classmethod
    def _utc_date_created(cls, value: datetime) -> datetime:
        # SQLite drops the offset; stored timestamps are always UTC.
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class AuthTokenResponse(BaseModel):
    authToken: str

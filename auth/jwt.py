"""
JWT token creation and verification.

Tokens are HS256-signed JWTs carrying ``user_id`` in the payload and the
user name as the ``sub`` claim. The secret, expiry policy and clock are
injected at construction; ``create_app`` builds one issuer per application
from ``Settings``.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import jwt

from auth.exceptions import BackendError, InvalidTokenError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenPayload:
    user_id: int
    user_name: str


class TokenIssuer:
    """Signs and verifies auth tokens.

    Two tokens for the same user signed within the same second are
    byte-identical: the payload is ``{user_id, iat[, exp], sub}`` in that
    order and the header is fixed by the algorithm.
    """

    ALGORITHM = "HS256"

    def __init__(
        self,
        secret_key: str,
        expiry_seconds: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        if not secret_key:
            msg = "JWT secret key cannot be empty"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._expiry_seconds = expiry_seconds
        self._clock = clock

    def create_token(self, user_id: int, user_name: str) -> str:
        """Create a signed token for *user_id* with subject *user_name*."""
        issued_at = int(self._clock())
        payload = {"user_id": user_id, "iat": issued_at}
        if self._expiry_seconds is not None:
            payload["exp"] = issued_at + self._expiry_seconds
        payload["sub"] = user_name

        try:
            return jwt.encode(payload, self._secret_key, algorithm=self.ALGORITHM)
        except jwt.PyJWTError as exc:
            logger.exception("Failed to sign token for user %s", user_id)
            raise BackendError() from exc

    def verify_token(self, token: str) -> TokenPayload:
        """
        Verify *token* and return its identity claims.

        Raises ``InvalidTokenError`` on a bad signature, an expired token or
        a malformed payload.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.ALGORITHM],
                options={"require": ["sub"]},
            )
            return TokenPayload(user_id=int(payload["user_id"]), user_name=payload["sub"])
        except jwt.PyJWTError as exc:
            logger.debug("Rejected token: %s", exc)
            raise InvalidTokenError() from exc
        except (KeyError, TypeError, ValueError) as exc:
            logger.debug("Malformed token payload: %s", exc)
            raise InvalidTokenError() from exc

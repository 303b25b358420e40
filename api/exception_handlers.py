"""Centralized exception handlers for the FastAPI application.

Auth exceptions are mapped to HTTP responses with a single error format:

    {"error": "Human-readable error message"}

Request-body validation failures are reported as 400 for the first failing
field, in the order the schema declares its fields. Anything else becomes
an opaque 500.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Sequence, Type

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from auth.exceptions import (
    AuthError,
    BackendError,
    InvalidCredentialsError,
    InvalidFieldError,
    InvalidTokenError,
    MissingFieldError,
    MissingTokenError,
    PasswordPolicyError,
    UserNameTakenError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"

ERROR_TYPE_TO_STATUS: Dict[Type[AuthError], int] = {
    MissingFieldError: status.HTTP_400_BAD_REQUEST,
    InvalidFieldError: status.HTTP_400_BAD_REQUEST,
    PasswordPolicyError: status.HTTP_400_BAD_REQUEST,
    UserNameTakenError: status.HTTP_400_BAD_REQUEST,
    InvalidCredentialsError: status.HTTP_400_BAD_REQUEST,
    UserNotFoundError: status.HTTP_404_NOT_FOUND,
    MissingTokenError: status.HTTP_401_UNAUTHORIZED,
    InvalidTokenError: status.HTTP_401_UNAUTHORIZED,
    BackendError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _status_for(exc: AuthError) -> int:
    for exc_type in type(exc).__mro__:
        if exc_type in ERROR_TYPE_TO_STATUS:
            return ERROR_TYPE_TO_STATUS[exc_type]
    return status.HTTP_400_BAD_REQUEST


def validation_error_to_auth_error(errors: Sequence[Dict[str, Any]]) -> AuthError:
    """Translate pydantic errors into the first field-level ``AuthError``.

    A key that is absent and a key that is explicitly ``null`` both count as
    missing.
    """
    for error in errors:
        loc = error.get("loc", ())
        if len(loc) < 2 or loc[0] != "body" or not isinstance(loc[1], str):
            continue
        field = loc[1]
        if error.get("type") == "missing" or error.get("input", ...) is None:
            return MissingFieldError(field)
        return InvalidFieldError(field)
    return AuthError("Invalid request body")


async def _auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    status_code = _status_for(exc)
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(
            "%s %s failed: %s",
            request.method,
            request.url.path,
            exc.__cause__ or exc,
            exc_info=exc,
        )
        return _error_response(status_code, INTERNAL_ERROR_MESSAGE)
    logger.debug("%s %s -> %d %s", request.method, request.url.path, status_code, exc.message)
    return _error_response(status_code, exc.message)


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    auth_error = validation_error_to_auth_error(exc.errors())
    return _error_response(status.HTTP_400_BAD_REQUEST, auth_error.message)


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthError, _auth_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)

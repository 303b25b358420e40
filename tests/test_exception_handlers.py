"""
Tests for error translation at the request boundary.
"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from api.exception_handlers import validation_error_to_auth_error
from auth.exceptions import BackendError, InvalidFieldError, MissingFieldError
from database.repository import UserRepository


class TestValidationErrorTranslation:
    def test_missing(self):
        err = validation_error_to_auth_error(
            [{"type": "missing", "loc": ("body", "password"), "input": {}}]
        )
        assert isinstance(err, MissingFieldError)
        assert err.message == "Missing 'password' in request body"

    def test_null_is_missing(self):
        err = validation_error_to_auth_error(
            [{"type": "string_type", "loc": ("body", "user_name"), "input": None}]
        )
        assert isinstance(err, MissingFieldError)

    def test_wrong_type(self):
        err = validation_error_to_auth_error(
            [{"type": "string_type", "loc": ("body", "full_name"), "input": 5}]
        )
        assert isinstance(err, InvalidFieldError)
        assert err.message == "Invalid 'full_name' in request body"

    def test_first_field_wins(self):
        err = validation_error_to_auth_error(
            [
                {"type": "missing", "loc": ("body", "user_name"), "input": {}},
                {"type": "missing", "loc": ("body", "password"), "input": {}},
            ]
        )
        assert err.field == "user_name"

    def test_whole_body(self):
        err = validation_error_to_auth_error(
            [{"type": "missing", "loc": ("body",), "input": None}]
        )
        assert err.message == "Invalid request body"


class TestBodyShape:
    @pytest.mark.asyncio
    async def test_no_body(self, client):
        resp = await client.post("/api/auth/login")

        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid request body"}

    @pytest.mark.asyncio
    async def test_malformed_json(self, client):
        resp = await client.post(
            "/api/auth/login",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert resp.status_code == 400
        assert "error" in resp.json()


class TestServerErrors:
    @pytest.mark.asyncio
    async def test_backend_error_is_opaque_500(self, client):
        with patch.object(
            UserRepository,
            "find_by_user_name",
            AsyncMock(side_effect=BackendError("connection refused to 10.0.0.3")),
        ):
            resp = await client.post(
                "/api/auth/login",
                json={"user_name": "someone", "password": "whatever"},
            )

        assert resp.status_code == 500
        assert resp.json() == {"error": "Internal server error"}

    @pytest.mark.asyncio
    async def test_unexpected_error_is_opaque_500(self, app):
        transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
            with patch.object(
                UserRepository,
                "exists_by_user_name",
                AsyncMock(side_effect=RuntimeError("boom")),
            ):
                resp = await c.post(
                    "/api/users",
                    json={
                        "user_name": "someone",
                        "password": "TestPassw0rd!",
                        "full_name": "Some One",
                    },
                )

        assert resp.status_code == 500
        assert resp.json() == {"error": "Internal server error"}

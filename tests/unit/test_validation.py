"""Tests for request/response contract validation."""

from datetime import UTC, datetime
from uuid import uuid4

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from boilerplate_api.domain.entities import User
from boilerplate_api.domain.errors import ResponseSchemaError
from boilerplate_api.presentation.http.users import UserResponse
from boilerplate_api.presentation.http.validation import RequestValidator

contract = RequestValidator(response=UserResponse)


class TestRespond:
    def test_serializes_with_camel_case(self):
        user = User(id=uuid4(), email="jane@example.com", name="Jane Doe")

        response = contract.respond(user, status_code=201)

        assert response.status_code == 201
        assert b'"createdAt"' in response.body
        assert b'"clerk' not in response.body

    def test_invalid_payload_raises(self):
        with pytest.raises(ResponseSchemaError) as exc_info:
            contract.respond({"id": "not-a-uuid", "name": "", "email": "x"})

        assert exc_info.value.details["errors"]


class TestResponseSchemaFailureOverHttp:
    @pytest.mark.asyncio
    async def test_is_a_generic_server_error(self, app: FastAPI):
        now = datetime.now(UTC)

        async def broken():
            return contract.respond(
                {
                    "id": "leaked-secret",
                    "name": "x",
                    "email": "x",
                    "created_at": now,
                    "updated_at": now,
                }
            )

        app.add_api_route("/broken", broken)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/broken")

        assert response.status_code == 500
        assert response.json()["error"] == "INTERNAL_ERROR"
        assert "leaked-secret" not in response.text

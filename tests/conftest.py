"""Test configuration: isolated SQLite database, in-process client, signed fixtures."""

import base64
import json
from collections.abc import AsyncGenerator, Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
import pytest
import pytest_asyncio
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from svix.webhooks import Webhook

from boilerplate_api.config import Settings
from boilerplate_api.infrastructure.database import Database
from boilerplate_api.infrastructure.database.models import Base
from boilerplate_api.main import create_app

WEBHOOK_SECRET = "whsec_" + base64.b64encode(b"boilerplate-webhook-test-secret!").decode()


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def jwt_public_pem(rsa_private_key: rsa.RSAPrivateKey) -> str:
    return (
        rsa_private_key.public_key()
        .public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode()
    )


@pytest.fixture
def make_token(rsa_private_key: rsa.RSAPrivateKey) -> Callable[..., str]:
    """Mint RS256 session tokens shaped like Clerk's."""

    def _make(
        sub: str = "user_2abc",
        sid: str = "sess_123",
        expires_in: int = 300,
        **claims: Any,
    ) -> str:
        now = datetime.now(UTC)
        payload = {
            "sub": sub,
            "sid": sid,
            "iat": now - timedelta(seconds=10),
            "nbf": now - timedelta(seconds=10),
            "exp": now + timedelta(seconds=expires_in),
            **claims,
        }
        return jwt.encode(payload, rsa_private_key, algorithm="RS256")

    return _make


@pytest.fixture
def sign_webhook() -> Callable[..., dict[str, str]]:
    """Build svix headers signing ``body`` with the test webhook secret."""

    def _sign(body: str, msg_id: str = "msg_test") -> dict[str, str]:
        timestamp = datetime.now(UTC)
        return {
            "svix-id": msg_id,
            "svix-timestamp": str(int(timestamp.timestamp())),
            "svix-signature": Webhook(WEBHOOK_SECRET).sign(msg_id, timestamp, body),
            "content-type": "application/json",
        }

    return _sign


@pytest.fixture
def clerk_user_event() -> Callable[..., str]:
    """Serialized Clerk ``user.*`` event."""

    def _event(
        event_type: str = "user.created",
        clerk_id: str = "user_2abc",
        email: str | None = "jane@example.com",
        first_name: str | None = "Jane",
        last_name: str | None = "Doe",
    ) -> str:
        data: dict[str, Any] = {"id": clerk_id, "object": "user"}
        if event_type != "user.deleted":
            data.update(
                email_addresses=[{"id": "idn_1", "email_address": email}] if email else [],
                first_name=first_name,
                last_name=last_name,
            )
        else:
            data["deleted"] = True
        return json.dumps({"type": event_type, "object": "event", "data": data})

    return _event


@pytest.fixture
def settings(tmp_path, jwt_public_pem: str) -> Settings:
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        _env_file=None,
        environment="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        clerk_webhook_secret=WEBHOOK_SECRET,
        clerk_jwt_key=jwt_public_pem,
        clerk_issuer="",
        clerk_authorized_parties=[],
        metrics_username="",
        metrics_password="",
        loki_host="",
        otel_enabled=False,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def database(settings: Settings) -> AsyncGenerator[Database, None]:
    """Database with the schema created from the ORM metadata."""
    db = Database.from_settings(settings)
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield db
    await db.dispose()


@pytest.fixture
def app(settings: Settings, database: Database) -> FastAPI:
    return create_app(settings=settings, database=database)


@pytest_asyncio.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

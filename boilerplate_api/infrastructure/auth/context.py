"""Authentication context for request handling."""

from dataclasses import dataclass, field
from typing import Any

from fastapi import Request

from boilerplate_api.domain.errors import UnauthorizedError
from boilerplate_api.infrastructure.telemetry.logging import get_logger

logger = get_logger(__name__)


@dataclass
class AuthContext:
    """Authenticated user context available in request handlers.

    Profile fields are placeholders; session tokens do not carry them.
    """

    user_id: str
    session_id: str
    clerk_id: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    claims: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "AuthContext":
        user_id = claims["sub"]
        return cls(
            user_id=user_id,
            session_id=claims.get("sid") or "",
            clerk_id=user_id,
            claims=claims,
        )

    @property
    def is_authenticated(self) -> bool:
        """Check if user is authenticated."""
        return bool(self.user_id)


def get_optional_auth(request: Request) -> AuthContext | None:
    """FastAPI dependency returning the auth context, if the request has one."""
    return getattr(request.state, "auth", None)


def require_auth(request: Request) -> AuthContext:
    """FastAPI dependency that rejects requests without an authenticated user."""
    auth = get_optional_auth(request)
    if auth is None or not auth.is_authenticated:
        # Set by RequestContextMiddleware
        context = getattr(request.state, "context", None)
        log = context.logger(__name__) if context is not None else logger
        log.warning(
            "Unauthorized access attempt",
            extra={
                "event": "auth.unauthorized",
                "path": request.url.path,
                "method": request.method,
            },
        )
        raise UnauthorizedError()
    return auth

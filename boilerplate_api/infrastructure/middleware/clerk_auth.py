"""Populate the auth context from a Clerk bearer token."""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from boilerplate_api.domain.errors import AuthError
from boilerplate_api.infrastructure.auth.clerk import ClerkAuth
from boilerplate_api.infrastructure.auth.context import AuthContext
from boilerplate_api.infrastructure.middleware.request_context import get_request_context


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from an ``Authorization: Bearer ...`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class ClerkAuthMiddleware(BaseHTTPMiddleware):
    """Attach an ``AuthContext`` to requests carrying a valid session token.

    Requests are never rejected here; guarded routes declare ``require_auth``.
    """

    def __init__(self, app: ASGIApp, clerk_auth: ClerkAuth):
        super().__init__(app)
        self.clerk_auth = clerk_auth

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.auth = None

        token = extract_bearer_token(request.headers.get("Authorization"))
        if token:
            context = get_request_context(request)
            logger = context.logger(__name__)
            try:
                claims = await self.clerk_auth.verify_token(token)
            except AuthError as e:
                logger.debug(
                    "Bearer token rejected",
                    extra={"event": "auth.clerk.rejected", "error_code": e.code},
                )
            else:
                auth = AuthContext.from_claims(claims)
                request.state.auth = auth
                context.user_id = auth.user_id
                context.session_id = auth.session_id or None
                logger.debug(
                    "Clerk session authenticated",
                    extra={"event": "auth.clerk.success", "user_id": auth.user_id},
                )

        return await call_next(request)

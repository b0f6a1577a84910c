"""Request context middleware for correlation IDs and access logging."""

import time
from dataclasses import dataclass
from uuid import uuid4

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse, Response

from boilerplate_api.infrastructure.middleware.error_handler import INTERNAL_ERROR_BODY
from boilerplate_api.infrastructure.telemetry.logging import ContextLogger, get_logger

REQUEST_ID_HEADER = "X-Request-ID"

ACCESS_LOGGER = "boilerplate_api.access"


@dataclass
class RequestContext:
    """Per-request identifiers, carried on ``request.state.context``."""

    request_id: str
    user_id: str | None = None
    session_id: str | None = None

    def logger(self, name: str) -> ContextLogger:
        """Logger bound to this request's identifiers."""
        return get_logger(name).bind(
            request_id=self.request_id,
            user_id=self.user_id,
            session_id=self.session_id,
        )


def get_request_context(request: Request) -> RequestContext:
    """FastAPI dependency returning the current request's context."""
    context = getattr(request.state, "context", None)
    if context is None:
        # Routes mounted without the middleware still get an ID
        context = RequestContext(request_id=str(uuid4()))
        request.state.context = context
    return context


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware that sets up request context for logging."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        # Generate or extract request ID
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        context = RequestContext(request_id=request_id)
        request.state.context = context

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            # Answered here so the failure still gets an ID and an access line
            context.logger(__name__).exception(
                f"Unhandled exception: {e}",
                extra={
                    "event": "http.unhandled_error",
                    "path": request.url.path,
                    "error_type": type(e).__name__,
                },
            )
            response = JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)
        duration_ms = (time.perf_counter() - start) * 1000

        response.headers[REQUEST_ID_HEADER] = request_id

        if request.method != "OPTIONS":
            context.logger(ACCESS_LOGGER).info(
                f"{request.method} {request.url.path} - {response.status_code}",
                extra={
                    "event": "http.request",
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": round(duration_ms, 2),
                },
            )

        return response

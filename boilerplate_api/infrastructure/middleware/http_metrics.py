"""Prometheus instrumentation for HTTP requests."""

import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from boilerplate_api.infrastructure.telemetry.logging import get_logger
from boilerplate_api.infrastructure.telemetry.metrics import (
    record_http_request,
    resolve_route_pattern,
)

logger = get_logger(__name__)


def _content_length(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


class HttpMetricsMiddleware(BaseHTTPMiddleware):
    """Record duration, count and sizes of every non-preflight request."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method == "OPTIONS":
            return await call_next(request)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            self._record(request, 500, time.perf_counter() - start, None)
            raise

        self._record(
            request,
            response.status_code,
            time.perf_counter() - start,
            _content_length(response.headers.get("content-length")),
        )
        return response

    def _record(
        self,
        request: Request,
        status_code: int,
        duration: float,
        response_size: int | None,
    ) -> None:
        try:
            # The router writes the matched route and its params into the scope
            route = resolve_route_pattern(
                request.url.path,
                request.scope.get("path_params"),
                matched=request.scope.get("route") is not None,
            )
            record_http_request(
                method=request.method,
                route=route,
                status_code=status_code,
                duration_seconds=duration,
                request_size=_content_length(request.headers.get("content-length")),
                response_size=response_size,
            )
        except Exception as e:
            logger.debug(
                "Failed to record HTTP metrics",
                extra={"event": "metrics.http.error", "error": str(e)},
            )

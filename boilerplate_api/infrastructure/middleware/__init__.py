"""Middleware infrastructure."""

from boilerplate_api.infrastructure.middleware.clerk_auth import ClerkAuthMiddleware
from boilerplate_api.infrastructure.middleware.error_handler import error_handler_middleware
from boilerplate_api.infrastructure.middleware.http_metrics import HttpMetricsMiddleware
from boilerplate_api.infrastructure.middleware.request_context import (
    RequestContext,
    RequestContextMiddleware,
    get_request_context,
)

__all__ = [
    "ClerkAuthMiddleware",
    "HttpMetricsMiddleware",
    "RequestContext",
    "RequestContextMiddleware",
    "error_handler_middleware",
    "get_request_context",
]

"""Telemetry infrastructure (logging, tracing, metrics)."""

from boilerplate_api.infrastructure.telemetry.logging import (
    ContextLogger,
    configure_logging,
    get_logger,
    shutdown_logging,
)
from boilerplate_api.infrastructure.telemetry.metrics import (
    record_http_request,
    record_user_operation,
    resolve_route_pattern,
    set_service_info,
    track_database_query,
    track_external_api_call,
)
from boilerplate_api.infrastructure.telemetry.tracing import (
    configure_tracing,
    instrument_app,
    shutdown_tracing,
)

__all__ = [
    # Logging
    "ContextLogger",
    "configure_logging",
    "get_logger",
    "shutdown_logging",
    # Tracing
    "configure_tracing",
    "instrument_app",
    "shutdown_tracing",
    # Metrics
    "set_service_info",
    "record_http_request",
    "record_user_operation",
    "resolve_route_pattern",
    "track_database_query",
    "track_external_api_call",
]

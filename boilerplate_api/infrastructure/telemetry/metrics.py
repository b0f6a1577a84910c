"""Prometheus metrics configuration."""

import re
import time
from collections.abc import Generator, Mapping
from contextlib import contextmanager
from typing import Any

from prometheus_client import Counter, Histogram, Info

METRIC_PREFIX = "boilerplate_"

# Label used for requests that did not match any route
UNMATCHED_ROUTE = "unmatched"

# Service info
SERVICE_INFO = Info(f"{METRIC_PREFIX}app", "Boilerplate API service information")

# Request metrics
HTTP_LABELS = ["method", "route", "status_code"]

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    f"{METRIC_PREFIX}http_request_duration_seconds",
    "Duration of HTTP requests in seconds",
    HTTP_LABELS,
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0),
)

HTTP_REQUESTS_TOTAL = Counter(
    f"{METRIC_PREFIX}http_requests_total",
    "Total number of HTTP requests",
    HTTP_LABELS,
)

_SIZE_BUCKETS = (100, 1000, 5000, 10000, 50000, 100000, 500000, 1000000)

HTTP_REQUEST_SIZE_BYTES = Histogram(
    f"{METRIC_PREFIX}http_request_size_bytes",
    "Size of HTTP requests in bytes",
    HTTP_LABELS,
    buckets=_SIZE_BUCKETS,
)

HTTP_RESPONSE_SIZE_BYTES = Histogram(
    f"{METRIC_PREFIX}http_response_size_bytes",
    "Size of HTTP responses in bytes",
    HTTP_LABELS,
    buckets=_SIZE_BUCKETS,
)

# User metrics
USER_OPERATIONS_TOTAL = Counter(
    f"{METRIC_PREFIX}user_operations_total",
    "Total number of user operations",
    ["operation_type", "status"],
)

# Database metrics
DATABASE_QUERIES_TOTAL = Counter(
    f"{METRIC_PREFIX}database_queries_total",
    "Total number of database queries",
    ["operation", "table"],
)

DATABASE_QUERY_DURATION_SECONDS = Histogram(
    f"{METRIC_PREFIX}database_query_duration_seconds",
    "Duration of database queries",
    ["operation", "table"],
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0),
)

# External API metrics
EXTERNAL_API_REQUESTS_TOTAL = Counter(
    f"{METRIC_PREFIX}external_api_requests_total",
    "Total number of external API requests",
    ["service", "endpoint", "status_code"],
)

EXTERNAL_API_DURATION_SECONDS = Histogram(
    f"{METRIC_PREFIX}external_api_duration_seconds",
    "Duration of external API requests",
    ["service", "endpoint"],
    buckets=(0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0),
)


def set_service_info(version: str, environment: str) -> None:
    """Set service information.

    Args:
        version: Service version
        environment: Deployment environment
    """
    SERVICE_INFO.info({
        "app": "boilerplate",
        "version": version,
        "environment": environment,
    })


def resolve_route_pattern(
    path: str,
    path_params: Mapping[str, Any] | None,
    matched: bool = True,
) -> str:
    """Turn a concrete request path back into its parameterized pattern.

    Each path parameter value is replaced by ``:name`` wherever it forms a
    whole path segment, so ``/web/users/3f2c...`` becomes ``/web/users/:id``.

    Args:
        path: Concrete request path
        path_params: Parameters extracted by the router
        matched: Whether any route handled the request

    Returns:
        Low-cardinality route label
    """
    if not matched:
        return UNMATCHED_ROUTE

    pattern = path
    for name, value in (path_params or {}).items():
        segment = re.escape(str(value))
        pattern = re.sub(rf"/{segment}(?=/|$)", f"/:{name}", pattern)
    return pattern


def record_http_request(
    method: str,
    route: str,
    status_code: int,
    duration_seconds: float,
    request_size: int | None = None,
    response_size: int | None = None,
) -> None:
    """Record an HTTP request.

    Args:
        method: HTTP method
        route: Route pattern (see resolve_route_pattern)
        status_code: Response status code
        duration_seconds: Request duration in seconds
        request_size: Request body size, when the client declared it
        response_size: Response body size, when known
    """
    labels = {"method": method, "route": route, "status_code": str(status_code)}

    HTTP_REQUEST_DURATION_SECONDS.labels(**labels).observe(duration_seconds)
    HTTP_REQUESTS_TOTAL.labels(**labels).inc()

    if request_size is not None:
        HTTP_REQUEST_SIZE_BYTES.labels(**labels).observe(request_size)

    if response_size:
        HTTP_RESPONSE_SIZE_BYTES.labels(**labels).observe(response_size)


def record_user_operation(operation_type: str, status: str) -> None:
    """Count a user operation (create, list, sync_update, ...) by outcome."""
    USER_OPERATIONS_TOTAL.labels(operation_type=operation_type, status=status).inc()


@contextmanager
def track_database_query(operation: str, table: str) -> Generator[None, None, None]:
    """Time a database statement; only successful statements are counted.

    Args:
        operation: select, insert, update or delete
        table: Table name
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        DATABASE_QUERY_DURATION_SECONDS.labels(
            operation=operation,
            table=table,
        ).observe(time.perf_counter() - start)
    DATABASE_QUERIES_TOTAL.labels(operation=operation, table=table).inc()


@contextmanager
def track_external_api_call(service: str, endpoint: str) -> Generator[None, None, None]:
    """Time a call to a third-party API and count it by status code.

    Args:
        service: Remote service name (e.g. clerk)
        endpoint: Remote endpoint label
    """
    start = time.perf_counter()
    status_code = "200"
    try:
        yield
    except Exception as exc:
        status_code = str(getattr(exc, "status_code", None) or "500")
        raise
    finally:
        EXTERNAL_API_DURATION_SECONDS.labels(
            service=service,
            endpoint=endpoint,
        ).observe(time.perf_counter() - start)
        EXTERNAL_API_REQUESTS_TOTAL.labels(
            service=service,
            endpoint=endpoint,
            status_code=status_code,
        ).inc()

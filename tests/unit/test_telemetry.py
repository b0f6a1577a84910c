"""Tests for logging formatters and metric helpers."""

import json
import logging

import httpx
import pytest
from opentelemetry.sdk.trace import TracerProvider
from prometheus_client import REGISTRY

from boilerplate_api.infrastructure.telemetry.logging import (
    ContextLogger,
    LokiHandler,
    StructuredFormatter,
    TextFormatter,
    get_logger,
)
from boilerplate_api.infrastructure.telemetry.metrics import (
    UNMATCHED_ROUTE,
    resolve_route_pattern,
    track_database_query,
)


def _record(msg: str = "Test message", extra: dict | None = None) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    if extra is not None:
        record.extra = extra
    return record


class TestStructuredFormatter:
    def test_formats_as_json(self):
        parsed = json.loads(StructuredFormatter().format(_record()))

        assert parsed["level"] == "info"
        assert parsed["message"] == "Test message"
        assert parsed["logger"] == "test"
        assert "ts" in parsed

    def test_includes_extra_fields(self):
        record = _record(extra={"event": "user.created", "request_id": "req_1", "empty": None})

        parsed = json.loads(StructuredFormatter().format(record))

        assert parsed["event"] == "user.created"
        assert parsed["request_id"] == "req_1"
        assert "empty" not in parsed


class TestTextFormatter:
    def test_context_and_event(self):
        record = _record(extra={"request_id": "abcdef123456", "event": "http.request"})

        line = TextFormatter().format(record)

        assert "[request=abcdef12]" in line
        assert line.endswith("Test message (http.request)")


class TestContextLogger:
    def test_bind_merges_fields(self, caplog):
        caplog.set_level(logging.INFO, logger="bound")
        logger = get_logger("bound", service="api").bind(request_id="req_1", user_id=None)

        logger.info("hello", extra={"event": "greeting"})

        (record,) = caplog.records
        assert record.extra == {"service": "api", "request_id": "req_1", "event": "greeting"}

    def test_bind_returns_new_logger(self):
        base = get_logger("bound")
        bound = base.bind(request_id="req_1")

        assert isinstance(bound, ContextLogger)
        assert base.extra == {}

    def test_records_inside_a_span_carry_trace_ids(self, caplog):
        caplog.set_level(logging.INFO, logger="traced")
        tracer = TracerProvider().get_tracer("test")

        with tracer.start_as_current_span("operation") as span:
            get_logger("traced").info("inside")

        (record,) = caplog.records
        assert record.extra["trace_id"] == format(span.get_span_context().trace_id, "032x")
        assert len(record.extra["span_id"]) == 16


class TestLokiHandler:
    def test_entry_uses_record_time(self):
        pushed: list[dict] = []

        def capture(request: httpx.Request) -> httpx.Response:
            pushed.append(json.loads(request.content))
            return httpx.Response(204)

        handler = LokiHandler("http://loki:3100/", {"service": "api"})
        handler._client.close()
        handler._client = httpx.Client(transport=httpx.MockTransport(capture))
        record = _record()
        record.created = 1700000000.5

        handler.emit(record)
        handler.close()

        (stream,) = pushed[0]["streams"]
        assert stream["stream"] == {"service": "api", "level": "info"}
        assert stream["values"] == [["1700000000500000000", "Test message"]]


class TestResolveRoutePattern:
    def test_replaces_parameter_segments(self):
        uid = "3f2c8a4e-0000-4000-8000-000000000000"

        assert resolve_route_pattern(f"/web/users/{uid}", {"id": uid}) == "/web/users/:id"

    def test_only_whole_segments_are_replaced(self):
        assert resolve_route_pattern("/items/12/12a", {"id": "12"}) == "/items/:id/12a"

    def test_without_params(self):
        assert resolve_route_pattern("/web/users", {}) == "/web/users"
        assert resolve_route_pattern("/health", None) == "/health"

    def test_unmatched(self):
        assert resolve_route_pattern("/nope/123", {}, matched=False) == UNMATCHED_ROUTE


class TestTrackDatabaseQuery:
    def _count(self) -> float:
        return REGISTRY.get_sample_value(
            "boilerplate_database_queries_total", {"operation": "select", "table": "unit"}
        ) or 0.0

    def test_counts_successful_queries(self):
        before = self._count()

        with track_database_query("select", "unit"):
            pass

        assert self._count() == before + 1

    def test_failed_queries_are_not_counted(self):
        before = self._count()

        with pytest.raises(RuntimeError):
            with track_database_query("select", "unit"):
                raise RuntimeError("boom")

        assert self._count() == before

"""Structured logging with bound context fields.

Loggers carry their context explicitly: request handlers obtain a logger
bound to the request (see ``RequestContext.logger``) and pass it down to the
services they call.
"""

import json
import logging
import logging.handlers
import queue
import sys
from datetime import UTC, datetime
from typing import Any

import httpx
from opentelemetry import trace

# Fields rendered in the text format's bracketed context, in order
_TEXT_CONTEXT_FIELDS = ("request_id", "user_id", "session_id")

_loki_listener: logging.handlers.QueueListener | None = None


def _record_fields(record: logging.LogRecord) -> dict[str, Any]:
    fields = getattr(record, "extra", None)
    return fields if isinstance(fields, dict) else {}


class StructuredFormatter(logging.Formatter):
    """JSON formatter emitting bound and per-call fields as top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }

        log_data.update(_record_fields(record))

        if record.exc_info:
            log_data["exc_info"] = self.formatException(record.exc_info)

        # Filter out None values
        log_data = {k: v for k, v in log_data.items() if v is not None}

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter for development."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, UTC).strftime("%Y-%m-%d %H:%M:%S")
        fields = _record_fields(record)

        context_parts = [
            f"{key.split('_')[0]}={str(fields[key])[:8]}"
            for key in _TEXT_CONTEXT_FIELDS
            if fields.get(key)
        ]
        context_str = f" [{', '.join(context_parts)}]" if context_parts else ""

        base = f"{timestamp} | {record.levelname:8} | {record.name}{context_str} | {record.getMessage()}"

        if event := fields.get("event"):
            base += f" ({event})"

        if record.exc_info:
            base += "\n" + self.formatException(record.exc_info)

        return base


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter that merges bound fields with per-call ``extra``."""

    def process(
        self, msg: str, kwargs: dict[str, Any]
    ) -> tuple[str, dict[str, Any]]:
        fields = dict(self.extra) if self.extra else {}
        fields.update(kwargs.get("extra") or {})

        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            fields.setdefault("trace_id", format(span_context.trace_id, "032x"))
            fields.setdefault("span_id", format(span_context.span_id, "016x"))

        # Nested under one attribute so fields cannot clash with LogRecord's own
        kwargs["extra"] = {"extra": fields}
        return msg, kwargs

    def bind(self, **fields: Any) -> "ContextLogger":
        """Return a logger carrying these fields in addition to the current ones."""
        merged = dict(self.extra) if self.extra else {}
        merged.update({k: v for k, v in fields.items() if v is not None})
        return ContextLogger(self.logger, merged)


class LokiHandler(logging.Handler):
    """Push each record to a Grafana Loki instance."""

    def __init__(self, url: str, labels: dict[str, str], timeout: float = 5.0):
        super().__init__()
        self.push_url = f"{url.rstrip('/')}/loki/api/v1/push"
        self.labels = labels
        self._client = httpx.Client(timeout=timeout)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
            payload = {
                "streams": [
                    {
                        "stream": {**self.labels, "level": record.levelname.lower()},
                        "values": [[str(int(record.created * 1e9)), line]],
                    }
                ]
            }
            self._client.post(self.push_url, json=payload).raise_for_status()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        self._client.close()
        super().close()


def configure_logging(
    level: str = "INFO",
    format_type: str = "json",
    service_name: str = "boilerplate-api",
    loki_host: str | None = None,
    environment: str = "development",
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        format_type: Output format ('json' or 'text')
        service_name: Service name used as a Loki label
        loki_host: Base URL of a Loki instance; records are shipped there too
        environment: Deployment environment used as a Loki label
    """
    global _loki_listener

    shutdown_logging()

    handler = logging.StreamHandler(sys.stdout)
    if format_type == "json":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(TextFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper()))

    if loki_host:
        loki_handler = LokiHandler(
            loki_host,
            labels={"job": "python", "service": service_name, "environment": environment},
        )
        loki_handler.setFormatter(StructuredFormatter())
        log_queue: queue.Queue[logging.LogRecord] = queue.Queue(-1)
        root_logger.addHandler(logging.handlers.QueueHandler(log_queue))
        _loki_listener = logging.handlers.QueueListener(log_queue, loki_handler)
        _loki_listener.start()

    # Reduce noise from external libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if level == "DEBUG" else logging.WARNING
    )


def shutdown_logging() -> None:
    """Flush and stop the Loki shipping thread, if running."""
    global _loki_listener
    if _loki_listener is not None:
        _loki_listener.stop()
        for handler in _loki_listener.handlers:
            handler.close()
        _loki_listener = None


def get_logger(name: str, **extra: Any) -> ContextLogger:
    """Get a context-aware logger.

    Args:
        name: Logger name (usually __name__)
        **extra: Additional fields to include in every log message

    Returns:
        ContextLogger instance
    """
    logger = logging.getLogger(name)
    return ContextLogger(logger, extra)

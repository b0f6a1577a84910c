"""OpenTelemetry tracing, switched on by ``OTEL_ENABLED``."""

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from sqlalchemy.ext.asyncio import AsyncEngine

from boilerplate_api.config import Settings
from boilerplate_api.infrastructure.telemetry.logging import get_logger

logger = get_logger(__name__)

# Probe and scrape endpoints would drown the useful spans
EXCLUDED_URLS = "/health,/ready,/metrics"

_tracer_provider: TracerProvider | None = None


def configure_tracing(settings: Settings) -> TracerProvider:
    """Install the process-wide tracer provider (once).

    Spans are exported over OTLP/gRPC when ``OTLP_ENDPOINT`` is set and
    otherwise only propagated.
    """
    global _tracer_provider

    if _tracer_provider is not None:
        return _tracer_provider

    provider = TracerProvider(
        resource=Resource.create({
            "service.name": settings.otel_service_name,
            "service.version": settings.version,
            "deployment.environment": settings.environment,
        })
    )

    if settings.otlp_endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.otlp_endpoint, insecure=True))
        )

    trace.set_tracer_provider(provider)
    _tracer_provider = provider

    logger.info(
        "OpenTelemetry tracing configured",
        extra={
            "event": "tracing.configured",
            "service": settings.otel_service_name,
            "otlp_endpoint": settings.otlp_endpoint or None,
        },
    )

    return provider


def instrument_app(app: FastAPI, engine: AsyncEngine) -> None:
    """Trace incoming requests and the SQL they issue."""
    FastAPIInstrumentor.instrument_app(app, excluded_urls=EXCLUDED_URLS)
    # The instrumentor hooks engine events, which live on the sync engine
    SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine)
    logger.debug("FastAPI and SQLAlchemy instrumented for tracing")


def shutdown_tracing() -> None:
    """Flush pending spans and shut the provider down."""
    global _tracer_provider
    if _tracer_provider:
        _tracer_provider.shutdown()
        _tracer_provider = None
        logger.info("OpenTelemetry tracing shutdown")

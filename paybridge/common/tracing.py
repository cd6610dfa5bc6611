"""OpenTelemetry setup helpers for the FastAPI gateway."""

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

from paybridge.common.config import settings
from paybridge.common.logging import logger


def setup_tracing(service_name: str) -> bool:
    """Register a tracer provider with OTLP HTTP exporter when configured.

    Returns False without touching the global provider when no collector
    endpoint is set.
    """

    if not settings.otel_exporter_otlp_endpoint:
        logger.info("tracing disabled, OTEL_EXPORTER_OTLP_ENDPOINT not set")
        return False
    resource = Resource.create(
        {"service.name": service_name, "deployment.environment": settings.environment}
    )
    provider = TracerProvider(resource=resource)
    exporter = OTLPSpanExporter(endpoint=settings.otel_exporter_otlp_endpoint)
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)
    return True


def instrument_app(app: FastAPI) -> None:
    """Attach FastAPI auto-instrumentation for request spans."""

    FastAPIInstrumentor.instrument_app(app)

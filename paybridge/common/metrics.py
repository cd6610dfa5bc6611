"""Prometheus metric definitions for the gateway."""

from prometheus_client import Counter, Histogram, generate_latest
from starlette.responses import Response


http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["service", "route", "method", "status_code"],
)
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration seconds",
    ["service", "route", "method"],
)
payment_intents_total = Counter(
    "payment_intents_total",
    "Payment intent creation attempts by outcome",
    ["service", "outcome"],
)
processor_latency_seconds = Histogram(
    "processor_latency_seconds",
    "Latency of calls to the payment processor",
    ["service", "operation"],
)
webhook_events_total = Counter(
    "webhook_events_total",
    "Webhook deliveries by event type and outcome",
    ["service", "event_type", "outcome"],
)


def metrics_response() -> Response:
    """Expose all registered Prometheus metrics in text format."""

    return Response(content=generate_latest(), media_type="text/plain")

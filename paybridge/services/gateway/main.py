"""Public entrypoint for payment intent creation and processor webhooks.

The gateway validates the amount, asks the payment processor for an intent
and hands its client secret back to the caller. Processor webhooks are
signature-checked and logged. The host's LAN address is resolved once when the
app is built and reported by `/` and `/health`.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from time import perf_counter
from uuid import uuid4

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse

from paybridge.common.config import GatewaySettings, settings as default_settings
from paybridge.common.logging import configure_logging, logger, request_id_ctx
from paybridge.common.metrics import (
    http_request_duration_seconds,
    http_requests_total,
    metrics_response,
)
from paybridge.common.network import NetworkRules, resolve_local_address
from paybridge.common.startup import log_startup_banner, log_startup_config
from paybridge.common.tracing import instrument_app, setup_tracing
from paybridge.services.gateway.errors import ErrorKind, GatewayError
from paybridge.services.gateway.processor import PaymentProcessor, StripeProcessor
from paybridge.services.gateway.schemas import (
    ErrorResponse,
    HealthResponse,
    PaymentIntentRequest,
    PaymentIntentResult,
    WebhookAck,
)
from paybridge.services.gateway.service import PaymentGatewayService

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "X-DNS-Prefetch-Control": "off",
    "Cross-Origin-Opener-Policy": "same-origin",
}

STATUS_PAGE = """<!doctype html>
<html>
  <head><title>{title}</title></head>
  <body>
    <h2>{title}</h2>
    <p>Status: Online</p>
    <p><strong>Detected IP:</strong> {ip}</p>
    <ul>
      <li><strong>POST</strong> /create-payment-intent</li>
      <li><strong>POST</strong> /webhook</li>
      <li><strong>GET</strong> /health</li>
    </ul>
  </body>
</html>
"""


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""

    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def render_error(exc: GatewayError):
    # Webhook failures are plain text.
    if exc.kind is ErrorKind.SIGNATURE_INVALID:
        return PlainTextResponse(f"Webhook Error: {exc.message}", status_code=exc.status_code)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.error, message=exc.message).model_dump(),
    )


def create_app(
    settings: GatewaySettings = default_settings,
    processor: PaymentProcessor | None = None,
    local_address: str | None = None,
) -> FastAPI:
    """Build the gateway app.

    `processor` defaults to Stripe with the configured secret key, and
    `local_address` to the address resolved from the live interface table.
    """

    if local_address is None:
        local_address = resolve_local_address(
            rules=NetworkRules(main_network_prefix=settings.main_network_prefix)
        )
    if processor is None:
        processor = StripeProcessor(settings.stripe_secret_key, settings.webhook_tolerance_seconds)
    service = PaymentGatewayService(
        processor,
        webhook_secret=settings.stripe_webhook_secret,
        default_currency=settings.default_currency,
        service_name=settings.service_name,
    )

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        """Log the reachable addresses once the server is up."""

        if not settings.stripe_webhook_secret:
            logger.warning("STRIPE_WEBHOOK_SECRET is not set, webhook signatures cannot be verified")
        log_startup_banner(settings.service_name, local_address, settings.port)
        yield

    app = FastAPI(title="Paybridge Gateway", lifespan=lifespan)
    app.state.settings = settings
    app.state.local_address = local_address
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins if settings.is_production else ["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "stripe-signature"],
    )

    @app.middleware("http")
    async def request_middleware(request: Request, call_next):
        """Log and time every request, and attach security headers."""

        start = perf_counter()
        route = request.url.path
        method = request.method
        status_code = 500
        request_id_ctx.set(request.headers.get("x-request-id") or str(uuid4()))
        logger.info("request %s %s at %s", method, request.url.path, utc_timestamp())
        try:
            response = await call_next(request)
            status_code = response.status_code
            route_obj = request.scope.get("route")
            if route_obj is not None and getattr(route_obj, "path", None):
                route = route_obj.path
            response.headers.update(SECURITY_HEADERS)
            return response
        finally:
            elapsed = max(0.0, perf_counter() - start)
            http_request_duration_seconds.labels(
                service=settings.service_name,
                route=route,
                method=method,
            ).observe(elapsed)
            http_requests_total.labels(
                service=settings.service_name,
                route=route,
                method=method,
                status_code=str(status_code),
            ).inc()

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(_: Request, exc: GatewayError):
        return render_error(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(_: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = "Malformed request body"
        if errors:
            field = ".".join(part for part in errors[0]["loc"] if isinstance(part, str) and part != "body")
            message = f"{field}: {errors[0]['msg']}" if field else errors[0]["msg"]
        logger.warning("request validation failed: %s", message)
        return render_error(GatewayError(ErrorKind.INVALID_INPUT, message))

    @app.get("/", response_class=HTMLResponse)
    def index():
        """Human-readable status page."""

        return STATUS_PAGE.format(title="Paybridge Stripe Gateway", ip=local_address)

    @app.get("/health", response_model=HealthResponse)
    def health():
        """Container health probe endpoint."""

        return HealthResponse(
            status="OK",
            timestamp=utc_timestamp(),
            ip=local_address,
            environment=settings.environment,
        )

    @app.post("/create-payment-intent", response_model=PaymentIntentResult)
    async def create_payment_intent(req: PaymentIntentRequest):
        """Create a payment intent and return its client secret."""

        return await service.create_payment_intent(req)

    @app.post("/webhook", response_model=WebhookAck)
    async def webhook(request: Request):
        """Receive a signed processor event.

        The raw body is read unparsed because the signature covers its exact
        bytes.
        """

        payload = await request.body()
        service.receive_webhook(payload, request.headers.get("stripe-signature"))
        return WebhookAck()

    @app.get("/metrics")
    def metrics():
        """Prometheus scrape endpoint."""

        return metrics_response()

    return app


configure_logging()
tracing_enabled = setup_tracing(default_settings.service_name)
log_startup_config(
    default_settings.service_name,
    [
        "SERVICE_NAME",
        "ENVIRONMENT",
        "PORT",
        "DEFAULT_CURRENCY",
        "STRIPE_SECRET_KEY",
        "STRIPE_WEBHOOK_SECRET",
    ],
)
app = create_app()
if tracing_enabled:
    instrument_app(app)


if __name__ == "__main__":
    uvicorn.run(app, host=default_settings.host, port=default_settings.port)

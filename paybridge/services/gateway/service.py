"""Payment intent creation and webhook handling.

The service validates input, delegates to the payment processor and maps
every failure to a `GatewayError`. Webhooks are verified and then only
logged; nothing is persisted and no downstream call is made.
"""

from starlette.concurrency import run_in_threadpool

from paybridge.common.logging import logger, payment_intent_id_ctx
from paybridge.common.metrics import (
    payment_intents_total,
    processor_latency_seconds,
    webhook_events_total,
)
from paybridge.services.gateway.errors import ErrorKind, GatewayError, WebhookVerificationError
from paybridge.services.gateway.processor import PaymentProcessor
from paybridge.services.gateway.schemas import (
    PaymentIntentRequest,
    PaymentIntentResult,
    WebhookEvent,
)

PAYMENT_SUCCEEDED = "payment_intent.succeeded"
PAYMENT_FAILED = "payment_intent.payment_failed"


class PaymentGatewayService:
    """Thin adapter between the HTTP surface and the payment processor."""

    def __init__(
        self,
        processor: PaymentProcessor,
        webhook_secret: str,
        default_currency: str = "brl",
        service_name: str = "paybridge-gateway",
    ) -> None:
        self.processor = processor
        self.webhook_secret = webhook_secret
        self.default_currency = default_currency
        self.service_name = service_name
        self._event_handlers = {
            PAYMENT_SUCCEEDED: self._on_payment_succeeded,
            PAYMENT_FAILED: self._on_payment_failed,
        }

    def _validate_amount(self, req: PaymentIntentRequest) -> int:
        if req.amount is None or req.amount <= 0:
            raise GatewayError(
                ErrorKind.INVALID_INPUT,
                "Amount must be greater than zero",
                error="Invalid amount",
            )
        return req.amount

    async def create_payment_intent(self, req: PaymentIntentRequest) -> PaymentIntentResult:
        """Create an intent with the processor and return its client secret.

        Any processor failure surfaces as an upstream failure carrying the
        processor's message.
        """

        try:
            amount = self._validate_amount(req)
        except GatewayError as exc:
            payment_intents_total.labels(service=self.service_name, outcome="rejected").inc()
            logger.warning("payment intent rejected amount=%s reason=%s", req.amount, exc.message)
            raise

        currency = req.currency or self.default_currency
        try:
            with processor_latency_seconds.labels(
                service=self.service_name, operation="create_payment_intent"
            ).time():
                result = await run_in_threadpool(
                    self.processor.create_payment_intent, amount, currency, req.metadata
                )
        except Exception as exc:
            payment_intents_total.labels(service=self.service_name, outcome="failed").inc()
            logger.exception("payment intent creation failed amount=%s currency=%s", amount, currency)
            raise GatewayError(ErrorKind.UPSTREAM_FAILURE, str(exc)) from exc

        payment_intents_total.labels(service=self.service_name, outcome="created").inc()
        logger.info(
            "payment intent created payment_intent_id=%s amount=%s currency=%s",
            result.payment_intent_id,
            amount,
            currency,
        )
        return result

    def verify_webhook(self, payload: bytes, sig_header: str | None) -> WebhookEvent:
        try:
            return self.processor.verify_webhook(payload, sig_header, self.webhook_secret)
        except WebhookVerificationError as exc:
            webhook_events_total.labels(
                service=self.service_name, event_type="unknown", outcome="rejected"
            ).inc()
            logger.error("webhook verification failed: %s", exc)
            raise GatewayError(ErrorKind.SIGNATURE_INVALID, str(exc)) from exc

    def receive_webhook(self, payload: bytes, sig_header: str | None) -> WebhookEvent:
        """Verify a delivery and log its outcome. Raises only on bad signatures."""

        event = self.verify_webhook(payload, sig_header)
        self.dispatch_event(event)
        return event

    def dispatch_event(self, event: WebhookEvent) -> None:
        handler = self._event_handlers.get(event.type)
        token = payment_intent_id_ctx.set(event.object_id or "")
        try:
            if handler is None:
                webhook_events_total.labels(
                    service=self.service_name, event_type=event.type, outcome="ignored"
                ).inc()
                logger.info("webhook event ignored type=%s", event.type)
                return
            handler(event)
            webhook_events_total.labels(
                service=self.service_name, event_type=event.type, outcome="handled"
            ).inc()
        finally:
            payment_intent_id_ctx.reset(token)

    def _on_payment_succeeded(self, event: WebhookEvent) -> None:
        logger.info("payment succeeded payment_intent_id=%s", event.object_id)

    def _on_payment_failed(self, event: WebhookEvent) -> None:
        logger.warning("payment failed payment_intent_id=%s", event.object_id)

"""Payment processor client used by the gateway.

`PaymentProcessor` is the contract the gateway depends on; `StripeProcessor`
implements it with the Stripe SDK. Tests substitute a stub with the same
shape.
"""

from typing import Any, Protocol

import stripe

from paybridge.services.gateway.errors import ProcessorError, WebhookVerificationError
from paybridge.services.gateway.schemas import PaymentIntentResult, WebhookEvent


class PaymentProcessor(Protocol):
    def create_payment_intent(
        self, amount: int, currency: Any, metadata: Any
    ) -> PaymentIntentResult: ...

    def verify_webhook(self, payload: bytes, sig_header: str | None, secret: str) -> WebhookEvent: ...


class StripeProcessor:
    """Stripe-backed processor. Calls are blocking; run them off the event loop."""

    def __init__(self, api_key: str, tolerance_seconds: int = 300) -> None:
        self.api_key = api_key
        self.tolerance_seconds = tolerance_seconds

    def create_payment_intent(
        self, amount: int, currency: Any, metadata: Any
    ) -> PaymentIntentResult:
        try:
            intent = stripe.PaymentIntent.create(
                api_key=self.api_key,
                amount=amount,
                currency=currency,
                automatic_payment_methods={"enabled": True},
                metadata=metadata,
            )
        except stripe.StripeError as exc:
            raise ProcessorError(exc.user_message or str(exc)) from exc
        return PaymentIntentResult(client_secret=intent.client_secret, payment_intent_id=intent.id)

    def verify_webhook(self, payload: bytes, sig_header: str | None, secret: str) -> WebhookEvent:
        """Check the signature over the raw body, then parse the event."""

        if not sig_header:
            raise WebhookVerificationError("No stripe-signature header value was provided.")
        try:
            text = payload.decode("utf-8")
            stripe.WebhookSignature.verify_header(text, sig_header, secret, self.tolerance_seconds)
            return WebhookEvent.model_validate_json(text)
        except stripe.SignatureVerificationError as exc:
            raise WebhookVerificationError(exc.user_message or str(exc)) from exc
        except ValueError as exc:
            # Undecodable body or invalid event JSON.
            raise WebhookVerificationError(str(exc)) from exc

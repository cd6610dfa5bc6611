"""Shared fixtures: a stub processor and a gateway test client."""

import pytest
from fastapi.testclient import TestClient

from paybridge.common.config import GatewaySettings
from paybridge.services.gateway.main import create_app
from paybridge.services.gateway.processor import StripeProcessor
from paybridge.services.gateway.schemas import PaymentIntentResult

WEBHOOK_SECRET = "whsec_test_secret"


class StubProcessor(StripeProcessor):
    """Records intent calls instead of reaching Stripe.

    Webhook verification is inherited unchanged, so signatures are checked
    exactly as in production.
    """

    def __init__(self, result=None, error=None) -> None:
        super().__init__(api_key="sk_test_stub")
        self.result = result or PaymentIntentResult(client_secret="secret_abc", payment_intent_id="pi_123")
        self.error = error
        self.calls = []

    def create_payment_intent(self, amount, currency, metadata):
        self.calls.append({"amount": amount, "currency": currency, "metadata": metadata})
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def settings():
    return GatewaySettings(
        _env_file=None,
        environment="test",
        stripe_secret_key="sk_test_stub",
        stripe_webhook_secret=WEBHOOK_SECRET,
        default_currency="brl",
    )


@pytest.fixture
def processor():
    return StubProcessor()


@pytest.fixture
def client(settings, processor):
    app = create_app(settings=settings, processor=processor, local_address="192.168.0.42")
    return TestClient(app)


@pytest.fixture
def make_client(settings):
    """Build a client around a custom processor, e.g. one that fails."""

    def _make(processor_kwargs=None, local_address="192.168.0.42"):
        processor = StubProcessor(**(processor_kwargs or {}))
        app = create_app(settings=settings, processor=processor, local_address=local_address)
        return TestClient(app), processor

    return _make

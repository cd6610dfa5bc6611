"""API request/response schemas for the gateway endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt


class PaymentIntentRequest(BaseModel):
    """Payload accepted by `POST /create-payment-intent`.

    `amount` is optional at the schema level so that a missing value gets the
    same error body as a non-positive one. It must be a JSON integer; booleans
    and numeric strings are rejected. `currency` and `metadata` are not
    checked here and reach the processor exactly as sent.
    """

    amount: StrictInt | None = None
    currency: Any = None
    metadata: Any = Field(default_factory=dict)


class PaymentIntentResult(BaseModel):
    """Processor-issued identifiers returned to the client unchanged."""

    client_secret: str
    payment_intent_id: str


class ErrorResponse(BaseModel):
    error: str
    message: str


class WebhookEventData(BaseModel):
    model_config = ConfigDict(extra="allow")

    object: dict[str, Any] = Field(default_factory=dict)


class WebhookEvent(BaseModel):
    """Verified processor event; only the fields the gateway reads are typed."""

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    type: str
    data: WebhookEventData = Field(default_factory=WebhookEventData)

    @property
    def object_id(self) -> str | None:
        return self.data.object.get("id")


class WebhookAck(BaseModel):
    received: bool = True


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    ip: str
    environment: str

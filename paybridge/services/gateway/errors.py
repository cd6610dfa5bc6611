"""Error kinds surfaced by the gateway and their HTTP mapping."""

from enum import Enum


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    UPSTREAM_FAILURE = "upstream_failure"
    SIGNATURE_INVALID = "signature_invalid"


STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.UPSTREAM_FAILURE: 500,
    ErrorKind.SIGNATURE_INVALID: 400,
}

DEFAULT_TITLES: dict[ErrorKind, str] = {
    ErrorKind.INVALID_INPUT: "Invalid request",
    ErrorKind.UPSTREAM_FAILURE: "Internal error",
    ErrorKind.SIGNATURE_INVALID: "Webhook Error",
}


class GatewayError(Exception):
    """Failure raised by the service layer and rendered by the app.

    `message` is returned to the caller as-is; for upstream failures it is the
    processor's own error text.
    """

    def __init__(self, kind: ErrorKind, message: str, error: str | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.error = error or DEFAULT_TITLES[kind]

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]


class ProcessorError(Exception):
    """Processor call failed; the message is the processor's error text."""


class WebhookVerificationError(Exception):
    """Webhook payload or signature could not be verified."""

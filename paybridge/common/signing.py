"""Build Stripe-compatible `stripe-signature` header values.

Stripe signs `"<timestamp>.<raw body>"` with HMAC-SHA256 keyed by the
endpoint's webhook secret and sends `t=<timestamp>,v1=<hex digest>`. This is
used to produce test deliveries locally; verification goes through the
Stripe SDK.
"""

import hashlib
import hmac
import time


def compute_signature(payload: str, secret: str, timestamp: int) -> str:
    signed = f"{timestamp}.{payload}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()


def sign_payload(payload: bytes | str, secret: str, timestamp: int | None = None) -> str:
    """Return a signature header for `payload` signed with `secret`."""

    if isinstance(payload, bytes):
        payload = payload.decode("utf-8")
    if timestamp is None:
        timestamp = int(time.time())
    return f"t={timestamp},v1={compute_signature(payload, secret, timestamp)}"

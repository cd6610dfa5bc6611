"""Sign a sample processor event and POST it to the gateway webhook.

Useful for checking signature handling locally without the Stripe CLI.
"""

import argparse
import json
import os
import time
from pathlib import Path
from uuid import uuid4

import httpx

from paybridge.common.signing import sign_payload


def build_event(event_type: str, payment_intent_id: str) -> dict:
    """Minimal event with the fields the gateway reads."""

    return {
        "id": f"evt_{uuid4().hex[:24]}",
        "object": "event",
        "type": event_type,
        "created": int(time.time()),
        "data": {"object": {"id": payment_intent_id, "object": "payment_intent"}},
    }


def main() -> None:
    """Parse CLI args, sign one event and print the gateway's answer."""

    parser = argparse.ArgumentParser(description="Send a signed webhook event to the gateway.")
    parser.add_argument("--url", default="http://localhost:3001/webhook")
    parser.add_argument("--secret", default=os.getenv("STRIPE_WEBHOOK_SECRET", ""))
    parser.add_argument("--type", dest="event_type", default="payment_intent.succeeded")
    parser.add_argument("--payment-intent-id", default="pi_test_local")
    parser.add_argument("--file", dest="json_file", default=None, help="Send this JSON file instead")
    parser.add_argument("--bad-signature", action="store_true", help="Sign with a wrong secret")
    args = parser.parse_args()

    if not args.secret:
        raise SystemExit("Provide --secret or set STRIPE_WEBHOOK_SECRET")

    if args.json_file:
        body = Path(args.json_file).read_text()
    else:
        body = json.dumps(build_event(args.event_type, args.payment_intent_id))

    secret = args.secret + "-wrong" if args.bad_signature else args.secret
    resp = httpx.post(
        args.url,
        content=body.encode("utf-8"),
        headers={"content-type": "application/json", "stripe-signature": sign_payload(body, secret)},
        timeout=10.0,
    )
    print(f"status={resp.status_code} body={resp.text}")


if __name__ == "__main__":
    main()

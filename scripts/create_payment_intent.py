"""Request a payment intent from a running gateway and print the result."""

import argparse
import json

import httpx


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a payment intent through the gateway.")
    parser.add_argument("--url", default="http://localhost:3001/create-payment-intent")
    parser.add_argument("--amount", type=int, required=True, help="Amount in the smallest currency unit")
    parser.add_argument("--currency", default=None)
    parser.add_argument("--metadata", default=None, help="Inline JSON object of string values")
    args = parser.parse_args()

    payload: dict = {"amount": args.amount}
    if args.currency:
        payload["currency"] = args.currency
    if args.metadata:
        payload["metadata"] = json.loads(args.metadata)

    resp = httpx.post(args.url, json=payload, timeout=30.0)
    print(f"status={resp.status_code}")
    print(json.dumps(resp.json(), indent=2))


if __name__ == "__main__":
    main()

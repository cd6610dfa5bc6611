"""API tests for `POST /create-payment-intent`."""

import pytest

from paybridge.services.gateway.errors import ProcessorError


@pytest.mark.parametrize("amount", [0, -5])
def test_non_positive_amount_rejected_without_processor_call(client, processor, amount):
    resp = client.post("/create-payment-intent", json={"amount": amount, "currency": "brl"})

    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "Invalid amount"
    assert body["message"] == "Amount must be greater than zero"
    assert processor.calls == []


def test_missing_amount_rejected(client, processor):
    resp = client.post("/create-payment-intent", json={"currency": "usd"})

    assert resp.status_code == 400
    assert "error" in resp.json()
    assert processor.calls == []


def test_malformed_body_is_a_client_error(client, processor):
    resp = client.post(
        "/create-payment-intent",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )

    assert resp.status_code == 400
    assert set(resp.json()) == {"error", "message"}
    assert processor.calls == []


def test_processor_result_returned_verbatim(client, processor):
    resp = client.post("/create-payment-intent", json={"amount": 1000, "currency": "brl"})

    assert resp.status_code == 200
    assert resp.json() == {"client_secret": "secret_abc", "payment_intent_id": "pi_123"}
    assert processor.calls == [{"amount": 1000, "currency": "brl", "metadata": {}}]


def test_currency_defaults_and_metadata_passes_through(client, processor):
    resp = client.post(
        "/create-payment-intent",
        json={"amount": 2500, "metadata": {"order_id": "A-17"}},
    )

    assert resp.status_code == 200
    assert processor.calls == [{"amount": 2500, "currency": "brl", "metadata": {"order_id": "A-17"}}]


def test_processor_failure_maps_to_server_error(make_client):
    client, _ = make_client({"error": ProcessorError("Your card was declined.")})

    resp = client.post("/create-payment-intent", json={"amount": 1000, "currency": "brl"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal error", "message": "Your card was declined."}


def test_any_processor_exception_surfaces_identically(make_client):
    client, processor = make_client({"error": ConnectionError("connection reset by peer")})

    resp = client.post("/create-payment-intent", json={"amount": 1000})

    assert resp.status_code == 500
    assert resp.json()["message"] == "connection reset by peer"
    assert len(processor.calls) == 1


def test_metadata_values_reach_processor_unchanged(client, processor):
    resp = client.post(
        "/create-payment-intent",
        json={"amount": 1000, "metadata": {"order_id": 42, "gift": True}},
    )

    assert resp.status_code == 200
    assert processor.calls == [
        {"amount": 1000, "currency": "brl", "metadata": {"order_id": 42, "gift": True}}
    ]


def test_currency_is_not_validated_locally(client, processor):
    resp = client.post("/create-payment-intent", json={"amount": 1000, "currency": 986})

    assert resp.status_code == 200
    assert processor.calls[0]["currency"] == 986


def test_processor_rejection_of_currency_is_a_server_error(make_client):
    client, processor = make_client({"error": ProcessorError("Invalid currency: xyz")})

    resp = client.post("/create-payment-intent", json={"amount": 1000, "currency": "xyz"})

    assert resp.status_code == 500
    assert resp.json()["message"] == "Invalid currency: xyz"
    assert processor.calls[0]["currency"] == "xyz"


@pytest.mark.parametrize("amount", [True, "1000", 10.5])
def test_amount_must_be_a_json_integer(client, processor, amount):
    resp = client.post("/create-payment-intent", json={"amount": amount})

    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "Invalid request"
    assert body["message"].startswith("amount: ")
    assert processor.calls == []

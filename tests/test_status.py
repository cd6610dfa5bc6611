"""Tests for the status page, health check, metrics and response headers."""

from datetime import datetime

from paybridge.common.signing import compute_signature, sign_payload


def test_health_reports_address_and_environment(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "OK"
    assert body["ip"] == "192.168.0.42"
    assert body["environment"] == "test"
    assert body["timestamp"].endswith("Z")
    datetime.fromisoformat(body["timestamp"].replace("Z", "+00:00"))


def test_status_page_lists_address_and_routes(client):
    resp = client.get("/")

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert "192.168.0.42" in resp.text
    assert "/create-payment-intent" in resp.text
    assert "/health" in resp.text


def test_security_headers_present(client):
    resp = client.get("/health")

    assert resp.headers["x-content-type-options"] == "nosniff"
    assert resp.headers["x-frame-options"] == "SAMEORIGIN"


def test_metrics_exposed(client):
    client.get("/health")

    resp = client.get("/metrics")

    assert resp.status_code == 200
    assert "http_requests_total" in resp.text


def test_signature_header_format():
    header = sign_payload(b'{"a":1}', "whsec_x", timestamp=1700000000)
    digest = compute_signature('{"a":1}', "whsec_x", 1700000000)

    assert header == "t=1700000000,v1=" + digest
    assert len(header.split("v1=")[1]) == 64

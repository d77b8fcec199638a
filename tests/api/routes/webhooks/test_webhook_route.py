"""Testes dos endpoints de webhook por tenant."""

from __future__ import annotations

import asyncio
import hashlib
import hmac
import json

import pytest
from fastapi.testclient import TestClient

from app.bootstrap import get_webhook_processor, get_webhook_verifier
from tests.fakes.fake_ports import whatsapp_setting

MESSAGE_PAYLOAD = {
    "entry": [
        {
            "changes": [
                {
                    "value": {
                        "messages": [
                            {"id": "wamid.1", "from": "5511", "type": "text", "text": {"body": "oi"}}
                        ]
                    }
                }
            ]
        }
    ]
}


@pytest.fixture
def configured(services) -> None:
    asyncio.run(services.store.put(whatsapp_setting("tenant-a", verify_token="abc")))


def test_verify_returns_challenge_as_plain_text(client: TestClient, configured) -> None:
    response = client.get(
        "/webhooks/tok-a",
        params={"hub.mode": "subscribe", "hub.verify_token": "abc", "hub.challenge": "12345"},
    )

    assert response.status_code == 200
    assert response.text == "12345"
    assert response.headers["content-type"].startswith("text/plain")


@pytest.mark.parametrize(
    ("token", "verify_token"), [("tok-a", "wrong"), ("tok-unknown", "abc")]
)
def test_verify_rejects(client: TestClient, configured, token: str, verify_token: str) -> None:
    response = client.get(
        f"/webhooks/{token}",
        params={"hub.mode": "subscribe", "hub.verify_token": verify_token, "hub.challenge": "1"},
    )

    assert response.status_code == 401


def test_receive_dispatches_message(client: TestClient, configured, services) -> None:
    response = client.post("/webhooks/tok-a", json=MESSAGE_PAYLOAD)

    assert response.status_code == 200
    assert response.json() == {"success": True, "detail": "message_dispatched"}
    assert services.engine.dispatched[0][0] == "tenant-a"


def test_receive_duplicate_is_success_without_new_dispatch(
    client: TestClient, configured, services
) -> None:
    client.post("/webhooks/tok-a", json=MESSAGE_PAYLOAD)
    response = client.post("/webhooks/tok-a", json=MESSAGE_PAYLOAD)

    assert response.json()["success"] is True
    assert len(services.engine.dispatched) == 1


def test_receive_invalid_json_is_200(client: TestClient, configured) -> None:
    response = client.post(
        "/webhooks/tok-a", content=b"{broken", headers={"content-type": "application/json"}
    )

    assert response.status_code == 200
    assert response.json() == {"success": False, "error": "invalid_json"}


def test_receive_unknown_tenant_is_200(client: TestClient, configured) -> None:
    response = client.post("/webhooks/tok-unknown", json=MESSAGE_PAYLOAD)

    assert response.status_code == 200
    assert response.json()["error"] == "tenant_not_found"


def test_receive_empty_payload_is_invalid_parameters(client: TestClient, configured) -> None:
    response = client.post("/webhooks/tok-a", json={})

    assert response.status_code == 200
    assert response.json()["error"] == "invalid_parameters"


def test_receive_checks_signature_when_app_secret_configured(client: TestClient, services) -> None:
    asyncio.run(services.store.put(whatsapp_setting("tenant-a", app_secret="app-secret")))
    body = json.dumps(MESSAGE_PAYLOAD).encode()
    signature = "sha256=" + hmac.new(b"app-secret", body, hashlib.sha256).hexdigest()

    unsigned = client.post("/webhooks/tok-a", content=body)
    signed = client.post(
        "/webhooks/tok-a", content=body, headers={"X-Hub-Signature-256": signature}
    )

    assert unsigned.status_code == 200
    assert unsigned.json() == {"success": False, "error": "invalid_signature"}
    assert signed.json()["success"] is True


def test_receive_deeply_nested_json_is_200(client: TestClient, configured) -> None:
    response = client.post("/webhooks/tok-a", content=b"[" * 200000 + b"]" * 200000)

    assert response.status_code == 200
    assert response.json() == {"success": False, "error": "invalid_json"}


def test_receive_unexpected_error_is_200(client: TestClient, configured) -> None:
    class _BrokenProcessor:
        async def process(self, tenant_token, payload):
            raise RuntimeError("boom")

    client.app.dependency_overrides[get_webhook_processor] = _BrokenProcessor

    response = client.post("/webhooks/tok-a", json=MESSAGE_PAYLOAD)

    assert response.status_code == 200
    assert response.json() == {"success": False, "error": "internal_error"}


def test_receive_dependency_failure_is_200(client: TestClient) -> None:
    def _unavailable():
        raise ConnectionError("redis down")

    client.app.dependency_overrides[get_webhook_verifier] = _unavailable

    response = client.post("/webhooks/tok-a", json=MESSAGE_PAYLOAD)

    assert response.status_code == 200
    assert response.json() == {"success": False, "error": "internal_error"}


def test_verify_failure_is_not_acknowledged_as_200(client: TestClient) -> None:
    def _unavailable():
        raise ConnectionError("redis down")

    client.app.dependency_overrides[get_webhook_verifier] = _unavailable

    response = client.get(
        "/webhooks/tok-a",
        params={"hub.mode": "subscribe", "hub.verify_token": "abc", "hub.challenge": "1"},
    )

    assert response.status_code == 500

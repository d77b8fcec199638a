"""Testes do WebhookProcessor."""

from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import AsyncMock

import pytest

from api.normalizers.whatsapp import WhatsAppWebhookParser
from app.domain.webhook_event import DedupOutcome, ProcessingState
from app.infra.stores import (
    MemoryDedupeStore,
    MemoryProviderSettingsStore,
    MemoryTenantDirectory,
)
from app.services.provider_registry import ProviderRegistry
from app.use_cases.webhooks import WebhookProcessor, WebhookProcessorConfig
from tests.fakes.fake_ports import CATALOG, ScriptedDispatcher, transient, whatsapp_setting

TOKEN = "tok-a"


def _message_payload(message_id: str = "wamid.1") -> dict[str, Any]:
    return {
        "object": "whatsapp_business_account",
        "entry": [
            {
                "id": "WABA",
                "changes": [
                    {
                        "field": "messages",
                        "value": {
                            "metadata": {"phone_number_id": "1234567890"},
                            "contacts": [{"wa_id": "5511999", "profile": {"name": "Ana"}}],
                            "messages": [
                                {
                                    "id": message_id,
                                    "from": "5511999",
                                    "timestamp": "1700000000",
                                    "type": "text",
                                    "text": {"body": "oi"},
                                }
                            ],
                        },
                    }
                ],
            }
        ],
    }


def _status_payload() -> dict[str, Any]:
    return {
        "entry": [
            {
                "changes": [
                    {
                        "value": {
                            "statuses": [
                                {"id": "wamid.9", "status": "delivered", "recipient_id": "5511"}
                            ]
                        }
                    }
                ]
            }
        ]
    }


class _Harness:
    def __init__(
        self,
        *,
        dispatcher: ScriptedDispatcher | None = None,
        enabled: bool | None = True,
        config: WebhookProcessorConfig | None = None,
    ) -> None:
        self.dedupe = MemoryDedupeStore()
        self.settings_store = MemoryProviderSettingsStore()
        self.dispatcher = dispatcher or ScriptedDispatcher()
        self.enabled = enabled
        self.processor = WebhookProcessor(
            parser=WhatsAppWebhookParser(),
            dedupe=self.dedupe,
            tenant_directory=MemoryTenantDirectory({TOKEN: "tenant-a", "tok-b": "tenant-a"}),
            registry=ProviderRegistry(CATALOG, self.settings_store),
            dispatcher=self.dispatcher,
            config=config
            or WebhookProcessorConfig(
                dispatch_timeout_seconds=0.05,
                pending_wait_seconds=0.2,
                pending_poll_interval_seconds=0.01,
            ),
        )

    async def setup(self) -> _Harness:
        if self.enabled is not None:
            await self.settings_store.put(whatsapp_setting("tenant-a", enabled=self.enabled))
        return self


@pytest.mark.asyncio
async def test_message_is_dispatched_and_recorded() -> None:
    harness = await _Harness().setup()

    result = await harness.processor.process(TOKEN, _message_payload())

    assert result.success is True
    assert result.state is ProcessingState.ACCEPTED
    assert result.detail == "message_dispatched"
    tenant_id, message = harness.dispatcher.messages[0]
    assert tenant_id == "tenant-a"
    assert message.text == "oi"
    assert message.contact_name == "Ana"
    record = await harness.dedupe.get(f"{TOKEN}:wamid.1")
    assert record is not None and record.outcome is DedupOutcome.SUCCESS


@pytest.mark.asyncio
async def test_redelivery_is_duplicate_without_dispatch() -> None:
    harness = await _Harness().setup()

    first = await harness.processor.process(TOKEN, _message_payload())
    second = await harness.processor.process(TOKEN, _message_payload())

    assert first.state is ProcessingState.ACCEPTED
    assert second.state is ProcessingState.DUPLICATE
    assert second.success is True
    assert second.detail == "message_dispatched"
    assert harness.dispatcher.calls == 1


@pytest.mark.asyncio
async def test_concurrent_deliveries_dispatch_once() -> None:
    harness = await _Harness().setup()

    results = await asyncio.gather(
        *(harness.processor.process(TOKEN, _message_payload()) for _ in range(5))
    )

    assert harness.dispatcher.calls == 1
    states = sorted(r.state.value for r in results)
    assert states.count("accepted") == 1
    assert states.count("duplicate") == 4
    assert all(r.success for r in results)


@pytest.mark.asyncio
async def test_pending_wait_expires_with_in_flight() -> None:
    harness = await _Harness().setup()
    await harness.dedupe.claim(f"{TOKEN}:wamid.1", ttl=60)

    result = await harness.processor.process(TOKEN, _message_payload())

    assert result.state is ProcessingState.DUPLICATE
    assert result.success is True
    assert result.detail == "in_flight"
    assert harness.dispatcher.calls == 0


@pytest.mark.asyncio
async def test_same_event_for_different_tenants_is_not_duplicate() -> None:
    harness = await _Harness().setup()

    first = await harness.processor.process(TOKEN, _message_payload())
    second = await harness.processor.process("tok-b", _message_payload())

    assert first.state is ProcessingState.ACCEPTED
    assert second.state is ProcessingState.ACCEPTED


@pytest.mark.asyncio
@pytest.mark.parametrize(("token", "payload"), [("", {"entry": []}), (TOKEN, {}), (TOKEN, None)])
async def test_invalid_parameters_do_not_touch_dedupe(token: str, payload: Any) -> None:
    harness = await _Harness().setup()

    result = await harness.processor.process(token, payload)

    assert result.state is ProcessingState.REJECTED
    assert result.error == "invalid_parameters"
    assert len(harness.dedupe) == 0


@pytest.mark.asyncio
async def test_unknown_tenant_is_rejected_and_recorded_as_failure() -> None:
    harness = await _Harness().setup()

    result = await harness.processor.process("tok-unknown", _message_payload())

    assert result.success is False
    assert result.error == "tenant_not_found"
    record = await harness.dedupe.get("tok-unknown:wamid.1")
    assert record is not None and record.outcome is DedupOutcome.FAILURE


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("enabled", "detail"), [(False, "provider_disabled"), (None, "provider_not_configured")]
)
async def test_provider_unavailable(enabled: bool | None, detail: str) -> None:
    harness = await _Harness(enabled=enabled).setup()

    result = await harness.processor.process(TOKEN, _message_payload())

    assert result.state is ProcessingState.REJECTED
    assert result.detail == detail
    assert harness.dispatcher.calls == 0


@pytest.mark.asyncio
async def test_status_goes_to_notification_path() -> None:
    harness = await _Harness().setup()

    result = await harness.processor.process(TOKEN, _status_payload())

    assert result.detail == "status_notified"
    assert harness.dispatcher.messages == []
    assert harness.dispatcher.statuses[0][1].status == "delivered"


@pytest.mark.asyncio
async def test_payload_without_content_is_accepted_without_dispatch() -> None:
    harness = await _Harness().setup()

    result = await harness.processor.process(TOKEN, {"object": "whatsapp_business_account"})

    assert result.success is True
    assert result.detail == "no_actionable_content"
    assert harness.dispatcher.calls == 0


@pytest.mark.asyncio
async def test_transient_failure_is_retried_once() -> None:
    harness = await _Harness(dispatcher=ScriptedDispatcher([transient()])).setup()

    result = await harness.processor.process(TOKEN, _message_payload())

    assert result.success is True
    assert harness.dispatcher.calls == 2


@pytest.mark.asyncio
async def test_timeout_then_transient_reports_failure_and_allows_redelivery() -> None:
    harness = await _Harness(dispatcher=ScriptedDispatcher(["hang", transient()])).setup()

    failed = await harness.processor.process(TOKEN, _message_payload())
    retried = await harness.processor.process(TOKEN, _message_payload())

    assert failed.success is False
    assert failed.error == "dispatch_failed"
    assert retried.state is ProcessingState.ACCEPTED
    assert harness.dispatcher.calls == 3


@pytest.mark.asyncio
async def test_unexpected_dispatch_error_is_internal_error() -> None:
    harness = await _Harness(dispatcher=ScriptedDispatcher([ValueError("boom")])).setup()

    result = await harness.processor.process(TOKEN, _message_payload())

    assert result.success is False
    assert result.error == "internal_error"
    assert harness.dispatcher.calls == 1


@pytest.mark.asyncio
async def test_dedupe_store_failure_never_raises() -> None:
    harness = await _Harness().setup()
    broken = AsyncMock()
    broken.claim.side_effect = ConnectionError("redis down")
    harness.processor._dedupe = broken  # type: ignore[attr-defined]

    result = await harness.processor.process(TOKEN, _message_payload())

    assert result.success is False
    assert result.error == "internal_error"


def _multi_message_payload(*message_ids: str) -> dict[str, Any]:
    payload = _message_payload(message_ids[0])
    value = payload["entry"][0]["changes"][0]["value"]
    value["messages"] = [
        {"id": mid, "from": "5511999", "timestamp": "1700000000", "type": "text", "text": {"body": mid}}
        for mid in message_ids
    ]
    return payload


@pytest.mark.asyncio
async def test_redelivery_after_partial_failure_skips_dispatched_messages() -> None:
    # m1 entregue; m2 falha nas duas tentativas
    dispatcher = ScriptedDispatcher([None, transient(), transient()])
    harness = await _Harness(dispatcher=dispatcher).setup()

    failed = await harness.processor.process(TOKEN, _multi_message_payload("m1", "m2"))
    retried = await harness.processor.process(TOKEN, _multi_message_payload("m1", "m2"))

    assert failed.success is False
    assert failed.error == "dispatch_failed"
    assert retried.state is ProcessingState.ACCEPTED
    assert [message.message_id for _, message in dispatcher.messages] == ["m1", "m2"]
    assert dispatcher.calls == 4
    item = await harness.dedupe.get(f"{TOKEN}:m1#msg:m1")
    assert item is not None and item.outcome is DedupOutcome.SUCCESS


@pytest.mark.asyncio
async def test_single_message_has_no_item_records() -> None:
    harness = await _Harness().setup()

    await harness.processor.process(TOKEN, _message_payload())

    assert len(harness.dedupe) == 1

"""Classificação de payloads de webhook WhatsApp em InboundWebhookEvent."""

from __future__ import annotations

from typing import Any

from api.connectors.whatsapp.event_id import compute_event_identity, compute_external_event_id
from app.domain.webhook_event import EventKind, InboundWebhookEvent

from .extractor import extract_messages, extract_statuses


class WhatsAppWebhookParser:
    """Implementa WebhookPayloadParserProtocol para a Cloud API.

    Payload com `messages` é MESSAGE (mesmo que traga statuses juntos);
    só `statuses` é STATUS; nenhum dos dois é UNKNOWN.
    """

    def parse(self, tenant_token: str, payload: dict[str, Any]) -> InboundWebhookEvent:
        messages = tuple(extract_messages(payload))
        statuses = tuple(extract_statuses(payload))
        if messages:
            kind = EventKind.MESSAGE
        elif statuses:
            kind = EventKind.STATUS
        else:
            kind = EventKind.UNKNOWN

        external_id = compute_external_event_id(payload)
        return InboundWebhookEvent(
            tenant_token=tenant_token,
            identity=compute_event_identity(tenant_token, external_id, payload),
            raw_payload=payload,
            kind=kind,
            external_event_id=external_id,
            messages=messages,
            statuses=statuses,
        )

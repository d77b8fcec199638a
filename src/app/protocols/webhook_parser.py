"""Protocolo de classificação de payloads de webhook."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.domain.webhook_event import InboundWebhookEvent


class WebhookPayloadParserProtocol(Protocol):
    """Converte o payload bruto em InboundWebhookEvent classificado com identidade."""

    def parse(self, tenant_token: str, payload: dict[str, Any]) -> InboundWebhookEvent: ...

"""Eventos de webhook inbound, registros de dedupe e resultado do processamento."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class EventKind(str, Enum):
    """Classificação do payload recebido."""

    MESSAGE = "message"
    STATUS = "status"
    UNKNOWN = "unknown"


class DedupOutcome(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"


class ProcessingState(str, Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    DUPLICATE = "duplicate"


@dataclass(frozen=True, slots=True)
class InboundMessage:
    """Mensagem extraída de `value.messages[]` (sem dados de mídia binária)."""

    message_id: str
    from_number: str
    message_type: str
    timestamp: str | None = None
    phone_number_id: str | None = None
    contact_name: str | None = None
    text: str | None = None
    interactive_type: str | None = None
    reply_id: str | None = None
    reply_title: str | None = None
    media_id: str | None = None
    media_mime_type: str | None = None
    media_filename: str | None = None
    media_caption: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass(frozen=True, slots=True)
class StatusUpdate:
    """Callback de status de mensagem enviada (sent, delivered, read, failed)."""

    message_id: str
    status: str
    recipient_id: str | None = None
    timestamp: str | None = None
    error_code: int | None = None
    error_title: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass(frozen=True, slots=True)
class InboundWebhookEvent:
    """Evento recebido em `POST /webhooks/{tenant_token}`, já classificado.

    `identity` é `{tenant_token}:{external_event_id}` quando o payload traz um
    id externo, senão `{tenant_token}:payload:{sha256}` do JSON canônico.
    """

    tenant_token: str
    identity: str
    raw_payload: dict[str, Any]
    kind: EventKind = EventKind.UNKNOWN
    external_event_id: str | None = None
    messages: tuple[InboundMessage, ...] = ()
    statuses: tuple[StatusUpdate, ...] = ()
    received_at: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True, slots=True)
class DedupRecord:
    """Registro de dedupe de uma identidade de evento."""

    identity: str
    outcome: DedupOutcome
    first_seen_at: datetime
    expires_at: datetime
    success: bool = False
    detail: str = ""

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or datetime.now(UTC)) >= self.expires_at

    def to_json(self) -> str:
        return json.dumps(
            {
                "identity": self.identity,
                "outcome": self.outcome.value,
                "first_seen_at": self.first_seen_at.isoformat(),
                "expires_at": self.expires_at.isoformat(),
                "success": self.success,
                "detail": self.detail,
            },
            separators=(",", ":"),
        )

    @classmethod
    def from_json(cls, raw: str | bytes) -> DedupRecord:
        data = json.loads(raw)
        return cls(
            identity=data["identity"],
            outcome=DedupOutcome(data["outcome"]),
            first_seen_at=datetime.fromisoformat(data["first_seen_at"]),
            expires_at=datetime.fromisoformat(data["expires_at"]),
            success=bool(data.get("success", False)),
            detail=data.get("detail", ""),
        )


@dataclass(frozen=True, slots=True)
class ProcessingResult:
    """Resultado devolvido ao chamador do webhook (sempre HTTP 200)."""

    success: bool
    state: ProcessingState
    detail: str = ""
    identity: str = ""
    error: str | None = None

    def as_response(self) -> dict[str, Any]:
        body: dict[str, Any] = {"success": self.success}
        if self.detail:
            body["detail"] = self.detail
        if self.error:
            body["error"] = self.error
        return body

"""Identidade idempotente de eventos de webhook inbound.

Regras:
- mensagem: id da primeira mensagem (`messages[].id`)
- status: `status:{id}:{status}`; cada transição (sent, delivered, read,
  failed) do mesmo wamid é um evento distinto
- sem id externo: hash SHA-256 do JSON canônico do payload
"""

from __future__ import annotations

import hashlib
import json
from typing import Any


def canonical_payload_hash(payload: dict[str, Any]) -> str:
    """SHA-256 do JSON com chaves ordenadas e sem espaços."""
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def compute_external_event_id(payload: dict[str, Any]) -> str | None:
    """Extrai o id externo do evento, se o payload tiver um."""
    for entry in payload.get("entry") or []:
        if not isinstance(entry, dict):
            continue
        for change in entry.get("changes") or []:
            value = change.get("value") if isinstance(change, dict) else None
            if not isinstance(value, dict):
                continue
            messages = value.get("messages") or []
            if messages and isinstance(messages[0], dict) and messages[0].get("id"):
                return str(messages[0]["id"])
            statuses = value.get("statuses") or []
            if statuses and isinstance(statuses[0], dict):
                status_id = statuses[0].get("id")
                status_name = statuses[0].get("status")
                if status_id and status_name:
                    return f"status:{status_id}:{status_name}"
    return None


def compute_event_identity(
    tenant_token: str,
    external_event_id: str | None,
    payload: dict[str, Any],
) -> str:
    """Gera a chave de dedupe `{tenant_token}:{id}` ou `{tenant_token}:payload:{hash}`."""
    if external_event_id:
        return f"{tenant_token}:{external_event_id}"
    return f"{tenant_token}:payload:{canonical_payload_hash(payload)}"

"""Extrator de payloads de webhook da WhatsApp Cloud API.

Percorre `entry[].changes[].value` e produz:
- InboundMessage para cada item de `value.messages`
- StatusUpdate para cada item de `value.statuses`

Não faz validação de negócio: apenas extração estrutural.
"""

from __future__ import annotations

import logging
from typing import Any

from app.domain.webhook_event import InboundMessage, StatusUpdate

from ._extraction_helpers import (
    MEDIA_MESSAGE_TYPES,
    extract_button_message,
    extract_contact_names,
    extract_interactive_message,
    extract_media_message,
    extract_status_error,
    extract_text_message,
)

logger = logging.getLogger(__name__)

SUPPORTED_MESSAGE_TYPES = MEDIA_MESSAGE_TYPES | {
    "text",
    "interactive",
    "button",
    "location",
    "contacts",
    "reaction",
}


def iter_change_values(payload: dict[str, Any]) -> list[dict[str, Any]]:
    """Retorna os blocos `value` de todas as changes do payload."""
    values: list[dict[str, Any]] = []
    for entry in payload.get("entry") or []:
        if not isinstance(entry, dict):
            continue
        for change in entry.get("changes") or []:
            value = change.get("value") if isinstance(change, dict) else None
            if isinstance(value, dict):
                values.append(value)
    return values


def _build_message(
    msg: dict[str, Any], value: dict[str, Any], contact_names: dict[str, str]
) -> InboundMessage | None:
    message_id = msg.get("id")
    if not message_id:
        return None
    message_type = str(msg.get("type") or "unknown")
    from_number = str(msg.get("from") or "")
    metadata = value.get("metadata") if isinstance(value.get("metadata"), dict) else {}
    fields: dict[str, Any] = {}

    if message_type == "text":
        fields["text"] = extract_text_message(msg)
    elif message_type in MEDIA_MESSAGE_TYPES:
        (
            fields["media_id"],
            fields["media_mime_type"],
            fields["media_filename"],
            fields["media_caption"],
        ) = extract_media_message(msg, message_type)
    elif message_type == "interactive":
        (
            fields["interactive_type"],
            fields["reply_id"],
            fields["reply_title"],
        ) = extract_interactive_message(msg)
    elif message_type == "button":
        fields["reply_id"], fields["text"] = extract_button_message(msg)
    elif message_type not in SUPPORTED_MESSAGE_TYPES:
        logger.info("unsupported_message_type_received", extra={"message_type": message_type})

    return InboundMessage(
        message_id=str(message_id),
        from_number=from_number,
        message_type=message_type,
        timestamp=msg.get("timestamp"),
        phone_number_id=metadata.get("phone_number_id"),
        contact_name=contact_names.get(from_number),
        **fields,
    )


def extract_messages(payload: dict[str, Any]) -> list[InboundMessage]:
    """Extrai todas as mensagens do payload (na ordem em que aparecem)."""
    messages: list[InboundMessage] = []
    for value in iter_change_values(payload):
        contact_names = extract_contact_names(value)
        for msg in value.get("messages") or []:
            if not isinstance(msg, dict):
                continue
            message = _build_message(msg, value, contact_names)
            if message is not None:
                messages.append(message)
    return messages


def extract_statuses(payload: dict[str, Any]) -> list[StatusUpdate]:
    """Extrai callbacks de status (sent, delivered, read, failed)."""
    statuses: list[StatusUpdate] = []
    for value in iter_change_values(payload):
        for status in value.get("statuses") or []:
            if not isinstance(status, dict):
                continue
            message_id = status.get("id")
            status_name = status.get("status")
            if not message_id or not status_name:
                continue
            error_code, error_title = extract_status_error(status)
            statuses.append(
                StatusUpdate(
                    message_id=str(message_id),
                    status=str(status_name),
                    recipient_id=status.get("recipient_id"),
                    timestamp=status.get("timestamp"),
                    error_code=error_code,
                    error_title=error_title,
                )
            )
    return statuses

"""Helpers de extração de campos por tipo de mensagem WhatsApp.

Cada função lê um bloco do payload da Cloud API e devolve apenas os
campos que o workflow engine consome. Blocos malformados viram None.
"""

from __future__ import annotations

from typing import Any

MEDIA_MESSAGE_TYPES = frozenset({"image", "video", "audio", "document", "sticker"})


def extract_text_message(msg: dict[str, Any]) -> str | None:
    """Extrai corpo de mensagem de texto."""
    text_block = msg.get("text")
    if isinstance(text_block, dict):
        return text_block.get("body")
    return None


def extract_media_message(
    msg: dict[str, Any], media_type: str
) -> tuple[str | None, str | None, str | None, str | None]:
    """Extrai (id, mime_type, filename, caption) de image/video/audio/document/sticker."""
    media_block = msg.get(media_type)
    if not isinstance(media_block, dict):
        return None, None, None, None
    return (
        media_block.get("id"),
        media_block.get("mime_type"),
        media_block.get("filename"),
        media_block.get("caption"),
    )


def extract_interactive_message(
    msg: dict[str, Any],
) -> tuple[str | None, str | None, str | None]:
    """Extrai (tipo, id, título) da resposta de botão ou lista."""
    interactive_block = msg.get("interactive")
    if not isinstance(interactive_block, dict):
        return None, None, None
    interactive_type = interactive_block.get("type")
    for reply_key in ("button_reply", "list_reply"):
        reply = interactive_block.get(reply_key)
        if isinstance(reply, dict) and reply.get("id"):
            return interactive_type, reply.get("id"), reply.get("title")
    return interactive_type, None, None


def extract_button_message(msg: dict[str, Any]) -> tuple[str | None, str | None]:
    """Extrai (payload, texto) de quick reply de template (`type: button`)."""
    button_block = msg.get("button")
    if not isinstance(button_block, dict):
        return None, None
    return button_block.get("payload"), button_block.get("text")


def extract_contact_names(value: dict[str, Any]) -> dict[str, str]:
    """Mapeia wa_id -> nome do perfil a partir de `value.contacts`."""
    names: dict[str, str] = {}
    for contact in value.get("contacts") or []:
        if not isinstance(contact, dict):
            continue
        profile = contact.get("profile")
        wa_id = contact.get("wa_id")
        if wa_id and isinstance(profile, dict) and profile.get("name"):
            names[str(wa_id)] = str(profile["name"])
    return names


def extract_status_error(status: dict[str, Any]) -> tuple[int | None, str | None]:
    """Extrai (code, title) do primeiro erro de um status `failed`."""
    errors = status.get("errors") or []
    if not errors or not isinstance(errors[0], dict):
        return None, None
    code = errors[0].get("code")
    try:
        parsed_code = int(code) if code is not None else None
    except (TypeError, ValueError):
        parsed_code = None
    return parsed_code, errors[0].get("title")

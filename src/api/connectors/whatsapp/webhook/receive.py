"""Parse inicial do corpo do webhook (sem PII)."""

from __future__ import annotations

import json


class WebhookRequestError(ValueError):
    """Erro base para falhas de webhook."""


class InvalidJsonError(WebhookRequestError):
    """JSON inválido no payload do webhook."""


def parse_webhook_body(raw_body: bytes) -> dict[str, object]:
    """Parseia o corpo JSON do webhook.

    Corpo vazio vira `{}` (o processador rejeita payload vazio).

    Raises:
        InvalidJsonError: JSON inválido, aninhado demais ou raiz que não é objeto
    """
    try:
        payload = json.loads(raw_body or b"{}")
    except (ValueError, RecursionError) as exc:
        # Aninhamento excessivo levanta RecursionError no decoder
        raise InvalidJsonError("invalid_json") from exc

    if not isinstance(payload, dict):
        raise InvalidJsonError("payload_not_object")

    return payload

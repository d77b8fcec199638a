"""Handshake de verificação de webhook exigido pela Meta."""

from __future__ import annotations

import hmac

SUBSCRIBE_MODE = "subscribe"


class WebhookChallengeError(ValueError):
    """Erro de verificação do desafio do webhook."""


def verify_webhook_challenge(
    hub_mode: str | None,
    hub_verify_token: str | None,
    hub_challenge: str | None,
    expected_token: str | None,
) -> str:
    """Valida o challenge e retorna o conteúdo a responder.

    Comparação exata (case-sensitive) e em tempo constante.

    Raises:
        WebhookChallengeError: token esperado ausente, modo inválido ou token divergente
    """
    if not expected_token:
        raise WebhookChallengeError("missing_verify_token")

    if hub_mode != SUBSCRIBE_MODE:
        raise WebhookChallengeError("invalid_mode")

    if not hmac.compare_digest(
        (hub_verify_token or "").encode("utf-8"), expected_token.encode("utf-8")
    ):
        raise WebhookChallengeError("verification_failed")

    return hub_challenge or ""

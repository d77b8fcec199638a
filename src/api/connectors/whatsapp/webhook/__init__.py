"""Webhook WhatsApp: verificação, assinatura e parsing seguro."""

from ..signature import SignatureResult, verify_meta_signature
from .receive import (
    InvalidJsonError,
    WebhookRequestError,
    parse_webhook_body,
)
from .verify import WebhookChallengeError, verify_webhook_challenge

__all__ = [
    "InvalidJsonError",
    "SignatureResult",
    "WebhookChallengeError",
    "WebhookRequestError",
    "parse_webhook_body",
    "verify_meta_signature",
    "verify_webhook_challenge",
]

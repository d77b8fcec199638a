"""Normalizer WhatsApp — extração e classificação de payloads de webhook.

Tipos de mensagem extraídos: text, image, video, audio, document, sticker,
interactive (button_reply/list_reply) e button. Callbacks de status:
sent, delivered, read, failed.
"""

from .extractor import extract_messages, extract_statuses
from .webhook_parser import WhatsAppWebhookParser

__all__ = [
    "WhatsAppWebhookParser",
    "extract_messages",
    "extract_statuses",
]

"""Normalizers por canal — conversão de payloads externos para modelos internos."""

from .whatsapp import WhatsAppWebhookParser, extract_messages, extract_statuses

__all__ = [
    "WhatsAppWebhookParser",
    "extract_messages",
    "extract_statuses",
]

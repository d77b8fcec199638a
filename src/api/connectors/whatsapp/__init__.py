"""Conector WhatsApp - adapter de borda para webhooks da Meta Cloud API.

Responsabilidades:
- Webhook (verify, receive, signature)
- Cálculo de identidade de eventos para idempotência
"""

from .event_id import compute_event_identity, compute_external_event_id
from .signature import SignatureResult, verify_meta_signature

__all__ = [
    "SignatureResult",
    "compute_event_identity",
    "compute_external_event_id",
    "verify_meta_signature",
]

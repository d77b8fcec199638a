"""Connectors por canal — protocolo de borda de providers externos.

Estrutura:
- whatsapp/: webhooks da Meta Cloud API (handshake, assinatura, identidade)
"""

__all__: list[str] = []

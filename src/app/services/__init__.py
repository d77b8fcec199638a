"""Serviços de aplicação.

Unidades reutilizáveis de orquestração (sem IO direto).
Implementações concretas de IO ficam em app/infra/.
"""

from app.services.provider_registry import ProviderRegistry
from app.services.variable_engine import VariableResolutionEngine, format_value, render
from app.services.webhook_verifier import WebhookVerifier

__all__ = [
    "ProviderRegistry",
    "VariableResolutionEngine",
    "WebhookVerifier",
    "format_value",
    "render",
]

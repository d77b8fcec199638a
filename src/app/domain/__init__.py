"""Modelos de domínio: providers, eventos de webhook, variáveis e erros."""

from app.domain.errors import (
    AuthFailureError,
    DomainError,
    EmptyTemplateError,
    ErrorKind,
    NotFoundError,
    ProviderDisabledError,
    TransientDispatchError,
    UnknownExecutionError,
    UnknownProviderError,
    ValidationError,
)
from app.domain.providers import FieldSpec, ProviderDefinition, TenantProviderSetting
from app.domain.variables import Resolution, VariableContext
from app.domain.webhook_event import (
    DedupOutcome,
    DedupRecord,
    EventKind,
    InboundMessage,
    InboundWebhookEvent,
    ProcessingResult,
    ProcessingState,
    StatusUpdate,
)

__all__ = [
    "AuthFailureError",
    "DedupOutcome",
    "DedupRecord",
    "DomainError",
    "EmptyTemplateError",
    "ErrorKind",
    "EventKind",
    "FieldSpec",
    "InboundMessage",
    "InboundWebhookEvent",
    "NotFoundError",
    "ProcessingResult",
    "ProcessingState",
    "ProviderDefinition",
    "ProviderDisabledError",
    "Resolution",
    "StatusUpdate",
    "TenantProviderSetting",
    "TransientDispatchError",
    "UnknownExecutionError",
    "UnknownProviderError",
    "ValidationError",
    "VariableContext",
]

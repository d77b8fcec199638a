"""Protocolos e contratos do core da aplicação."""

from .dedupe import ClaimResult, DedupeStoreProtocol
from .provider_settings_store import ProviderSettingsStoreProtocol
from .tenant_directory import TenantDirectoryProtocol
from .webhook_parser import WebhookPayloadParserProtocol
from .workflow_engine import ExecutionContextProviderProtocol, WorkflowDispatcherProtocol

__all__ = [
    "ClaimResult",
    "DedupeStoreProtocol",
    "ExecutionContextProviderProtocol",
    "ProviderSettingsStoreProtocol",
    "TenantDirectoryProtocol",
    "WebhookPayloadParserProtocol",
    "WorkflowDispatcherProtocol",
]

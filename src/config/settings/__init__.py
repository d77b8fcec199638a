"""Agregador de settings do hookflow.

Re-exporta as settings de cada módulo. Um módulo por preocupação para
isolar mudanças.
"""

from __future__ import annotations

from config.settings.base import (
    BaseSettings,
    DedupeBackend,
    DedupeSettings,
    Environment,
    get_base_settings,
    get_dedupe_settings,
)
from config.settings.providers import (
    ProviderSettings,
    ProviderSettingsBackend,
    get_provider_settings,
)
from config.settings.tenancy import (
    TenancySettings,
    TenantDirectoryBackend,
    get_tenancy_settings,
)
from config.settings.whatsapp import (
    DEFAULT_MESSAGING_PROVIDER_KEY,
    WhatsAppSettings,
    get_whatsapp_settings,
)
from config.settings.workflow import (
    WorkflowEngineBackend,
    WorkflowEngineSettings,
    get_workflow_engine_settings,
)

__all__ = [
    "DEFAULT_MESSAGING_PROVIDER_KEY",
    "BaseSettings",
    "DedupeBackend",
    "DedupeSettings",
    "Environment",
    "ProviderSettings",
    "ProviderSettingsBackend",
    "TenancySettings",
    "TenantDirectoryBackend",
    "WhatsAppSettings",
    "WorkflowEngineBackend",
    "WorkflowEngineSettings",
    "get_base_settings",
    "get_dedupe_settings",
    "get_provider_settings",
    "get_tenancy_settings",
    "get_whatsapp_settings",
    "get_workflow_engine_settings",
]

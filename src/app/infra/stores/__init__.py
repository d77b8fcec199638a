"""Stores — implementações concretas de persistência.

Módulos disponíveis:
    - memory_stores: dedupe, configurações de providers e diretório de
      tenants em memória (desenvolvimento/testes)
    - redis_dedupe_store: dedupe de webhooks com Redis
    - redis_provider_settings_store: configurações de providers com Redis
    - redis_tenant_directory: diretório de tenants com Redis
"""

from __future__ import annotations

from app.infra.stores.memory_stores import (
    MemoryDedupeStore,
    MemoryProviderSettingsStore,
    MemoryTenantDirectory,
)
from app.infra.stores.redis_dedupe_store import RedisDedupeStore
from app.infra.stores.redis_provider_settings_store import RedisProviderSettingsStore
from app.infra.stores.redis_tenant_directory import RedisTenantDirectory

__all__ = [
    # Memory (dev/test)
    "MemoryDedupeStore",
    "MemoryProviderSettingsStore",
    "MemoryTenantDirectory",
    # Redis
    "RedisDedupeStore",
    "RedisProviderSettingsStore",
    "RedisTenantDirectory",
]

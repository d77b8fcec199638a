"""Protocolo de persistência das configurações de providers por tenant.

Apenas CRUD: regras de validação ficam no ProviderRegistry.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.domain.providers import TenantProviderSetting


class ProviderSettingsStoreProtocol(ABC):
    """Uma linha por (tenant_id, provider_key)."""

    @abstractmethod
    async def get(self, tenant_id: str, provider_key: str) -> TenantProviderSetting | None: ...

    @abstractmethod
    async def list_for_tenant(self, tenant_id: str) -> list[TenantProviderSetting]: ...

    @abstractmethod
    async def put(self, setting: TenantProviderSetting) -> None:
        """Substitui a linha inteira (sem merge de config_values)."""

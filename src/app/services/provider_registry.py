"""Registro de providers: catálogo global + configurações por tenant.

- Catálogo: imutável, carregado uma vez no boot.
- Configurações: uma linha por (tenant_id, provider_key). Upserts do mesmo
  par são serializados por um lock dedicado; pares distintos seguem em
  paralelo.
"""

from __future__ import annotations

import asyncio
import logging
import weakref
from collections.abc import Mapping
from datetime import UTC, datetime
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from app.domain.errors import (
    NotFoundError,
    ProviderDisabledError,
    UnknownProviderError,
    ValidationError,
)
from app.domain.providers import TenantProviderSetting

if TYPE_CHECKING:
    from app.domain.providers import ProviderDefinition
    from app.protocols.provider_settings_store import ProviderSettingsStoreProtocol

logger = logging.getLogger(__name__)

_SCALAR_TYPES = (str, int, float, bool)


class ProviderRegistry:
    """Serviço de consulta e gravação de providers."""

    def __init__(
        self,
        catalog: Mapping[str, ProviderDefinition],
        store: ProviderSettingsStoreProtocol,
    ) -> None:
        self._catalog = MappingProxyType(dict(catalog))
        self._store = store
        # Lock vive enquanto houver quem o detenha ou aguarde
        self._locks: weakref.WeakValueDictionary[tuple[str, str], asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    @property
    def catalog(self) -> Mapping[str, ProviderDefinition]:
        return self._catalog

    def list_definitions(self, category: str | None = None) -> list[ProviderDefinition]:
        """Lista definições ordenadas por key (filtro exato por categoria)."""
        return [
            self._catalog[key]
            for key in sorted(self._catalog)
            if category is None or self._catalog[key].category == category
        ]

    def get_definition(self, key: str) -> ProviderDefinition:
        definition = self._catalog.get(key)
        if definition is None:
            raise UnknownProviderError(f"provider desconhecido: {key}", provider_key=key)
        return definition

    async def get_tenant_setting(self, tenant_id: str, provider_key: str) -> TenantProviderSetting:
        """Retorna a configuração do tenant (NotFound quando não existe)."""
        setting = await self._store.get(tenant_id, provider_key)
        if setting is None:
            raise NotFoundError(
                f"provider {provider_key} não configurado", provider_key=provider_key
            )
        return setting

    async def get_enabled_setting(self, tenant_id: str, provider_key: str) -> TenantProviderSetting:
        """Como get_tenant_setting, mas ProviderDisabled se `enabled=False`."""
        setting = await self.get_tenant_setting(tenant_id, provider_key)
        if not setting.enabled:
            raise ProviderDisabledError(
                f"provider {provider_key} desabilitado", provider_key=provider_key
            )
        return setting

    async def list_tenant_settings(
        self, tenant_id: str, category: str | None = None
    ) -> list[TenantProviderSetting]:
        """Configurações do tenant ordenadas por provider_key.

        Linhas de providers que saíram do catálogo são omitidas.
        """
        rows = await self._store.list_for_tenant(tenant_id)
        result: list[TenantProviderSetting] = []
        for row in sorted(rows, key=lambda r: r.provider_key):
            definition = self._catalog.get(row.provider_key)
            if definition is None:
                continue
            if category is not None and definition.category != category:
                continue
            result.append(row)
        return result

    async def upsert_tenant_setting(
        self,
        tenant_id: str,
        provider_key: str,
        config_values: Mapping[str, Any],
        enabled: bool = True,
    ) -> TenantProviderSetting:
        """Cria ou substitui a configuração do tenant para o provider.

        Raises:
            UnknownProviderError: provider fora do catálogo
            ValidationError: campo obrigatório ausente/vazio ou valor não escalar
        """
        if not tenant_id:
            raise ValidationError("tenant_id obrigatório", fields=("tenant_id",))
        definition = self.get_definition(provider_key)
        values = _validate_config_values(definition, config_values)

        async with self._lock_for(tenant_id, provider_key):
            existing = await self._store.get(tenant_id, provider_key)
            now = datetime.now(UTC)
            setting = TenantProviderSetting(
                tenant_id=tenant_id,
                provider_key=provider_key,
                config_values=values,
                enabled=enabled,
                created_at=existing.created_at if existing else now,
                updated_at=now,
            )
            await self._store.put(setting)

        logger.info(
            "provider_setting_upserted",
            extra={
                "tenant_id": tenant_id,
                "provider_key": provider_key,
                "enabled": enabled,
                "setting_created": existing is None,
            },
        )
        return setting

    def secret_fields(self, provider_key: str) -> frozenset[str]:
        definition = self._catalog.get(provider_key)
        return definition.secret_field_names if definition else frozenset()

    def _lock_for(self, tenant_id: str, provider_key: str) -> asyncio.Lock:
        # Criação sem await: atômica no event loop
        return self._locks.setdefault((tenant_id, provider_key), asyncio.Lock())


def _validate_config_values(
    definition: ProviderDefinition, config_values: Mapping[str, Any]
) -> dict[str, Any]:
    if not isinstance(config_values, Mapping):
        raise ValidationError("config_values deve ser um objeto", fields=("config_values",))

    non_scalar = tuple(
        name
        for name, value in config_values.items()
        if value is not None and not isinstance(value, _SCALAR_TYPES)
    )
    if non_scalar:
        raise ValidationError(
            f"valores devem ser escalares: {', '.join(non_scalar)}", fields=non_scalar
        )

    values = dict(config_values)
    missing = definition.missing_required(values)
    if missing:
        raise ValidationError(
            f"campos obrigatórios ausentes: {', '.join(missing)}",
            fields=missing,
            provider_key=definition.key,
        )
    return values


"""Store Redis das configurações de providers por tenant.

Estrutura:
- provider_settings:{tenant_id} → HASH provider_key -> JSON da configuração

HSET substitui o campo inteiro, o que garante a semântica de upsert sem
merge de config_values.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from app.domain.providers import TenantProviderSetting
from app.protocols.provider_settings_store import ProviderSettingsStoreProtocol
from utils.errors import RedisConnectionError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

PROVIDER_SETTINGS_PREFIX = "provider_settings:"


def _decode(value: bytes | str) -> str:
    return value if isinstance(value, str) else value.decode()


class RedisProviderSettingsStore(ProviderSettingsStoreProtocol):
    """Store Redis para staging/produção."""

    def __init__(self, async_redis_client: AsyncRedis) -> None:
        self._redis = async_redis_client

    def _key(self, tenant_id: str) -> str:
        return f"{PROVIDER_SETTINGS_PREFIX}{tenant_id}"

    async def get(self, tenant_id: str, provider_key: str) -> TenantProviderSetting | None:
        try:
            raw = await self._redis.hget(self._key(tenant_id), provider_key)
        except Exception as exc:
            raise RedisConnectionError("Falha ao ler configuração de provider") from exc
        if raw is None:
            return None
        return TenantProviderSetting.from_dict(json.loads(_decode(raw)))

    async def list_for_tenant(self, tenant_id: str) -> list[TenantProviderSetting]:
        try:
            rows = await self._redis.hgetall(self._key(tenant_id))
        except Exception as exc:
            raise RedisConnectionError("Falha ao listar configurações de providers") from exc
        settings: list[TenantProviderSetting] = []
        for field_name, raw in (rows or {}).items():
            try:
                settings.append(TenantProviderSetting.from_dict(json.loads(_decode(raw))))
            except (json.JSONDecodeError, KeyError, ValueError) as exc:
                logger.warning(
                    "provider_setting_parse_error",
                    extra={"provider_key": _decode(field_name), "error_type": type(exc).__name__},
                )
        return settings

    async def put(self, setting: TenantProviderSetting) -> None:
        try:
            await self._redis.hset(
                self._key(setting.tenant_id),
                setting.provider_key,
                json.dumps(setting.to_dict(), separators=(",", ":")),
            )
        except Exception as exc:
            raise RedisConnectionError("Falha ao gravar configuração de provider") from exc

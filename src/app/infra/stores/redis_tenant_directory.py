"""Diretório de tenants em Redis.

Estrutura:
- tenant_token:{token} → tenant_id (mantido pelo serviço de cadastro de tenants)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from utils.errors import RedisConnectionError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

TENANT_TOKEN_PREFIX = "tenant_token:"


class RedisTenantDirectory:
    """Resolve token do webhook para tenant_id via GET."""

    def __init__(self, async_redis_client: AsyncRedis) -> None:
        self._redis = async_redis_client

    async def resolve(self, tenant_token: str) -> str | None:
        try:
            raw = await self._redis.get(f"{TENANT_TOKEN_PREFIX}{tenant_token}")
        except Exception as exc:
            raise RedisConnectionError("Falha ao resolver tenant no Redis") from exc
        if raw is None:
            return None
        return raw if isinstance(raw, str) else raw.decode()

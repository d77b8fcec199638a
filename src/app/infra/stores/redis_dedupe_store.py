"""Redis Dedupe Store — deduplicação de webhooks com Redis.

Cada identidade é uma chave `dedupe:{identity}` com o DedupRecord em JSON e
TTL igual à janela de dedupe.

- claim: SET NX EX (inserção condicional atômica)
- retomada de `failure`: compare-and-set via Lua (só sobrescreve se o valor
  ainda for o registro de falha lido)
- complete: SET EX preservando first_seen_at

Contrato de Keys:
    Identidades são `{tenant_token}:{id externo}` ou hashes. Em logs a
    identidade é sempre mascarada.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from app.domain.webhook_event import DedupOutcome, DedupRecord
from app.protocols.dedupe import ClaimResult, DedupeStoreProtocol
from config.logging import mask_identifier
from utils.errors import RedisConnectionError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

DEDUPE_PREFIX = "dedupe:"

# Tentativas de claim quando o registro some/muda entre leituras
_MAX_CLAIM_ATTEMPTS = 3

_COMPARE_AND_SET = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    redis.call('SET', KEYS[1], ARGV[2], 'EX', ARGV[3])
    return 1
end
return 0
"""


class RedisDedupeStore(DedupeStoreProtocol):
    """Store de dedupe usando Redis (async).

    Args:
        async_redis_client: Cliente `redis.asyncio.Redis`
    """

    def __init__(self, async_redis_client: AsyncRedis) -> None:
        self._redis = async_redis_client

    def _key(self, identity: str) -> str:
        return f"{DEDUPE_PREFIX}{identity}"

    async def claim(self, identity: str, ttl: int) -> ClaimResult:
        key = self._key(identity)
        for _ in range(_MAX_CLAIM_ATTEMPTS):
            now = datetime.now(UTC)
            pending = _pending_record(identity, now, now, ttl)
            try:
                was_set = await self._redis.set(key, pending.to_json(), nx=True, ex=ttl)
                if was_set:
                    return ClaimResult(claimed=True, record=pending)
                raw = await self._redis.get(key)
            except Exception as exc:
                raise RedisConnectionError("Falha ao registrar dedupe no Redis") from exc

            if raw is None:
                # Expirou entre o SET NX e o GET
                continue

            existing = DedupRecord.from_json(raw)
            if existing.outcome is not DedupOutcome.FAILURE:
                logger.debug(
                    "dedupe_duplicate_detected",
                    extra={"identity": mask_identifier(identity), "outcome": existing.outcome.value},
                )
                return ClaimResult(claimed=False, record=existing)

            takeover = _pending_record(identity, existing.first_seen_at, now, ttl)
            try:
                swapped = await self._redis.eval(
                    _COMPARE_AND_SET, 1, key, raw, takeover.to_json(), ttl
                )
            except Exception as exc:
                raise RedisConnectionError("Falha ao retomar dedupe no Redis") from exc
            if swapped:
                logger.debug(
                    "dedupe_failure_taken_over", extra={"identity": mask_identifier(identity)}
                )
                return ClaimResult(claimed=True, record=takeover)

        # Concorrência persistente: outra entrega assumiu o registro
        current = await self.get(identity)
        if current is None:
            msg = "Registro de dedupe instável após múltiplas tentativas"
            raise RedisConnectionError(msg)
        return ClaimResult(claimed=False, record=current)

    async def get(self, identity: str) -> DedupRecord | None:
        try:
            raw = await self._redis.get(self._key(identity))
        except Exception as exc:
            raise RedisConnectionError("Falha ao consultar dedupe no Redis") from exc
        if raw is None:
            return None
        return DedupRecord.from_json(raw)

    async def complete(self, identity: str, *, success: bool, detail: str, ttl: int) -> None:
        existing = await self.get(identity)
        now = datetime.now(UTC)
        record = DedupRecord(
            identity=identity,
            outcome=DedupOutcome.SUCCESS if success else DedupOutcome.FAILURE,
            first_seen_at=existing.first_seen_at if existing else now,
            expires_at=now + timedelta(seconds=ttl),
            success=success,
            detail=detail,
        )
        try:
            await self._redis.set(self._key(identity), record.to_json(), ex=ttl)
        except Exception as exc:
            raise RedisConnectionError("Falha ao concluir dedupe no Redis") from exc
        logger.debug(
            "dedupe_completed",
            extra={"identity": mask_identifier(identity), "outcome": record.outcome.value},
        )

    async def sweep_expired(self) -> int:
        # Expiração é feita pelo próprio Redis (EX)
        return 0


def _pending_record(
    identity: str, first_seen_at: datetime, now: datetime, ttl: int
) -> DedupRecord:
    return DedupRecord(
        identity=identity,
        outcome=DedupOutcome.PENDING,
        first_seen_at=first_seen_at,
        expires_at=now + timedelta(seconds=ttl),
    )

"""Stores em memória — apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios
e sem coordenação entre instâncias.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from app.domain.webhook_event import DedupOutcome, DedupRecord
from app.protocols.dedupe import ClaimResult, DedupeStoreProtocol
from app.protocols.provider_settings_store import ProviderSettingsStoreProtocol
from config.logging import mask_identifier

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from app.domain.providers import TenantProviderSetting

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class MemoryDedupeStore(DedupeStoreProtocol):
    """Store de dedupe em memória — apenas para dev/test.

    Check-and-insert é atômico sob um asyncio.Lock. Registros expirados são
    ignorados na leitura e removidos por `sweep_expired()`.
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._records: dict[str, DedupRecord] = {}
        self._lock = asyncio.Lock()
        self._clock = clock

    def _live(self, identity: str, now: datetime) -> DedupRecord | None:
        record = self._records.get(identity)
        if record is None or record.is_expired(now):
            return None
        return record

    async def claim(self, identity: str, ttl: int) -> ClaimResult:
        async with self._lock:
            now = self._clock()
            existing = self._live(identity, now)
            if existing is not None and existing.outcome is not DedupOutcome.FAILURE:
                return ClaimResult(claimed=False, record=existing)

            record = DedupRecord(
                identity=identity,
                outcome=DedupOutcome.PENDING,
                first_seen_at=existing.first_seen_at if existing else now,
                expires_at=now + timedelta(seconds=ttl),
            )
            self._records[identity] = record
            if existing is not None:
                logger.debug(
                    "dedupe_failure_taken_over",
                    extra={"identity": mask_identifier(identity)},
                )
            return ClaimResult(claimed=True, record=record)

    async def get(self, identity: str) -> DedupRecord | None:
        return self._live(identity, self._clock())

    async def complete(self, identity: str, *, success: bool, detail: str, ttl: int) -> None:
        async with self._lock:
            now = self._clock()
            existing = self._records.get(identity)
            self._records[identity] = DedupRecord(
                identity=identity,
                outcome=DedupOutcome.SUCCESS if success else DedupOutcome.FAILURE,
                first_seen_at=existing.first_seen_at if existing else now,
                expires_at=now + timedelta(seconds=ttl),
                success=success,
                detail=detail,
            )

    async def sweep_expired(self) -> int:
        async with self._lock:
            now = self._clock()
            expired = [k for k, v in self._records.items() if v.is_expired(now)]
            for key in expired:
                del self._records[key]
        if expired:
            logger.debug("dedupe_sweep_completed", extra={"removed": len(expired)})
        return len(expired)

    def __len__(self) -> int:
        return len(self._records)


class MemoryProviderSettingsStore(ProviderSettingsStoreProtocol):
    """Store de configurações de providers em memória — apenas para dev/test."""

    def __init__(self) -> None:
        self._rows: dict[tuple[str, str], TenantProviderSetting] = {}

    async def get(self, tenant_id: str, provider_key: str) -> TenantProviderSetting | None:
        return self._rows.get((tenant_id, provider_key))

    async def list_for_tenant(self, tenant_id: str) -> list[TenantProviderSetting]:
        return [row for (tenant, _), row in self._rows.items() if tenant == tenant_id]

    async def put(self, setting: TenantProviderSetting) -> None:
        self._rows[(setting.tenant_id, setting.provider_key)] = setting


class MemoryTenantDirectory:
    """Diretório de tenants estático (token -> tenant_id) para dev/test."""

    def __init__(self, tokens: Mapping[str, str] | None = None) -> None:
        self._tokens = dict(tokens or {})

    def register(self, tenant_token: str, tenant_id: str) -> None:
        self._tokens[tenant_token] = tenant_id

    async def resolve(self, tenant_token: str) -> str | None:
        return self._tokens.get(tenant_token)

"""Testes dos stores em memória."""

from __future__ import annotations

import asyncio

import pytest

from app.domain.webhook_event import DedupOutcome
from app.infra.stores import (
    MemoryDedupeStore,
    MemoryProviderSettingsStore,
    MemoryTenantDirectory,
)
from tests.fakes.fake_ports import FakeClock, whatsapp_setting


class TestMemoryDedupeStore:
    @pytest.mark.asyncio
    async def test_first_claim_wins(self) -> None:
        store = MemoryDedupeStore()

        first = await store.claim("tok:wamid.1", ttl=60)
        second = await store.claim("tok:wamid.1", ttl=60)

        assert first.claimed is True
        assert first.record.outcome is DedupOutcome.PENDING
        assert second.claimed is False
        assert second.record.outcome is DedupOutcome.PENDING

    @pytest.mark.asyncio
    async def test_concurrent_claims_have_single_owner(self) -> None:
        store = MemoryDedupeStore()

        results = await asyncio.gather(*(store.claim("tok:same", ttl=60) for _ in range(20)))

        assert sum(1 for r in results if r.claimed) == 1

    @pytest.mark.asyncio
    async def test_success_is_replayed(self) -> None:
        store = MemoryDedupeStore()
        await store.claim("id", ttl=60)
        await store.complete("id", success=True, detail="message_dispatched", ttl=60)

        result = await store.claim("id", ttl=60)

        assert result.claimed is False
        assert result.record.outcome is DedupOutcome.SUCCESS
        assert result.record.detail == "message_dispatched"

    @pytest.mark.asyncio
    async def test_failure_is_taken_over_preserving_first_seen(self) -> None:
        clock = FakeClock()
        store = MemoryDedupeStore(clock=clock)
        first = await store.claim("id", ttl=60)
        await store.complete("id", success=False, detail="dispatch_failed", ttl=60)
        clock.advance(5)

        retry = await store.claim("id", ttl=60)

        assert retry.claimed is True
        assert retry.record.outcome is DedupOutcome.PENDING
        assert retry.record.first_seen_at == first.record.first_seen_at

    @pytest.mark.asyncio
    async def test_expired_record_allows_new_claim(self) -> None:
        clock = FakeClock()
        store = MemoryDedupeStore(clock=clock)
        await store.claim("id", ttl=10)
        await store.complete("id", success=True, detail="ok", ttl=10)

        clock.advance(10)

        assert await store.get("id") is None
        assert (await store.claim("id", ttl=10)).claimed is True

    @pytest.mark.asyncio
    async def test_sweep_removes_only_expired(self) -> None:
        clock = FakeClock()
        store = MemoryDedupeStore(clock=clock)
        await store.claim("old", ttl=10)
        clock.advance(5)
        await store.claim("new", ttl=10)
        clock.advance(6)

        removed = await store.sweep_expired()

        assert removed == 1
        assert len(store) == 1
        assert await store.get("new") is not None


class TestMemoryProviderSettingsStore:
    @pytest.mark.asyncio
    async def test_put_replaces_row_per_tenant_and_key(self) -> None:
        store = MemoryProviderSettingsStore()
        await store.put(whatsapp_setting("t1"))
        await store.put(whatsapp_setting("t1", enabled=False))
        await store.put(whatsapp_setting("t2"))

        rows = await store.list_for_tenant("t1")

        assert len(rows) == 1
        assert rows[0].enabled is False
        assert await store.get("t3", "meta-whatsapp") is None


class TestMemoryTenantDirectory:
    @pytest.mark.asyncio
    async def test_resolve_and_register(self) -> None:
        directory = MemoryTenantDirectory({"tok-a": "tenant-a"})
        directory.register("tok-b", "tenant-b")

        assert await directory.resolve("tok-a") == "tenant-a"
        assert await directory.resolve("tok-b") == "tenant-b"
        assert await directory.resolve("unknown") is None

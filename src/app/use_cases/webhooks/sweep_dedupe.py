"""Varredura periódica de registros de dedupe expirados.

Roda como task de background do lifespan. O store em memória remove os
registros vencidos; no Redis a expiração é nativa e a varredura é no-op.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from app.observability import record_dedupe_sweep

if TYPE_CHECKING:
    from app.protocols.dedupe import DedupeStoreProtocol

logger = logging.getLogger(__name__)


async def sweep_once(store: DedupeStoreProtocol) -> int:
    """Executa uma varredura e registra a métrica."""
    started_at = time.perf_counter()
    removed = await store.sweep_expired()
    record_dedupe_sweep(removed, (time.perf_counter() - started_at) * 1000)
    return removed


async def run_dedupe_sweeper(store: DedupeStoreProtocol, interval_seconds: float) -> None:
    """Loop de varredura até cancelamento.

    Falhas de uma varredura são logadas e a próxima segue normalmente.
    """
    logger.info("dedupe_sweeper_started", extra={"interval_seconds": interval_seconds})
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await sweep_once(store)
        except Exception as exc:
            logger.warning(
                "dedupe_sweep_failed",
                extra={"error_type": type(exc).__name__},
            )

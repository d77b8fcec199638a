"""Protocolo do store de dedupe de eventos de webhook.

Ciclo de vida de uma identidade:
    claim() -> registro `pending` (ou o registro existente)
    complete() -> `success` | `failure`
    expiração -> registro removido (TTL no Redis, sweep em memória)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.domain.webhook_event import DedupRecord


@dataclass(frozen=True, slots=True)
class ClaimResult:
    """Resultado de `claim`.

    claimed=True: esta entrega detém o registro `pending` e deve processar.
    claimed=False: `record` é o registro existente (pending ou success).
    """

    claimed: bool
    record: DedupRecord


class DedupeStoreProtocol(ABC):
    """Contrato assíncrono para stores de dedupe."""

    @abstractmethod
    async def claim(self, identity: str, ttl: int) -> ClaimResult:
        """Insere registro `pending` de forma atômica se não houver um vivo.

        Um registro existente com outcome `failure` é assumido (sobrescrito
        por um novo `pending`), permitindo que redeliveries retentem eventos
        que falharam.
        """

    @abstractmethod
    async def get(self, identity: str) -> DedupRecord | None:
        """Retorna o registro vivo da identidade (None se ausente/expirado)."""

    @abstractmethod
    async def complete(self, identity: str, *, success: bool, detail: str, ttl: int) -> None:
        """Grava o outcome final do processamento."""

    @abstractmethod
    async def sweep_expired(self) -> int:
        """Remove registros expirados; retorna quantos foram removidos."""

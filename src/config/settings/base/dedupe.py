"""Settings de dedupe de webhooks.

Janela de deduplicação e comportamento de entregas concorrentes.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

DedupeBackend = Literal["memory", "redis"]


@dataclass(frozen=True)
class DedupeSettings:
    """Configurações de dedupe/idempotência.

    Attributes:
        backend: Backend do store de dedupe (memory|redis)
        ttl_seconds: Janela de dedupe; registros expiram depois dela
        pending_wait_seconds: Quanto uma entrega concorrente aguarda o
            resultado da entrega que detém o registro pendente
        pending_poll_interval_seconds: Intervalo entre leituras do registro
        sweep_interval_seconds: Intervalo da varredura de expirados (memory)
    """

    backend: DedupeBackend = "memory"
    ttl_seconds: int = 86400  # 24h
    pending_wait_seconds: float = 5.0
    pending_poll_interval_seconds: float = 0.1
    sweep_interval_seconds: float = 300.0

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações de dedupe contra o ambiente."""
        errors: list[str] = []

        if self.backend not in ("memory", "redis"):
            errors.append(f"DEDUPE_BACKEND inválido: {self.backend}")

        if self.backend == "memory" and not base.is_development:
            errors.append("DEDUPE_BACKEND=memory proibido em staging/production. Use Redis.")

        if self.backend == "redis" and not base.redis_url:
            errors.append("DEDUPE_BACKEND=redis requer REDIS_URL configurado")

        if self.ttl_seconds <= 0:
            errors.append("DEDUPE_TTL_SECONDS deve ser > 0")

        if self.pending_wait_seconds < 0:
            errors.append("DEDUPE_PENDING_WAIT_SECONDS deve ser >= 0")

        if self.pending_poll_interval_seconds <= 0:
            errors.append("DEDUPE_PENDING_POLL_INTERVAL_SECONDS deve ser > 0")

        if self.sweep_interval_seconds <= 0:
            errors.append("DEDUPE_SWEEP_INTERVAL_SECONDS deve ser > 0")

        return errors


def _load_dedupe_from_env() -> DedupeSettings:
    backend_str = os.getenv("DEDUPE_BACKEND", "memory").lower()
    backend: DedupeBackend = backend_str if backend_str in ("memory", "redis") else "memory"
    return DedupeSettings(
        backend=backend,
        ttl_seconds=int(os.getenv("DEDUPE_TTL_SECONDS", "86400")),
        pending_wait_seconds=float(os.getenv("DEDUPE_PENDING_WAIT_SECONDS", "5")),
        pending_poll_interval_seconds=float(
            os.getenv("DEDUPE_PENDING_POLL_INTERVAL_SECONDS", "0.1")
        ),
        sweep_interval_seconds=float(os.getenv("DEDUPE_SWEEP_INTERVAL_SECONDS", "300")),
    )


@lru_cache(maxsize=1)
def get_dedupe_settings() -> DedupeSettings:
    """Retorna instância cacheada de DedupeSettings."""
    return _load_dedupe_from_env()

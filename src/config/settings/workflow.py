"""Settings do cliente do workflow engine.

O engine recebe eventos de mensagem/status e responde snapshots de
variáveis de execuções.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

WorkflowEngineBackend = Literal["memory", "http"]


@dataclass(frozen=True)
class WorkflowEngineSettings:
    """Configurações do workflow engine.

    Attributes:
        backend: memory (dev/test) ou http
        base_url: URL base da API do engine
        api_key: Chave enviada em `Authorization: Bearer`
        request_timeout_seconds: Timeout HTTP de cada chamada
        variables_timeout_seconds: Limite para obter snapshot de execução
    """

    backend: WorkflowEngineBackend = "memory"
    base_url: str = ""
    api_key: str = ""
    request_timeout_seconds: float = 10.0
    variables_timeout_seconds: float = 5.0

    def validate(self, base: BaseSettings) -> list[str]:
        errors: list[str] = []

        if self.backend not in ("memory", "http"):
            errors.append(f"WORKFLOW_ENGINE_BACKEND inválido: {self.backend}")

        if self.backend == "http" and not self.base_url:
            errors.append("WORKFLOW_ENGINE_BACKEND=http requer WORKFLOW_ENGINE_URL")

        if self.backend == "memory" and not base.is_development:
            errors.append("WORKFLOW_ENGINE_BACKEND=memory proibido em staging/production")

        if self.request_timeout_seconds <= 0:
            errors.append("WORKFLOW_ENGINE_TIMEOUT_SECONDS deve ser > 0")

        if self.variables_timeout_seconds <= 0:
            errors.append("VARIABLES_LOOKUP_TIMEOUT_SECONDS deve ser > 0")

        return errors


def _load_from_env() -> WorkflowEngineSettings:
    backend_str = os.getenv("WORKFLOW_ENGINE_BACKEND", "memory").lower()
    backend: WorkflowEngineBackend = backend_str if backend_str in ("memory", "http") else "memory"
    return WorkflowEngineSettings(
        backend=backend,
        base_url=os.getenv("WORKFLOW_ENGINE_URL", "").rstrip("/"),
        api_key=os.getenv("WORKFLOW_ENGINE_API_KEY", ""),
        request_timeout_seconds=float(os.getenv("WORKFLOW_ENGINE_TIMEOUT_SECONDS", "10")),
        variables_timeout_seconds=float(os.getenv("VARIABLES_LOOKUP_TIMEOUT_SECONDS", "5")),
    )


@lru_cache(maxsize=1)
def get_workflow_engine_settings() -> WorkflowEngineSettings:
    """Retorna instância cacheada de WorkflowEngineSettings."""
    return _load_from_env()

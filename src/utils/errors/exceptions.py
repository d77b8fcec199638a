"""Exceções de infraestrutura (Redis, workflow engine)."""

from __future__ import annotations


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura."""


class RedisConnectionError(InfrastructureError):
    """Falha de conexão/timeout ao acessar Redis."""


class WorkflowEngineError(InfrastructureError):
    """Resposta de erro não transitória do workflow engine (4xx, corpo inválido)."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

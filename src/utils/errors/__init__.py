"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    InfrastructureError,
    RedisConnectionError,
    WorkflowEngineError,
)

__all__ = [
    "InfrastructureError",
    "RedisConnectionError",
    "WorkflowEngineError",
]

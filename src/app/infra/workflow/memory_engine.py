"""Workflow engine em memória — desenvolvimento e testes.

Registra eventos despachados e serve snapshots de execução cadastrados.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.domain.webhook_event import InboundMessage, StatusUpdate

logger = logging.getLogger(__name__)


class MemoryWorkflowEngine:
    """Implementa dispatcher e provider de contexto sem IO."""

    def __init__(self, executions: Mapping[str, Mapping[str, Any]] | None = None) -> None:
        self._executions = {k: dict(v) for k, v in (executions or {}).items()}
        self.dispatched: list[tuple[str, InboundMessage]] = []
        self.notified: list[tuple[str, StatusUpdate]] = []

    def add_execution(self, execution_id: str, variables: Mapping[str, Any]) -> None:
        self._executions[execution_id] = dict(variables)

    async def dispatch_message(
        self,
        *,
        tenant_id: str,
        provider_key: str,
        message: InboundMessage,
        correlation_id: str = "",
    ) -> None:
        self.dispatched.append((tenant_id, message))
        logger.debug(
            "memory_engine_message_dispatched",
            extra={"provider_key": provider_key, "message_type": message.message_type},
        )

    async def notify_status(
        self,
        *,
        tenant_id: str,
        provider_key: str,
        status: StatusUpdate,
        correlation_id: str = "",
    ) -> None:
        self.notified.append((tenant_id, status))

    async def get_execution_variables(self, execution_id: str) -> Mapping[str, Any] | None:
        return self._executions.get(execution_id)

    async def aclose(self) -> None:
        return None

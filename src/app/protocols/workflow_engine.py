"""Protocolos do workflow engine (dispatch de eventos e snapshots de execução)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.domain.webhook_event import InboundMessage, StatusUpdate


class WorkflowDispatcherProtocol(Protocol):
    """Entrega eventos inbound ao engine.

    Falhas recuperáveis (timeout, transporte, 5xx) levantam
    TransientDispatchError; demais falhas levantam outras exceções.
    """

    async def dispatch_message(
        self,
        *,
        tenant_id: str,
        provider_key: str,
        message: InboundMessage,
        correlation_id: str = "",
    ) -> None: ...

    async def notify_status(
        self,
        *,
        tenant_id: str,
        provider_key: str,
        status: StatusUpdate,
        correlation_id: str = "",
    ) -> None: ...


class ExecutionContextProviderProtocol(Protocol):
    """Fornece o snapshot de variáveis de uma execução de workflow."""

    async def get_execution_variables(self, execution_id: str) -> Mapping[str, Any] | None:
        """Retorna as variáveis da execução ou None se ela não existe."""
        ...

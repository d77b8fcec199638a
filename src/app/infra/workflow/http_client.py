"""Cliente HTTP do workflow engine.

Endpoints consumidos:
- POST {base}/api/inbound/messages        evento de mensagem
- POST {base}/api/inbound/statuses        callback de status
- GET  {base}/api/executions/{id}/variables  snapshot de variáveis

Classificação de falhas:
- timeout, erro de transporte, 429 e 5xx: TransientDispatchError
- demais 4xx e corpo inválido: WorkflowEngineError (não transitório)

O cliente não faz retry: a política de retry é do WebhookProcessor.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx

from app.domain.errors import TransientDispatchError
from utils.errors import WorkflowEngineError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.domain.webhook_event import InboundMessage, StatusUpdate
    from config.settings import WorkflowEngineSettings

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS = frozenset({408, 429})


class WorkflowEngineClient:
    """Adapter HTTP para o workflow engine (dispatcher + provider de contexto).

    Args:
        base_url: URL base da API do engine
        api_key: Enviada como `Authorization: Bearer` quando presente
        timeout_seconds: Timeout de cada requisição
        transport: Transport httpx opcional (testes usam httpx.MockTransport)
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout_seconds,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def dispatch_message(
        self,
        *,
        tenant_id: str,
        provider_key: str,
        message: InboundMessage,
        correlation_id: str = "",
    ) -> None:
        await self._post(
            "/api/inbound/messages",
            {
                "tenant_id": tenant_id,
                "provider_key": provider_key,
                "message": message.to_dict(),
            },
            correlation_id,
        )

    async def notify_status(
        self,
        *,
        tenant_id: str,
        provider_key: str,
        status: StatusUpdate,
        correlation_id: str = "",
    ) -> None:
        await self._post(
            "/api/inbound/statuses",
            {
                "tenant_id": tenant_id,
                "provider_key": provider_key,
                "status": status.to_dict(),
            },
            correlation_id,
        )

    async def get_execution_variables(self, execution_id: str) -> Mapping[str, Any] | None:
        path = f"/api/executions/{quote(execution_id, safe='')}/variables"
        response = await self._request("GET", path, None, "")
        if response.status_code == 404:
            return None
        self._raise_for_status(response, path)
        try:
            body = response.json()
        except ValueError as exc:
            raise WorkflowEngineError("workflow_engine_invalid_json") from exc
        variables = body.get("variables") if isinstance(body, dict) else None
        if not isinstance(variables, dict):
            raise WorkflowEngineError("workflow_engine_invalid_variables")
        return variables

    async def _post(self, path: str, payload: dict[str, Any], correlation_id: str) -> None:
        response = await self._request("POST", path, payload, correlation_id)
        self._raise_for_status(response, path)
        logger.debug(
            "workflow_engine_request_ok",
            extra={"path": path, "status_code": response.status_code},
        )

    async def _request(
        self,
        method: str,
        path: str,
        payload: dict[str, Any] | None,
        correlation_id: str,
    ) -> httpx.Response:
        headers = {"X-Correlation-Id": correlation_id} if correlation_id else None
        try:
            return await self._client.request(method, path, json=payload, headers=headers)
        except httpx.TimeoutException as exc:
            raise TransientDispatchError("workflow_engine_timeout", path=path) from exc
        except httpx.TransportError as exc:
            raise TransientDispatchError("workflow_engine_unreachable", path=path) from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response, path: str) -> None:
        status_code = response.status_code
        if status_code < 400:
            return
        logger.warning(
            "workflow_engine_request_failed",
            extra={"path": path, "status_code": status_code},
        )
        if status_code >= 500 or status_code in _RETRYABLE_STATUS:
            raise TransientDispatchError(
                "workflow_engine_unavailable", path=path, status_code=status_code
            )
        raise WorkflowEngineError("workflow_engine_rejected", status_code=status_code)


def create_workflow_engine_client(
    settings: WorkflowEngineSettings | None = None,
) -> WorkflowEngineClient:
    """Factory do cliente HTTP a partir das settings."""
    from config.settings import get_workflow_engine_settings

    engine = settings or get_workflow_engine_settings()
    return WorkflowEngineClient(
        base_url=engine.base_url,
        api_key=engine.api_key,
        timeout_seconds=engine.request_timeout_seconds,
    )

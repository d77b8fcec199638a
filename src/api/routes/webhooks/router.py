"""Endpoints de webhook por tenant.

Endpoints:
- GET /webhooks/{tenant_token}: handshake de verificação (challenge)
- POST /webhooks/{tenant_token}: recebimento de eventos inbound

Contrato:
- GET responde o challenge em texto puro, ou 401
- POST responde sempre 200; falhas (assinatura, JSON, processamento)
  aparecem apenas no corpo `{"success": false, "error": ...}`
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute

from api.connectors.whatsapp.webhook import InvalidJsonError, parse_webhook_body
from app.bootstrap import get_webhook_processor, get_webhook_verifier
from app.observability import get_correlation_id
from app.services.webhook_verifier import WebhookVerifier
from app.use_cases.webhooks import WebhookProcessor
from config.logging import mask_identifier

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class AcknowledgedWebhookRoute(APIRoute):
    """Rota que sempre responde 200 ao provider.

    Qualquer exceção no handler ou nas dependências vira
    `{"success": false, "error": "internal_error"}`.
    """

    def get_route_handler(self) -> Callable[[Request], Awaitable[Response]]:
        handler = super().get_route_handler()

        async def acknowledged_handler(request: Request) -> Response:
            try:
                return await handler(request)
            except Exception as exc:
                logger.exception(
                    "webhook_route_failed",
                    extra={
                        "correlation_id": get_correlation_id(),
                        "error_type": type(exc).__name__,
                    },
                )
                return JSONResponse(
                    content={"success": False, "error": "internal_error"},
                    status_code=status.HTTP_200_OK,
                )

        return acknowledged_handler


router = APIRouter()
receive_router = APIRouter(route_class=AcknowledgedWebhookRoute)


@router.get("/{tenant_token}")
async def verify_webhook(
    tenant_token: str,
    request: Request,
    verifier: WebhookVerifier = Depends(get_webhook_verifier),
) -> Response:
    """Handshake do provider — responde `hub.challenge` quando o token confere.

    Query params esperados:
    - hub.mode: deve ser "subscribe"
    - hub.verify_token: deve corresponder ao configurado para o tenant
    - hub.challenge: valor a retornar
    """
    hub_mode = request.query_params.get("hub.mode")
    hub_verify_token = request.query_params.get("hub.verify_token")
    hub_challenge = request.query_params.get("hub.challenge")

    verified = await verifier.verify(tenant_token, hub_mode, hub_challenge, hub_verify_token)
    if not verified:
        return Response(
            content="Unauthorized",
            media_type="text/plain",
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    # O provider espera o challenge como texto puro
    return Response(
        content=hub_challenge or "",
        media_type="text/plain",
        status_code=status.HTTP_200_OK,
    )


@receive_router.post("/{tenant_token}")
async def receive_webhook(
    tenant_token: str,
    request: Request,
    verifier: WebhookVerifier = Depends(get_webhook_verifier),
    processor: WebhookProcessor = Depends(get_webhook_processor),
) -> dict[str, Any]:
    """Recebimento de eventos inbound.

    Validações:
    1. Assinatura HMAC (X-Hub-Signature-256), quando o tenant tem app secret
    2. JSON válido com objeto na raiz

    Em seguida delega ao WebhookProcessor (dedupe, tenant, dispatch).
    """
    raw_body = await request.body()

    signature = await verifier.verify_signature(tenant_token, raw_body, request.headers)
    if not signature.valid:
        logger.warning(
            "webhook_signature_invalid",
            extra={
                "tenant_token": mask_identifier(tenant_token),
                "correlation_id": get_correlation_id(),
                "error": signature.error,
            },
        )
        return {"success": False, "error": "invalid_signature"}

    try:
        payload = parse_webhook_body(raw_body)
    except InvalidJsonError as exc:
        logger.warning(
            "webhook_json_invalid",
            extra={
                "tenant_token": mask_identifier(tenant_token),
                "correlation_id": get_correlation_id(),
                "error": str(exc),
            },
        )
        return {"success": False, "error": "invalid_json"}

    logger.info(
        "webhook_received",
        extra={
            "tenant_token": mask_identifier(tenant_token),
            "correlation_id": get_correlation_id(),
            "signature_skipped": signature.skipped,
            "payload_size": len(raw_body),
        },
    )

    result = await processor.process(tenant_token, payload)
    return result.as_response()


router.include_router(receive_router)

"""Verificação de webhooks por tenant.

- Handshake GET: compara `hub.verify_token` com o verify token configurado
  no provider de mensageria do tenant.
- POST: valida `X-Hub-Signature-256` com o app secret do tenant, quando
  configurado.

Falha fechada: qualquer erro de resolução vira "não verificado" e nunca
propaga exceção para a rota.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from api.connectors.whatsapp.signature import SignatureResult, verify_meta_signature
from api.connectors.whatsapp.webhook.verify import (
    WebhookChallengeError,
    verify_webhook_challenge,
)
from app.domain.errors import DomainError, NotFoundError
from config.logging import mask_identifier

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.domain.providers import TenantProviderSetting
    from app.protocols.tenant_directory import TenantDirectoryProtocol
    from app.services.provider_registry import ProviderRegistry
    from config.settings import WhatsAppSettings

logger = logging.getLogger(__name__)


class WebhookVerifier:
    """Verifica handshakes e assinaturas de webhooks de um tenant."""

    def __init__(
        self,
        *,
        tenant_directory: TenantDirectoryProtocol,
        registry: ProviderRegistry,
        settings: WhatsAppSettings,
    ) -> None:
        self._tenants = tenant_directory
        self._registry = registry
        self._settings = settings

    async def verify(
        self,
        tenant_token: str,
        mode: str | None,
        challenge: str | None,
        verify_token: str | None,
    ) -> bool:
        """Retorna True somente se o handshake confere com a configuração do tenant."""
        setting = await self._load_setting(tenant_token)
        if setting is None:
            return False

        try:
            verify_webhook_challenge(
                hub_mode=mode,
                hub_verify_token=verify_token,
                hub_challenge=challenge,
                expected_token=setting.get_value(self._settings.verify_token_field),
            )
        except WebhookChallengeError as exc:
            logger.warning(
                "webhook_verification_failed",
                extra={"tenant_token": mask_identifier(tenant_token), "reason": str(exc)},
            )
            return False

        logger.info(
            "webhook_verified",
            extra={"tenant_id": setting.tenant_id, "provider_key": setting.provider_key},
        )
        return True

    async def verify_signature(
        self,
        tenant_token: str,
        raw_body: bytes,
        headers: Mapping[str, str],
    ) -> SignatureResult:
        """Valida a assinatura do POST contra o app secret do tenant.

        - sem app secret configurado: validação pulada
        - tenant/provider não resolvidos: pulada; o processador rejeita o
          evento ao resolver o tenant
        - erro de infraestrutura: inválida (falha fechada)
        """
        try:
            setting = await self._resolve_setting(tenant_token)
        except DomainError:
            return SignatureResult(valid=True, skipped=True, error="tenant_unresolved")
        except Exception as exc:
            logger.error(
                "webhook_verifier_store_error",
                extra={"operation": "signature", "error_type": type(exc).__name__},
            )
            return SignatureResult(valid=False, error="verifier_unavailable")
        secret = setting.get_value(self._settings.app_secret_field)
        return verify_meta_signature(raw_body, headers, secret or None)

    async def _load_setting(self, tenant_token: str) -> TenantProviderSetting | None:
        try:
            return await self._resolve_setting(tenant_token)
        except DomainError as exc:
            logger.warning(
                "webhook_provider_unavailable",
                extra={"tenant_token": mask_identifier(tenant_token), "error_kind": exc.kind.value},
            )
        except Exception as exc:
            logger.error(
                "webhook_verifier_store_error",
                extra={"operation": "verify", "error_type": type(exc).__name__},
            )
        return None

    async def _resolve_setting(self, tenant_token: str) -> TenantProviderSetting:
        """Token -> tenant -> configuração habilitada do provider de mensageria.

        Raises:
            NotFoundError: token desconhecido ou provider não configurado
            ProviderDisabledError: configuração desabilitada
        """
        tenant_id = await self._tenants.resolve(tenant_token) if tenant_token else None
        if tenant_id is None:
            raise NotFoundError("tenant não encontrado")
        return await self._registry.get_enabled_setting(tenant_id, self._settings.provider_key)

"""Settings do canal de webhooks WhatsApp (Meta Cloud API).

Os segredos (verify token, app secret) NÃO vêm de env: são campos da
configuração do provider de mensageria de cada tenant. Aqui ficam apenas
nomes de campos, timeouts e política de retry do dispatch.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

DEFAULT_MESSAGING_PROVIDER_KEY = "meta-whatsapp"


@dataclass(frozen=True)
class WhatsAppSettings:
    """Configurações do processamento de webhooks WhatsApp.

    Attributes:
        provider_key: Chave do provider de mensageria no catálogo
        verify_token_field: Campo da config do tenant com o verify token
        app_secret_field: Campo da config do tenant com o app secret (HMAC)
        dispatch_timeout_seconds: Timeout de cada tentativa de dispatch
        dispatch_retries: Retentativas síncronas após falha transitória
    """

    provider_key: str = DEFAULT_MESSAGING_PROVIDER_KEY
    verify_token_field: str = "verify_token"
    app_secret_field: str = "app_secret"
    dispatch_timeout_seconds: float = 10.0
    dispatch_retries: int = 1

    def validate(self) -> list[str]:
        """Valida configurações mínimas.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if not self.provider_key:
            errors.append("WHATSAPP_PROVIDER_KEY não pode ser vazio")

        if not self.verify_token_field:
            errors.append("WHATSAPP_VERIFY_TOKEN_FIELD não pode ser vazio")

        if self.dispatch_timeout_seconds <= 0:
            errors.append("WHATSAPP_DISPATCH_TIMEOUT_SECONDS deve ser > 0")

        if self.dispatch_retries < 0:
            errors.append("WHATSAPP_DISPATCH_RETRIES deve ser >= 0")

        return errors


def _load_from_env() -> WhatsAppSettings:
    return WhatsAppSettings(
        provider_key=os.getenv("WHATSAPP_PROVIDER_KEY", DEFAULT_MESSAGING_PROVIDER_KEY),
        verify_token_field=os.getenv("WHATSAPP_VERIFY_TOKEN_FIELD", "verify_token"),
        app_secret_field=os.getenv("WHATSAPP_APP_SECRET_FIELD", "app_secret"),
        dispatch_timeout_seconds=float(
            os.getenv("WHATSAPP_DISPATCH_TIMEOUT_SECONDS", "10")
        ),
        dispatch_retries=int(os.getenv("WHATSAPP_DISPATCH_RETRIES", "1")),
    )


@lru_cache(maxsize=1)
def get_whatsapp_settings() -> WhatsAppSettings:
    """Retorna instância cacheada de WhatsAppSettings."""
    return _load_from_env()

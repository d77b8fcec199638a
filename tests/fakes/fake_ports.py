"""Fakes das portas usadas pelos testes de serviços e use cases."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from typing import Any

from app.domain.errors import TransientDispatchError
from app.domain.providers import ProviderDefinition, FieldSpec, TenantProviderSetting

WHATSAPP_DEFINITION = ProviderDefinition(
    key="meta-whatsapp",
    category="messaging",
    display_name="WhatsApp Cloud API",
    required_fields=(
        FieldSpec("phone_number_id"),
        FieldSpec("access_token", secret=True),
        FieldSpec("verify_token", secret=True),
    ),
    optional_fields=(FieldSpec("app_secret", required=False, secret=True),),
)

OPENAI_DEFINITION = ProviderDefinition(
    key="openai",
    category="ai",
    display_name="OpenAI",
    required_fields=(FieldSpec("api_key", secret=True),),
)

CATALOG = {
    WHATSAPP_DEFINITION.key: WHATSAPP_DEFINITION,
    OPENAI_DEFINITION.key: OPENAI_DEFINITION,
}


def whatsapp_setting(
    tenant_id: str = "tenant-a",
    *,
    enabled: bool = True,
    app_secret: str | None = None,
    verify_token: str = "verify-me",
) -> TenantProviderSetting:
    values: dict[str, Any] = {
        "phone_number_id": "1234567890",
        "access_token": "EAAG-secret-token",
        "verify_token": verify_token,
    }
    if app_secret is not None:
        values["app_secret"] = app_secret
    return TenantProviderSetting(
        tenant_id=tenant_id,
        provider_key="meta-whatsapp",
        config_values=values,
        enabled=enabled,
    )


class FakeClock:
    """Relógio controlável para stores com TTL."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class ScriptedDispatcher:
    """Dispatcher que executa um roteiro de falhas antes de aceitar.

    Cada item de `script` é uma exceção a levantar, "hang" para bloquear
    até o timeout ou None para uma chamada bem-sucedida; esgotado o
    roteiro, as chamadas têm sucesso.
    """

    def __init__(self, script: list[Any] | None = None) -> None:
        self.script = list(script or [])
        self.messages: list[tuple[str, Any]] = []
        self.statuses: list[tuple[str, Any]] = []
        self.calls = 0

    async def _step(self) -> None:
        self.calls += 1
        if not self.script:
            return
        action = self.script.pop(0)
        if action == "hang":
            await asyncio.sleep(3600)
        if isinstance(action, BaseException):
            raise action

    async def dispatch_message(
        self, *, tenant_id: str, provider_key: str, message: Any, correlation_id: str = ""
    ) -> None:
        await self._step()
        self.messages.append((tenant_id, message))

    async def notify_status(
        self, *, tenant_id: str, provider_key: str, status: Any, correlation_id: str = ""
    ) -> None:
        await self._step()
        self.statuses.append((tenant_id, status))


def transient(message: str = "workflow_engine_unavailable") -> TransientDispatchError:
    return TransientDispatchError(message)

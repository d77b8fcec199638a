"""Bootstrap da aplicação — inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings e
conecta implementações concretas aos protocolos.

Uso:
    from app.bootstrap import initialize_app, get_webhook_processor

    # Na inicialização do serviço
    initialize_app()

    processor = get_webhook_processor()
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import (
    get_base_settings,
    get_dedupe_settings,
    get_provider_settings,
    get_tenancy_settings,
    get_whatsapp_settings,
    get_workflow_engine_settings,
)

if TYPE_CHECKING:
    from app.infra.workflow import MemoryWorkflowEngine, WorkflowEngineClient
    from app.protocols.dedupe import DedupeStoreProtocol
    from app.protocols.provider_settings_store import ProviderSettingsStoreProtocol
    from app.protocols.tenant_directory import TenantDirectoryProtocol
    from app.protocols.webhook_parser import WebhookPayloadParserProtocol
    from app.services.provider_registry import ProviderRegistry
    from app.services.variable_engine import VariableResolutionEngine
    from app.services.webhook_verifier import WebhookVerifier
    from app.use_cases.webhooks import WebhookProcessor

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Inicializa a aplicação.

    Deve ser chamada uma vez no início do serviço. Configura logging
    estruturado JSON com correlation_id.
    """
    base = get_base_settings()
    configure_logging(
        level=base.log_level,
        service_name=base.service_name,
        correlation_id_getter=get_correlation_id,
    )


def initialize_test_app() -> None:
    """Inicializa a aplicação para testes (logging em DEBUG)."""
    configure_logging(
        level="DEBUG",
        service_name=f"{get_base_settings().service_name}_test",
        correlation_id_getter=get_correlation_id,
    )


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` mantém alerta sem bloquear execução local.
    """
    base = get_base_settings()
    errors: list[str] = []

    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"dedupe: {error}" for error in get_dedupe_settings().validate(base))
    errors.extend(f"providers: {error}" for error in get_provider_settings().validate(base))
    errors.extend(f"tenancy: {error}" for error in get_tenancy_settings().validate(base))
    errors.extend(f"whatsapp: {error}" for error in get_whatsapp_settings().validate())
    errors.extend(
        f"workflow_engine: {error}" for error in get_workflow_engine_settings().validate(base)
    )

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": base.environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": base.environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if base.strict_validation:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {base.environment}:\n{details}")


# ──────────────────────────────────────────────────────────────────────────────
# Getters (lazy initialization com cache)
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def get_dedupe_store() -> DedupeStoreProtocol:
    from app.bootstrap.dependencies import create_dedupe_store
    return create_dedupe_store()


@lru_cache(maxsize=1)
def get_provider_settings_store() -> ProviderSettingsStoreProtocol:
    from app.bootstrap.dependencies import create_provider_settings_store
    return create_provider_settings_store()


@lru_cache(maxsize=1)
def get_tenant_directory() -> TenantDirectoryProtocol:
    from app.bootstrap.dependencies import create_tenant_directory
    return create_tenant_directory()


@lru_cache(maxsize=1)
def get_workflow_engine() -> WorkflowEngineClient | MemoryWorkflowEngine:
    """Adapter do workflow engine (dispatcher + snapshots de execução)."""
    from app.bootstrap.dependencies import create_workflow_engine
    return create_workflow_engine()


@lru_cache(maxsize=1)
def get_webhook_parser() -> WebhookPayloadParserProtocol:
    from app.bootstrap.dependencies import create_webhook_parser
    return create_webhook_parser()


@lru_cache(maxsize=1)
def get_provider_registry() -> ProviderRegistry:
    """Registro de providers (singleton; catálogo carregado uma vez)."""
    from app.bootstrap.dependencies import create_provider_registry
    return create_provider_registry(get_provider_settings_store())


@lru_cache(maxsize=1)
def get_webhook_verifier() -> WebhookVerifier:
    from app.bootstrap.dependencies import create_webhook_verifier
    return create_webhook_verifier(get_tenant_directory(), get_provider_registry())


@lru_cache(maxsize=1)
def get_webhook_processor() -> WebhookProcessor:
    """Processador de webhooks (singleton)."""
    from app.bootstrap.dependencies import create_webhook_processor
    return create_webhook_processor(
        parser=get_webhook_parser(),
        dedupe=get_dedupe_store(),
        tenant_directory=get_tenant_directory(),
        registry=get_provider_registry(),
        dispatcher=get_workflow_engine(),
    )


@lru_cache(maxsize=1)
def get_variable_engine() -> VariableResolutionEngine:
    from app.bootstrap.dependencies import create_variable_engine
    return create_variable_engine(get_workflow_engine())


def reset_dependencies() -> None:
    """Limpa os singletons (testes e shutdown)."""
    for getter in (
        get_dedupe_store,
        get_provider_settings_store,
        get_tenant_directory,
        get_workflow_engine,
        get_webhook_parser,
        get_provider_registry,
        get_webhook_verifier,
        get_webhook_processor,
        get_variable_engine,
    ):
        getter.cache_clear()


__all__ = [
    "get_dedupe_store",
    "get_provider_registry",
    "get_provider_settings_store",
    "get_tenant_directory",
    "get_variable_engine",
    "get_webhook_parser",
    "get_webhook_processor",
    "get_webhook_verifier",
    "get_workflow_engine",
    "initialize_app",
    "initialize_test_app",
    "reset_dependencies",
    "validate_runtime_settings",
]

"""Factories — criação de implementações concretas a partir das settings.

Cada factory escolhe o backend (memory|redis|http) conforme a env. Os
singletons ficam em `app.bootstrap` (lru_cache).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from api.normalizers.whatsapp import WhatsAppWebhookParser
from app.bootstrap.clients import create_async_redis_client
from app.infra.catalog import load_provider_catalog
from app.infra.stores import (
    MemoryDedupeStore,
    MemoryProviderSettingsStore,
    MemoryTenantDirectory,
    RedisDedupeStore,
    RedisProviderSettingsStore,
    RedisTenantDirectory,
)
from app.infra.workflow import MemoryWorkflowEngine
from app.infra.workflow.http_client import create_workflow_engine_client
from app.services.provider_registry import ProviderRegistry
from app.services.variable_engine import VariableResolutionEngine
from app.services.webhook_verifier import WebhookVerifier
from app.use_cases.webhooks import WebhookProcessor, WebhookProcessorConfig
from config.settings import (
    get_base_settings,
    get_dedupe_settings,
    get_provider_settings,
    get_tenancy_settings,
    get_whatsapp_settings,
    get_workflow_engine_settings,
)

if TYPE_CHECKING:
    from app.infra.workflow import WorkflowEngineClient
    from app.protocols.dedupe import DedupeStoreProtocol
    from app.protocols.provider_settings_store import ProviderSettingsStoreProtocol
    from app.protocols.tenant_directory import TenantDirectoryProtocol
    from app.protocols.webhook_parser import WebhookPayloadParserProtocol
    from app.protocols.workflow_engine import (
        ExecutionContextProviderProtocol,
        WorkflowDispatcherProtocol,
    )

logger = logging.getLogger(__name__)


def _warn_memory_backend(component: str) -> None:
    environment = get_base_settings().environment
    if environment != "development":
        logger.warning(
            "memory_store_in_non_dev",
            extra={"component": component, "backend": "memory", "environment": environment},
        )


# ──────────────────────────────────────────────────────────────────────────────
# Stores
# ──────────────────────────────────────────────────────────────────────────────


def create_dedupe_store() -> DedupeStoreProtocol:
    """Cria store de dedupe (DEDUPE_BACKEND: memory|redis)."""
    backend = get_dedupe_settings().backend

    if backend == "redis":
        store: DedupeStoreProtocol = RedisDedupeStore(create_async_redis_client())
    else:
        _warn_memory_backend("dedupe_store")
        store = MemoryDedupeStore()

    logger.info("dedupe_store_created", extra={"backend": backend})
    return store


def create_provider_settings_store() -> ProviderSettingsStoreProtocol:
    """Cria store de configurações de providers (PROVIDER_SETTINGS_BACKEND)."""
    backend = get_provider_settings().settings_backend

    if backend == "redis":
        store: ProviderSettingsStoreProtocol = RedisProviderSettingsStore(
            create_async_redis_client()
        )
    else:
        _warn_memory_backend("provider_settings_store")
        store = MemoryProviderSettingsStore()

    logger.info("provider_settings_store_created", extra={"backend": backend})
    return store


def create_tenant_directory() -> TenantDirectoryProtocol:
    """Cria diretório de tenants (TENANT_DIRECTORY_BACKEND).

    O backend em memória é semeado com TENANT_TOKENS.
    """
    tenancy = get_tenancy_settings()

    if tenancy.directory_backend == "redis":
        directory: TenantDirectoryProtocol = RedisTenantDirectory(create_async_redis_client())
    else:
        _warn_memory_backend("tenant_directory")
        directory = MemoryTenantDirectory(tenancy.static_tokens)

    logger.info(
        "tenant_directory_created",
        extra={
            "backend": tenancy.directory_backend,
            "static_tokens": len(tenancy.static_tokens),
        },
    )
    return directory


# ──────────────────────────────────────────────────────────────────────────────
# Workflow engine
# ──────────────────────────────────────────────────────────────────────────────


def create_workflow_engine() -> WorkflowEngineClient | MemoryWorkflowEngine:
    """Cria adapter do workflow engine (WORKFLOW_ENGINE_BACKEND: memory|http).

    O mesmo objeto atende dispatch de eventos e leitura de snapshots.
    """
    settings = get_workflow_engine_settings()
    if settings.backend == "http":
        engine: WorkflowEngineClient | MemoryWorkflowEngine = create_workflow_engine_client(
            settings
        )
    else:
        _warn_memory_backend("workflow_engine")
        engine = MemoryWorkflowEngine()

    logger.info("workflow_engine_created", extra={"backend": settings.backend})
    return engine


# ──────────────────────────────────────────────────────────────────────────────
# Serviços
# ──────────────────────────────────────────────────────────────────────────────


def create_provider_registry(store: ProviderSettingsStoreProtocol) -> ProviderRegistry:
    """Carrega o catálogo e monta o registro de providers."""
    catalog = load_provider_catalog(get_provider_settings().catalog_path)
    logger.info("provider_catalog_loaded", extra={"providers": len(catalog)})
    return ProviderRegistry(catalog, store)


def create_webhook_verifier(
    tenant_directory: TenantDirectoryProtocol,
    registry: ProviderRegistry,
) -> WebhookVerifier:
    return WebhookVerifier(
        tenant_directory=tenant_directory,
        registry=registry,
        settings=get_whatsapp_settings(),
    )


def create_webhook_processor(
    *,
    parser: WebhookPayloadParserProtocol,
    dedupe: DedupeStoreProtocol,
    tenant_directory: TenantDirectoryProtocol,
    registry: ProviderRegistry,
    dispatcher: WorkflowDispatcherProtocol,
) -> WebhookProcessor:
    """Monta o processador com parâmetros de dedupe e dispatch da env."""
    dedupe_settings = get_dedupe_settings()
    whatsapp = get_whatsapp_settings()
    config = WebhookProcessorConfig(
        provider_key=whatsapp.provider_key,
        dedupe_ttl_seconds=dedupe_settings.ttl_seconds,
        pending_wait_seconds=dedupe_settings.pending_wait_seconds,
        pending_poll_interval_seconds=dedupe_settings.pending_poll_interval_seconds,
        dispatch_timeout_seconds=whatsapp.dispatch_timeout_seconds,
        dispatch_retries=whatsapp.dispatch_retries,
    )
    return WebhookProcessor(
        parser=parser,
        dedupe=dedupe,
        tenant_directory=tenant_directory,
        registry=registry,
        dispatcher=dispatcher,
        config=config,
    )


def create_variable_engine(
    execution_provider: ExecutionContextProviderProtocol,
) -> VariableResolutionEngine:
    return VariableResolutionEngine(
        execution_provider,
        lookup_timeout_seconds=get_workflow_engine_settings().variables_timeout_seconds,
    )


def create_webhook_parser() -> WebhookPayloadParserProtocol:
    return WhatsAppWebhookParser()

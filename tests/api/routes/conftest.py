"""Fixtures das rotas: aplicação FastAPI com serviços em memória."""

from __future__ import annotations

from dataclasses import dataclass

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.normalizers.whatsapp import WhatsAppWebhookParser
from api.routes import create_api_router, install_error_handlers
from app.bootstrap import (
    get_provider_registry,
    get_variable_engine,
    get_webhook_processor,
    get_webhook_verifier,
)
from app.infra.stores import (
    MemoryDedupeStore,
    MemoryProviderSettingsStore,
    MemoryTenantDirectory,
)
from app.infra.workflow import MemoryWorkflowEngine
from app.services.provider_registry import ProviderRegistry
from app.services.variable_engine import VariableResolutionEngine
from app.services.webhook_verifier import WebhookVerifier
from app.use_cases.webhooks import WebhookProcessor, WebhookProcessorConfig
from config.settings import WhatsAppSettings
from tests.fakes.fake_ports import CATALOG


@dataclass
class Services:
    store: MemoryProviderSettingsStore
    registry: ProviderRegistry
    engine: MemoryWorkflowEngine
    dedupe: MemoryDedupeStore


@pytest.fixture
def services() -> Services:
    store = MemoryProviderSettingsStore()
    return Services(
        store=store,
        registry=ProviderRegistry(CATALOG, store),
        engine=MemoryWorkflowEngine({"exec-1": {"userName": "Ana", "amount": 10.5}}),
        dedupe=MemoryDedupeStore(),
    )


@pytest.fixture
def client(services: Services) -> TestClient:
    directory = MemoryTenantDirectory({"tok-a": "tenant-a"})
    verifier = WebhookVerifier(
        tenant_directory=directory, registry=services.registry, settings=WhatsAppSettings()
    )
    processor = WebhookProcessor(
        parser=WhatsAppWebhookParser(),
        dedupe=services.dedupe,
        tenant_directory=directory,
        registry=services.registry,
        dispatcher=services.engine,
        config=WebhookProcessorConfig(dispatch_timeout_seconds=1.0),
    )

    app = FastAPI()
    install_error_handlers(app)
    app.include_router(create_api_router())
    app.dependency_overrides[get_provider_registry] = lambda: services.registry
    app.dependency_overrides[get_webhook_verifier] = lambda: verifier
    app.dependency_overrides[get_webhook_processor] = lambda: processor
    app.dependency_overrides[get_variable_engine] = lambda: VariableResolutionEngine(
        services.engine, lookup_timeout_seconds=1.0
    )
    return TestClient(app, raise_server_exceptions=False)

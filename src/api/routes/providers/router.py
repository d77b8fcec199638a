"""Endpoints do registro de providers.

- GET  /providers/definitions?category=      catálogo global
- GET  /providers/tenant?category=           configurações do tenant
- GET  /providers/tenant/{provider_key}      configuração de um provider
- POST /providers/tenant/{provider_key}      cria/substitui configuração

Rotas de tenant exigem a identidade do tenant (401 quando ausente).
Campos secretos nunca saem em claro nas respostas.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from api.routes.providers.schemas import (
    ProviderItemResponse,
    ProviderListResponse,
    UpsertProviderSettingRequest,
)
from api.routes.tenant import require_current_tenant
from app.bootstrap import get_provider_registry
from app.services.provider_registry import ProviderRegistry

router = APIRouter()


@router.get("/definitions", response_model=ProviderListResponse)
async def list_definitions(
    category: str | None = None,
    registry: ProviderRegistry = Depends(get_provider_registry),
) -> ProviderListResponse:
    definitions = registry.list_definitions(category)
    return ProviderListResponse(data=[definition.to_dict() for definition in definitions])


@router.get("/tenant", response_model=ProviderListResponse)
async def list_tenant_settings(
    category: str | None = None,
    tenant_id: str = Depends(require_current_tenant),
    registry: ProviderRegistry = Depends(get_provider_registry),
) -> ProviderListResponse:
    settings = await registry.list_tenant_settings(tenant_id, category)
    return ProviderListResponse(
        data=[setting.masked(registry.secret_fields(setting.provider_key)) for setting in settings]
    )


@router.get("/tenant/{provider_key}", response_model=ProviderItemResponse)
async def get_tenant_setting(
    provider_key: str,
    tenant_id: str = Depends(require_current_tenant),
    registry: ProviderRegistry = Depends(get_provider_registry),
) -> ProviderItemResponse:
    registry.get_definition(provider_key)
    setting = await registry.get_tenant_setting(tenant_id, provider_key)
    return ProviderItemResponse(data=setting.masked(registry.secret_fields(provider_key)))


@router.post("/tenant/{provider_key}", response_model=ProviderItemResponse)
async def upsert_tenant_setting(
    provider_key: str,
    body: UpsertProviderSettingRequest,
    tenant_id: str = Depends(require_current_tenant),
    registry: ProviderRegistry = Depends(get_provider_registry),
) -> ProviderItemResponse:
    setting = await registry.upsert_tenant_setting(
        tenant_id, provider_key, body.config_values, enabled=body.enabled
    )
    return ProviderItemResponse(data=setting.masked(registry.secret_fields(provider_key)))

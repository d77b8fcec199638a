"""Identidade do tenant para as APIs de configuração.

O gateway de autenticação injeta o tenant em um header confiável
(`TENANT_HEADER`, padrão `X-Tenant-Id`). Middlewares que já validaram um
token podem, alternativamente, publicar `request.state.claims["tenant_id"]`.
"""

from __future__ import annotations

from fastapi import Request

from app.domain.errors import AuthFailureError
from config.settings import get_tenancy_settings


def resolve_current_tenant(request: Request) -> str | None:
    """Tenant autenticado da requisição, ou None quando ausente."""
    claims = getattr(request.state, "claims", None)
    if isinstance(claims, dict):
        tenant_id = claims.get("tenant_id")
        if isinstance(tenant_id, str) and tenant_id.strip():
            return tenant_id.strip()

    header_value = request.headers.get(get_tenancy_settings().tenant_header, "")
    return header_value.strip() or None


def require_current_tenant(request: Request) -> str:
    """Dependency FastAPI: tenant obrigatório (401 quando ausente)."""
    tenant_id = resolve_current_tenant(request)
    if tenant_id is None:
        raise AuthFailureError("tenant não identificado")
    return tenant_id

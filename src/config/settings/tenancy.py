"""Settings de resolução de tenants.

- Diretório de tenants: mapeia token do webhook -> tenant_id
- Header confiável com o tenant autenticado pelo gateway
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

TenantDirectoryBackend = Literal["memory", "redis"]


@dataclass(frozen=True)
class TenancySettings:
    """Configurações de tenancy.

    Attributes:
        directory_backend: Backend do diretório de tenants (memory|redis)
        static_tokens: Mapa token -> tenant_id para o diretório em memória
            (env TENANT_TOKENS no formato "tok1:tenantA,tok2:tenantB")
        tenant_header: Header injetado pelo gateway de autenticação
    """

    directory_backend: TenantDirectoryBackend = "memory"
    static_tokens: dict[str, str] = field(default_factory=dict)
    tenant_header: str = "X-Tenant-Id"

    def validate(self, base: BaseSettings) -> list[str]:
        errors: list[str] = []

        if self.directory_backend not in ("memory", "redis"):
            errors.append(f"TENANT_DIRECTORY_BACKEND inválido: {self.directory_backend}")

        if self.directory_backend == "redis" and not base.redis_url:
            errors.append("TENANT_DIRECTORY_BACKEND=redis requer REDIS_URL configurado")

        if self.directory_backend == "memory" and not base.is_development:
            errors.append("TENANT_DIRECTORY_BACKEND=memory proibido em staging/production")

        if not self.tenant_header:
            errors.append("TENANT_HEADER não pode ser vazio")

        return errors


def parse_static_tokens(raw: str) -> dict[str, str]:
    """Converte "tok1:tenantA,tok2:tenantB" em dict (entradas inválidas ignoradas)."""
    tokens: dict[str, str] = {}
    for item in raw.split(","):
        token, sep, tenant_id = item.strip().partition(":")
        if sep and token.strip() and tenant_id.strip():
            tokens[token.strip()] = tenant_id.strip()
    return tokens


def _load_from_env() -> TenancySettings:
    backend_str = os.getenv("TENANT_DIRECTORY_BACKEND", "memory").lower()
    backend: TenantDirectoryBackend = backend_str if backend_str in ("memory", "redis") else "memory"
    return TenancySettings(
        directory_backend=backend,
        static_tokens=parse_static_tokens(os.getenv("TENANT_TOKENS", "")),
        tenant_header=os.getenv("TENANT_HEADER", "X-Tenant-Id"),
    )


@lru_cache(maxsize=1)
def get_tenancy_settings() -> TenancySettings:
    """Retorna instância cacheada de TenancySettings."""
    return _load_from_env()

"""Protocolo do diretório de tenants (token do webhook -> tenant_id)."""

from __future__ import annotations

from typing import Protocol


class TenantDirectoryProtocol(Protocol):
    """Resolve o token opaco da URL de callback para o tenant dono."""

    async def resolve(self, tenant_token: str) -> str | None: ...

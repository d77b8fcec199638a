"""Settings do registro de providers de integração."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

ProviderSettingsBackend = Literal["memory", "redis"]

# Catálogo empacotado junto do código
DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent.parent / "providers" / "catalog.yaml"


@dataclass(frozen=True)
class ProviderSettings:
    """Configurações do catálogo e do store de configurações por tenant.

    Attributes:
        catalog_path: Caminho do YAML com as definições de providers
        settings_backend: Backend do store de configurações (memory|redis)
    """

    catalog_path: Path = DEFAULT_CATALOG_PATH
    settings_backend: ProviderSettingsBackend = "memory"

    def validate(self, base: BaseSettings) -> list[str]:
        errors: list[str] = []

        if not self.catalog_path.is_file():
            errors.append(f"PROVIDER_CATALOG_PATH não encontrado: {self.catalog_path}")

        if self.settings_backend not in ("memory", "redis"):
            errors.append(f"PROVIDER_SETTINGS_BACKEND inválido: {self.settings_backend}")

        if self.settings_backend == "memory" and not base.is_development:
            errors.append("PROVIDER_SETTINGS_BACKEND=memory proibido em staging/production")

        if self.settings_backend == "redis" and not base.redis_url:
            errors.append("PROVIDER_SETTINGS_BACKEND=redis requer REDIS_URL configurado")

        return errors


def _load_from_env() -> ProviderSettings:
    backend_str = os.getenv("PROVIDER_SETTINGS_BACKEND", "memory").lower()
    backend: ProviderSettingsBackend = backend_str if backend_str in ("memory", "redis") else "memory"
    catalog_env = os.getenv("PROVIDER_CATALOG_PATH", "")
    return ProviderSettings(
        catalog_path=Path(catalog_env) if catalog_env else DEFAULT_CATALOG_PATH,
        settings_backend=backend,
    )


@lru_cache(maxsize=1)
def get_provider_settings() -> ProviderSettings:
    """Retorna instância cacheada de ProviderSettings."""
    return _load_from_env()

"""Loader do catálogo de providers (YAML versionado no repositório).

O catálogo é lido uma vez e exposto como mapping somente leitura
(`MappingProxyType`); definições são dataclasses congeladas.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from app.domain.providers import FieldSpec, ProviderDefinition


class ProviderCatalogError(RuntimeError):
    """Erro ao carregar o catálogo de providers."""


def _parse_fields(raw_fields: Any, *, required: bool, provider_key: str) -> tuple[FieldSpec, ...]:
    if raw_fields is None:
        return ()
    if not isinstance(raw_fields, list):
        raise ProviderCatalogError(f"Campos inválidos no provider {provider_key}")
    specs: list[FieldSpec] = []
    for raw in raw_fields:
        if isinstance(raw, str):
            raw = {"name": raw}
        if not isinstance(raw, dict) or not raw.get("name"):
            raise ProviderCatalogError(f"Campo sem nome no provider {provider_key}")
        specs.append(
            FieldSpec(
                name=str(raw["name"]),
                required=required,
                secret=bool(raw.get("secret", False)),
                description=str(raw.get("description", "")),
            )
        )
    return tuple(specs)


def _parse_definition(raw: dict[str, Any], schema_version: int) -> ProviderDefinition:
    key = raw.get("key")
    if not key:
        raise ProviderCatalogError("Provider sem key no catálogo")
    if not raw.get("category"):
        raise ProviderCatalogError(f"Provider {key} sem category")
    default_config = raw.get("default_config") or {}
    if not isinstance(default_config, dict):
        raise ProviderCatalogError(f"default_config inválido no provider {key}")
    return ProviderDefinition(
        key=str(key),
        category=str(raw["category"]),
        display_name=str(raw.get("display_name") or key),
        required_fields=_parse_fields(raw.get("required_fields"), required=True, provider_key=key),
        optional_fields=_parse_fields(raw.get("optional_fields"), required=False, provider_key=key),
        schema_version=int(raw.get("schema_version", schema_version)),
        icon=str(raw.get("icon", "")),
        auth_type=str(raw.get("auth_type", "apiKey")),
        default_api_url=str(raw.get("default_api_url") or ""),
        default_model=raw.get("default_model"),
        supported_models=tuple(str(m) for m in raw.get("supported_models") or ()),
        default_config=tuple(sorted(default_config.items())),
    )


def parse_catalog(data: Any) -> MappingProxyType[str, ProviderDefinition]:
    """Converte o conteúdo YAML em mapping key -> ProviderDefinition.

    Raises:
        ProviderCatalogError: estrutura inválida ou key duplicada
    """
    if not isinstance(data, dict) or not isinstance(data.get("providers"), list):
        raise ProviderCatalogError("Catálogo deve conter a lista `providers`")
    schema_version = int(data.get("schema_version", 1))
    definitions: dict[str, ProviderDefinition] = {}
    for raw in data["providers"]:
        if not isinstance(raw, dict):
            raise ProviderCatalogError("Entrada de provider inválida")
        definition = _parse_definition(raw, schema_version)
        if definition.key in definitions:
            raise ProviderCatalogError(f"Provider duplicado: {definition.key}")
        definitions[definition.key] = definition
    return MappingProxyType(definitions)


@lru_cache(maxsize=8)
def load_provider_catalog(path: Path) -> MappingProxyType[str, ProviderDefinition]:
    """Lê e valida o catálogo YAML (cacheado por caminho)."""
    if not path.is_file():
        raise ProviderCatalogError(f"Catálogo de providers não encontrado: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ProviderCatalogError(f"YAML inválido em {path}: {exc}") from exc
    return parse_catalog(data)

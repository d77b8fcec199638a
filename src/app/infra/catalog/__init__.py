"""Catálogo de providers carregado de YAML."""

from app.infra.catalog.yaml_catalog import (
    ProviderCatalogError,
    load_provider_catalog,
    parse_catalog,
)

__all__ = ["ProviderCatalogError", "load_provider_catalog", "parse_catalog"]

"""Assets do catálogo de providers (catalog.yaml)."""

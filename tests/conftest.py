"""Configuração do pytest para o projeto hookflow."""

import sys
from pathlib import Path

import pytest

# Adiciona src/ ao PYTHONPATH para permitir imports absolutos
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def _clear_cached_settings():
    """Settings e singletons são lru_cache: isola env entre testes."""
    from app.bootstrap import reset_dependencies
    from app.bootstrap.clients import create_async_redis_client
    from config.settings import (
        get_base_settings,
        get_dedupe_settings,
        get_provider_settings,
        get_tenancy_settings,
        get_whatsapp_settings,
        get_workflow_engine_settings,
    )

    getters = (
        get_base_settings,
        get_dedupe_settings,
        get_provider_settings,
        get_tenancy_settings,
        get_whatsapp_settings,
        get_workflow_engine_settings,
        create_async_redis_client,
    )
    for getter in getters:
        getter.cache_clear()
    reset_dependencies()
    yield
    for getter in getters:
        getter.cache_clear()
    reset_dependencies()

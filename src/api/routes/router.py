"""Agregador de rotas — registra todos os routers.

Uso:
    from api.routes import create_api_router

    app = FastAPI()
    app.include_router(create_api_router())
"""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.health.router import router as health_router
from api.routes.providers.router import router as providers_router
from api.routes.variables.router import router as variables_router
from api.routes.webhooks.router import router as webhooks_router


def create_api_router() -> APIRouter:
    """Cria router principal com todos os sub-routers registrados.

    Returns:
        APIRouter configurado com todos os endpoints.
    """
    api_router = APIRouter()

    # Health checks (sem prefixo para /health e /ready na raiz)
    api_router.include_router(health_router, tags=["health"])

    api_router.include_router(webhooks_router, prefix="/webhooks", tags=["webhooks"])
    api_router.include_router(providers_router, prefix="/providers", tags=["providers"])
    api_router.include_router(variables_router, prefix="/variables", tags=["variables"])

    return api_router

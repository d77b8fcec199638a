"""Entrypoint da aplicação hookflow.

Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 8080

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

import asyncio
import contextlib
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.routes import create_api_router, install_error_handlers
from app.bootstrap import (
    get_dedupe_store,
    get_workflow_engine,
    initialize_app,
    reset_dependencies,
    validate_runtime_settings,
)
from app.bootstrap.clients import create_async_redis_client
from app.observability import (
    CORRELATION_ID_HEADER,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from app.use_cases.webhooks import run_dedupe_sweeper
from config.logging import get_logger
from config.settings import (
    get_base_settings,
    get_dedupe_settings,
    get_provider_settings,
    get_tenancy_settings,
)

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable

    from starlette.responses import Response

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)


def _redis_required() -> bool:
    return (
        get_dedupe_settings().backend == "redis"
        or get_provider_settings().settings_backend == "redis"
        or get_tenancy_settings().directory_backend == "redis"
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações
    - Cria cliente Redis quando algum backend o usa
    - Inicia a varredura periódica do dedupe

    Shutdown:
    - Cancela a varredura
    - Fecha workflow engine e Redis
    """
    service = get_base_settings().service_name
    logger.info("app_starting", extra={"service": service})
    validate_runtime_settings()
    app.state.redis_client = None

    if _redis_required():
        try:
            app.state.redis_client = create_async_redis_client()
        except Exception as exc:
            logger.warning("redis_client_not_ready", extra={"error_type": type(exc).__name__})

    sweeper = asyncio.create_task(
        run_dedupe_sweeper(get_dedupe_store(), get_dedupe_settings().sweep_interval_seconds),
        name="dedupe_sweeper",
    )

    yield

    logger.info("app_shutting_down", extra={"service": service})
    sweeper.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await sweeper

    if get_workflow_engine.cache_info().currsize:
        await get_workflow_engine().aclose()

    redis_client = getattr(app.state, "redis_client", None)
    if redis_client is not None:
        await redis_client.aclose()
        create_async_redis_client.cache_clear()
    reset_dependencies()


async def correlation_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Define o correlation_id da requisição e o devolve no header."""
    token = set_correlation_id(request.headers.get(CORRELATION_ID_HEADER))
    try:
        response = await call_next(request)
        response.headers[CORRELATION_ID_HEADER] = get_correlation_id()
        return response
    finally:
        reset_correlation_id(token)


def create_app() -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Returns:
        Aplicação FastAPI configurada.
    """
    base = get_base_settings()
    fastapi_app = FastAPI(
        title="hookflow",
        description="Ingestão de webhooks por tenant, registro de providers e variáveis",
        version="1.0.0",
        lifespan=lifespan,
        # Docs desabilitadas em produção
        docs_url=None if base.is_production else "/docs",
        redoc_url=None if base.is_production else "/redoc",
        openapi_url=None if base.is_production else "/openapi.json",
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    fastapi_app.middleware("http")(correlation_middleware)

    install_error_handlers(fastapi_app)
    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": base.service_name})

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta (desenvolvimento)."""
    import uvicorn

    logger.info("app_dev_server_starting")
    uvicorn.run(
        "app.app:app",
        host="0.0.0.0",
        port=8080,
        reload=True,
    )


if __name__ == "__main__":
    main()

"""Registro de métricas via structured logging.

As métricas saem como logs estruturados (`metric_type` no registro) e são
agregadas depois pelo backend de logs.

Métricas:
- Latência: tempo de execução por componente/operação
- Webhook outcome: contador por estado/detalhe do processamento
- Dedupe sweep: registros expirados removidos

Uso:
    start = time.perf_counter()
    ...
    record_latency("webhook_processor", "process", (time.perf_counter() - start) * 1000)
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "webhook_processor", "variable_engine")
        operation: Nome da operação (ex: "process", "resolve")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação para rastreamento
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "correlation_id": correlation_id,
        },
    )


def record_webhook_outcome(
    state: str,
    detail: str,
    success: bool,
    correlation_id: str | None = None,
) -> None:
    """Registra o resultado de um webhook processado.

    Args:
        state: accepted | rejected | duplicate
        detail: Detalhe do resultado (ex: "message_dispatched", "tenant_not_found")
        success: Valor de `success` devolvido ao chamador
        correlation_id: ID de correlação para rastreamento
    """
    logger.info(
        "metric_webhook_outcome",
        extra={
            "metric_type": "webhook_outcome",
            "component": "webhook_processor",
            "state": state,
            "detail": detail,
            "success": success,
            "correlation_id": correlation_id,
        },
    )


def record_dedupe_sweep(removed: int, latency_ms: float) -> None:
    """Registra uma execução da varredura de registros de dedupe expirados."""
    logger.info(
        "metric_dedupe_sweep",
        extra={
            "metric_type": "dedupe_sweep",
            "component": "dedupe_sweeper",
            "removed": removed,
            "latency_ms": round(latency_ms, 2),
        },
    )

"""Configuração centralizada de logging.

Instala um único handler JSON no root logger, com o filtro que injeta
`service` e `correlation_id`. Chamado uma vez pelo bootstrap.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import CorrelationIdFilter
from config.logging.formatters import create_json_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_SERVICE_NAME = "hookflow"

# Quantidade de caracteres preservados ao mascarar tokens/identidades
_MASK_VISIBLE_CHARS = 8


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    correlation_id_getter: Callable[[], str] | None = None,
) -> None:
    """Configura logging JSON estruturado para o serviço.

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Nome do serviço injetado em cada registro.
        correlation_id_getter: Função que retorna o correlation_id corrente
            (normalmente `app.observability.get_correlation_id`).

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(CorrelationIdFilter(service_name, correlation_id_getter))

    root = logging.getLogger()
    root.setLevel(level_upper)
    # Substitui handlers existentes (evita logs duplicados em reload)
    root.handlers = [handler]


def get_logger(name: str) -> logging.Logger:
    """Retorna logger do módulo; service/correlation_id vêm do filtro."""
    return logging.getLogger(name)


def mask_identifier(value: str | None) -> str:
    """Mascara tokens de webhook e chaves de dedupe para uso em logs.

    Exemplo:
        mask_identifier("tok_abcdef123456") -> "tok_abcd..."
    """
    if not value:
        return ""
    if len(value) <= _MASK_VISIBLE_CHARS:
        return value
    return value[:_MASK_VISIBLE_CHARS] + "..."

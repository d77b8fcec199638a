"""Logging estruturado (JSON) do hookflow.

Uso:
    from config.logging import configure_logging, get_logger

    configure_logging(level="INFO", service_name="hookflow")
    logger = get_logger(__name__)
    logger.info("webhook_processed", extra={"state": "accepted"})

Todo registro carrega: asctime, level, logger, message, service e
correlation_id. Payloads brutos e segredos de tenant nunca são logados.
"""

from config.logging.config import configure_logging, get_logger, mask_identifier
from config.logging.filters import CorrelationIdFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "CorrelationIdFilter",
    "configure_logging",
    "create_json_formatter",
    "get_logger",
    "mask_identifier",
]

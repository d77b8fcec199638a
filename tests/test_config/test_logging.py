"""Testes para config.logging.

Cobre: configure_logging, CorrelationIdFilter, create_json_formatter e
mask_identifier.
"""

from __future__ import annotations

import json
import logging

import pytest

from config.logging import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    CorrelationIdFilter,
    configure_logging,
    create_json_formatter,
    get_logger,
    mask_identifier,
)
from config.logging.config import DEFAULT_SERVICE_NAME, VALID_LOG_LEVELS


class TestConfigureLogging:
    """Testes para configure_logging."""

    @pytest.mark.parametrize("level", sorted(VALID_LOG_LEVELS))
    def test_configure_logging_levels(self, level: str) -> None:
        configure_logging(level=level.lower())
        assert logging.getLogger().level == getattr(logging, level)

    def test_configure_logging_invalid_level_raises(self) -> None:
        with pytest.raises(ValueError, match="Nível de log inválido"):
            configure_logging(level="INVALID")

    def test_configure_logging_replaces_handlers(self) -> None:
        root = logging.getLogger()
        root.handlers = [logging.NullHandler(), logging.NullHandler()]
        configure_logging()
        assert len(root.handlers) == 1
        assert any(isinstance(f, CorrelationIdFilter) for f in root.handlers[0].filters)

    def test_default_service_name(self) -> None:
        assert DEFAULT_SERVICE_NAME == "hookflow"

    def test_get_logger_returns_named_logger(self) -> None:
        assert get_logger("app.services.x").name == "app.services.x"


class TestCorrelationIdFilter:
    def _record(self, **extra: object) -> logging.LogRecord:
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "evt", None, None)
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_injects_service_and_context_correlation_id(self) -> None:
        record = self._record()

        assert CorrelationIdFilter("hookflow", lambda: "ctx-id").filter(record) is True
        assert record.service == "hookflow"
        assert record.correlation_id == "ctx-id"

    def test_explicit_correlation_id_wins(self) -> None:
        record = self._record(correlation_id="explicit")

        CorrelationIdFilter("hookflow", lambda: "ctx-id").filter(record)

        assert record.correlation_id == "explicit"

    def test_without_getter_uses_empty_string(self) -> None:
        record = self._record()

        CorrelationIdFilter("hookflow").filter(record)

        assert record.correlation_id == ""


class TestJsonFormatter:
    def test_output_contains_required_fields_renamed(self) -> None:
        record = logging.LogRecord("app.x", logging.WARNING, __file__, 1, "evt", None, None)
        CorrelationIdFilter("hookflow", lambda: "abc").filter(record)
        record.state = "accepted"

        payload = json.loads(create_json_formatter().format(record))

        assert payload["level"] == "WARNING"
        assert payload["logger"] == "app.x"
        assert payload["message"] == "evt"
        assert payload["service"] == "hookflow"
        assert payload["correlation_id"] == "abc"
        assert payload["state"] == "accepted"

    def test_rename_map_covers_required_fields(self) -> None:
        assert set(FIELD_RENAME_MAP) <= REQUIRED_LOG_FIELDS


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("tok_abcdef123456", "tok_abcd..."),
        ("short", "short"),
        ("", ""),
        (None, ""),
    ],
)
def test_mask_identifier(value: str | None, expected: str) -> None:
    assert mask_identifier(value) == expected

"""Testes do motor de resolução de variáveis."""

from __future__ import annotations

import asyncio
from datetime import UTC, date, datetime
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from app.domain.errors import EmptyTemplateError, ErrorKind, UnknownExecutionError
from app.domain.variables import VariableContext
from app.infra.workflow import MemoryWorkflowEngine
from app.services.variable_engine import VariableResolutionEngine, format_value, render


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("texto", "texto"),
        (True, "true"),
        (False, "false"),
        (0, "0"),
        (1500, "1500"),
        (1500.5, "1500.5"),
        (0.1, "0.1"),
        (1e20, "1e+20"),
        (Decimal("10.50"), "10.50"),
        (datetime(2024, 1, 15, 10, 30, tzinfo=UTC), "2024-01-15T10:30:00+00:00"),
        (date(2024, 1, 15), "2024-01-15"),
        ({"b": 1, "a": [True, None]}, '{"a":[true,null],"b":1}'),
        (["x", 2], '["x",2]'),
        (None, None),
    ],
)
def test_format_value(value: object, expected: str | None) -> None:
    assert format_value(value) == expected


def test_render_mustache_with_whitespace_and_legacy_syntax() -> None:
    result = render("Olá {{userName}}, {{  orderNumber  }} ${amount}", {
        "userName": "Ana",
        "orderNumber": "ORD-1",
        "amount": 10,
    })

    assert result.text == "Olá Ana, ORD-1 10"
    assert result.unresolved == ()


def test_render_leaves_unknown_placeholders_verbatim() -> None:
    result = render("{{ a }} {{ b }} ${b} {{ c }}", {"a": 1, "c": None})

    assert result.text == "1 {{ b }} ${b} {{ c }}"
    assert result.unresolved == ("b", "c")


def test_render_is_deterministic() -> None:
    variables = {"data": {"z": 1, "a": 2}, "amount": 0.30000000000000004}
    first = render("{{ data }}|{{ amount }}", variables)

    assert all(render("{{ data }}|{{ amount }}", variables) == first for _ in range(5))


def test_render_without_placeholders_returns_text() -> None:
    assert render("sem variáveis", {}).text == "sem variáveis"


def test_render_empty_template() -> None:
    with pytest.raises(EmptyTemplateError) as exc_info:
        render("", {})
    assert exc_info.value.kind is ErrorKind.EMPTY_TEMPLATE


@pytest.mark.asyncio
async def test_resolve_with_explicit_variables() -> None:
    engine = VariableResolutionEngine(MemoryWorkflowEngine())

    result = await engine.resolve("Oi {{ name }}", VariableContext.from_mapping({"name": "Ana"}))

    assert result.text == "Oi Ana"


@pytest.mark.asyncio
async def test_resolve_with_execution_snapshot() -> None:
    engine = VariableResolutionEngine(
        MemoryWorkflowEngine({"exec-1": {"orderNumber": "ORD-9", "isPaid": True}})
    )

    result = await engine.resolve(
        "{{ orderNumber }} pago={{ isPaid }}", VariableContext.for_execution("exec-1")
    )

    assert result.text == "ORD-9 pago=true"


@pytest.mark.asyncio
async def test_resolve_unknown_execution() -> None:
    engine = VariableResolutionEngine(MemoryWorkflowEngine())

    with pytest.raises(UnknownExecutionError):
        await engine.resolve("{{ a }}", VariableContext.for_execution("missing"))


@pytest.mark.asyncio
async def test_resolve_execution_lookup_timeout() -> None:
    async def _slow(execution_id: str) -> dict[str, object]:
        await asyncio.sleep(3600)
        return {}

    provider = AsyncMock()
    provider.get_execution_variables.side_effect = _slow
    engine = VariableResolutionEngine(provider, lookup_timeout_seconds=0.01)

    with pytest.raises(UnknownExecutionError):
        await engine.resolve("{{ a }}", VariableContext.for_execution("exec-1"))


@pytest.mark.asyncio
async def test_resolve_execution_transport_error() -> None:
    provider = AsyncMock()
    provider.get_execution_variables.side_effect = ConnectionError("down")
    engine = VariableResolutionEngine(provider)

    with pytest.raises(UnknownExecutionError):
        await engine.resolve("{{ a }}", VariableContext.for_execution("exec-1"))


@pytest.mark.asyncio
async def test_resolve_empty_template_before_lookup() -> None:
    provider = AsyncMock()
    engine = VariableResolutionEngine(provider)

    with pytest.raises(EmptyTemplateError):
        await engine.resolve("", VariableContext.for_execution("exec-1"))
    provider.get_execution_variables.assert_not_called()


def test_preview_uses_sample_variables() -> None:
    engine = VariableResolutionEngine(MemoryWorkflowEngine())

    result = engine.preview(
        "{{ userName }} {{ orderNumber }} {{ amount }} {{ isPaid }} {{ orderDate }} {{ other }}"
    )

    assert result.text == (
        "Maria Silva ORD-2024-001 1500.5 true 2024-01-15T10:30:00+00:00 {{ other }}"
    )
    assert result.unresolved == ("other",)

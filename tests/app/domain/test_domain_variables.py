"""Testes de VariableContext e Resolution."""

from __future__ import annotations

import pytest

from app.domain.errors import ErrorKind, ValidationError
from app.domain.variables import Resolution, VariableContext


def test_context_requires_exactly_one_source() -> None:
    with pytest.raises(ValidationError) as exc_info:
        VariableContext()
    assert exc_info.value.kind is ErrorKind.VALIDATION

    with pytest.raises(ValidationError):
        VariableContext(execution_id="exec-1", variables={"a": 1})


def test_context_from_mapping_is_read_only_snapshot() -> None:
    source = {"userName": "Ana"}
    context = VariableContext.from_mapping(source)
    source["userName"] = "Outra"

    assert context.variables["userName"] == "Ana"
    with pytest.raises(TypeError):
        context.variables["userName"] = "x"  # type: ignore[index]


def test_context_for_execution() -> None:
    context = VariableContext.for_execution("exec-42")
    assert context.execution_id == "exec-42"
    assert context.variables is None


def test_empty_mapping_is_a_valid_source() -> None:
    context = VariableContext.from_mapping({})
    assert dict(context.variables or {}) == {}


def test_resolution_complete_flag() -> None:
    assert Resolution(text="ok").complete is True
    assert Resolution(text="{{ a }}", unresolved=("a",)).complete is False

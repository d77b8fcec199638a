"""Contexto e resultado da resolução de variáveis em templates."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from app.domain.errors import ValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True, slots=True)
class VariableContext:
    """Fonte das variáveis: exatamente uma entre `execution_id` e `variables`.

    Use `VariableContext.for_execution()` ou `VariableContext.from_mapping()`;
    a construção direta com ambos (ou nenhum) levanta ValidationError.
    """

    execution_id: str | None = None
    variables: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        has_execution = bool(self.execution_id)
        has_variables = self.variables is not None
        if has_execution == has_variables:
            raise ValidationError(
                "informe exatamente um entre execution_id e variables",
                fields=("execution_id", "variables"),
            )
        if has_variables:
            # Snapshot somente leitura
            object.__setattr__(self, "variables", MappingProxyType(dict(self.variables)))

    @classmethod
    def for_execution(cls, execution_id: str) -> VariableContext:
        return cls(execution_id=execution_id)

    @classmethod
    def from_mapping(cls, variables: Mapping[str, Any]) -> VariableContext:
        return cls(variables=variables)


@dataclass(frozen=True, slots=True)
class Resolution:
    """Texto resolvido e nomes de placeholders que ficaram sem valor."""

    text: str
    unresolved: tuple[str, ...] = ()

    @property
    def complete(self) -> bool:
        return not self.unresolved

"""Motor de resolução de variáveis em templates.

Placeholders suportados:
- `{{ nome }}` (espaços em volta do nome são ignorados)
- `${nome}` (sintaxe legada dos templates de mensagem)

Nomes sem valor no contexto (ou com valor None) permanecem literais no
texto e são reportados em `Resolution.unresolved`.

Formatação canônica (independente de locale, determinística):
    str      -> como está
    bool     -> "true" / "false"
    int      -> str(value)
    float    -> repr(value) (menor representação que faz round-trip)
    Decimal  -> str(value)
    datetime/date/time -> ISO-8601
    dict/list -> JSON compacto com chaves ordenadas
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from datetime import UTC, date, datetime, time
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from app.domain.errors import EmptyTemplateError, UnknownExecutionError
from app.domain.variables import Resolution, VariableContext

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.protocols.workflow_engine import ExecutionContextProviderProtocol

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(
    r"\{\{\s*(?P<mustache>[^{}]+?)\s*\}\}|\$\{\s*(?P<legacy>[^{}]+?)\s*\}"
)

PREVIEW_SAMPLE_VARIABLES: Mapping[str, Any] = {
    "userName": "Maria Silva",
    "orderNumber": "ORD-2024-001",
    "amount": 1500.50,
    "isPaid": True,
    "orderDate": datetime(2024, 1, 15, 10, 30, tzinfo=UTC),
}


def format_value(value: Any) -> str | None:
    """Formata um valor de variável; None significa "sem valor"."""
    if value is None:
        return None
    # bool antes de int (bool é subclasse de int)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime | date | time):
        return value.isoformat()
    if isinstance(value, dict | list | tuple):
        return json.dumps(
            value,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            default=format_value,
        )
    return str(value)


def render(template: str, variables: Mapping[str, Any]) -> Resolution:
    """Substitui placeholders usando um mapping explícito (função pura).

    Raises:
        EmptyTemplateError: template vazio
    """
    if not template:
        raise EmptyTemplateError("template vazio")

    unresolved: list[str] = []

    def _replace(match: re.Match[str]) -> str:
        name = (match.group("mustache") or match.group("legacy") or "").strip()
        if not name:
            return match.group(0)
        formatted = format_value(variables.get(name))
        if formatted is None:
            if name not in unresolved:
                unresolved.append(name)
            return match.group(0)
        return formatted

    text = PLACEHOLDER_PATTERN.sub(_replace, template)
    return Resolution(text=text, unresolved=tuple(unresolved))


class VariableResolutionEngine:
    """Resolve templates contra variáveis explícitas ou snapshot de execução.

    Args:
        execution_provider: Fonte dos snapshots de execução
        lookup_timeout_seconds: Limite para obter o snapshot
    """

    def __init__(
        self,
        execution_provider: ExecutionContextProviderProtocol,
        lookup_timeout_seconds: float = 5.0,
    ) -> None:
        self._executions = execution_provider
        self._timeout = lookup_timeout_seconds

    async def resolve(self, template: str, context: VariableContext) -> Resolution:
        """Resolve o template no contexto informado.

        Raises:
            EmptyTemplateError: template vazio
            UnknownExecutionError: execução inexistente, timeout ou falha do provider
        """
        if not template:
            raise EmptyTemplateError("template vazio")
        if context.variables is not None:
            return render(template, context.variables)

        variables = await self._load_execution(context.execution_id or "")
        return render(template, variables)

    def preview(self, template: str) -> Resolution:
        """Renderiza com as variáveis de exemplo usadas pelo editor de templates."""
        return render(template, PREVIEW_SAMPLE_VARIABLES)

    async def _load_execution(self, execution_id: str) -> Mapping[str, Any]:
        try:
            variables = await asyncio.wait_for(
                self._executions.get_execution_variables(execution_id),
                timeout=self._timeout,
            )
        except TimeoutError as exc:
            logger.warning(
                "execution_lookup_timeout",
                extra={"execution_id": execution_id, "timeout_seconds": self._timeout},
            )
            raise UnknownExecutionError(
                "snapshot da execução indisponível", execution_id=execution_id
            ) from exc
        except Exception as exc:
            logger.warning(
                "execution_lookup_failed",
                extra={"execution_id": execution_id, "error_type": type(exc).__name__},
            )
            raise UnknownExecutionError(
                "snapshot da execução indisponível", execution_id=execution_id
            ) from exc

        if variables is None:
            raise UnknownExecutionError("execução não encontrada", execution_id=execution_id)
        return variables

"""Schemas HTTP das APIs de variáveis."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class ReplaceVariablesRequest(BaseModel):
    """Corpo de `POST /variables/replace`.

    Exatamente uma fonte: `execution_id` (snapshot da execução) ou
    `variables` (mapping explícito).
    """

    text: str = ""
    execution_id: str | None = None
    variables: dict[str, Any] | None = None


class PreviewVariablesRequest(BaseModel):
    text: str = ""


class VariablesResponse(BaseModel):
    success: bool = True
    data: str
    unresolved: list[str] = []

"""Endpoints de resolução de variáveis em templates.

- POST /variables/replace   resolve contra execução ou mapping explícito
- POST /variables/preview   resolve contra as variáveis de exemplo
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from api.routes.variables.schemas import (
    PreviewVariablesRequest,
    ReplaceVariablesRequest,
    VariablesResponse,
)
from app.bootstrap import get_variable_engine
from app.domain.errors import EmptyTemplateError
from app.domain.variables import VariableContext
from app.services.variable_engine import VariableResolutionEngine

router = APIRouter()


@router.post("/replace", response_model=VariablesResponse)
async def replace_variables(
    body: ReplaceVariablesRequest,
    engine: VariableResolutionEngine = Depends(get_variable_engine),
) -> VariablesResponse:
    if not body.text:
        raise EmptyTemplateError("text obrigatório")
    # Fonte ambígua ou ausente vira ValidationError (400)
    context = VariableContext(execution_id=body.execution_id, variables=body.variables)
    resolution = await engine.resolve(body.text, context)
    return VariablesResponse(data=resolution.text, unresolved=list(resolution.unresolved))


@router.post("/preview", response_model=VariablesResponse)
async def preview_variables(
    body: PreviewVariablesRequest,
    engine: VariableResolutionEngine = Depends(get_variable_engine),
) -> VariablesResponse:
    resolution = engine.preview(body.text)
    return VariablesResponse(data=resolution.text, unresolved=list(resolution.unresolved))

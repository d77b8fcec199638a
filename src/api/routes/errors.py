"""Mapeamento de erros de domínio para respostas HTTP.

O status é escolhido pela `ErrorKind` do erro, nunca pelo texto da
mensagem. O corpo segue `{"success": false, "error": kind, "detail": msg}`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.domain.errors import DomainError, ErrorKind

if TYPE_CHECKING:
    from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.EMPTY_TEMPLATE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.UNKNOWN_PROVIDER: status.HTTP_404_NOT_FOUND,
    ErrorKind.UNKNOWN_EXECUTION: status.HTTP_404_NOT_FOUND,
    ErrorKind.AUTH_FAILURE: status.HTTP_401_UNAUTHORIZED,
}


def status_for(kind: ErrorKind) -> int:
    return STATUS_BY_KIND.get(kind, status.HTTP_500_INTERNAL_SERVER_ERROR)


def error_response(exc: DomainError) -> JSONResponse:
    """Converte um DomainError na resposta JSON correspondente."""
    content: dict[str, object] = {"success": False, "error": exc.kind.value}
    if exc.message:
        content["detail"] = exc.message
    fields = getattr(exc, "fields", ())
    if fields:
        content["fields"] = list(fields)
    return JSONResponse(content=content, status_code=status_for(exc.kind))


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = status_for(exc.kind)
    log = logger.error if status_code >= 500 else logger.info
    log(
        "api_domain_error",
        extra={
            "path": request.url.path,
            "error_kind": exc.kind.value,
            "status_code": status_code,
        },
    )
    return error_response(exc)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    fields = sorted({str(err["loc"][-1]) for err in exc.errors() if err.get("loc")})
    logger.info(
        "api_request_invalid",
        extra={"path": request.url.path, "fields": fields},
    )
    return JSONResponse(
        content={
            "success": False,
            "error": ErrorKind.VALIDATION.value,
            "detail": "corpo da requisição inválido",
            "fields": fields,
        },
        status_code=status.HTTP_400_BAD_REQUEST,
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "api_unexpected_error",
        extra={"path": request.url.path, "error_type": type(exc).__name__},
    )
    return JSONResponse(
        content={"success": False, "error": ErrorKind.INTERNAL.value},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def install_error_handlers(app: FastAPI) -> None:
    """Registra os handlers de erro na aplicação."""
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

"""Hierarquia única de erros de domínio.

Cada erro carrega um `ErrorKind`; a borda HTTP decide o status a partir do
kind (tabela em api/routes/errors.py), nunca a partir do texto da mensagem.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Categorias de falha conhecidas pelo domínio."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    UNKNOWN_PROVIDER = "unknown_provider"
    PROVIDER_DISABLED = "provider_disabled"
    AUTH_FAILURE = "auth_failure"
    TRANSIENT_DISPATCH = "transient_dispatch"
    EMPTY_TEMPLATE = "empty_template"
    UNKNOWN_EXECUTION = "unknown_execution"
    INTERNAL = "internal"


class DomainError(Exception):
    """Erro base do domínio."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str = "", **details: object) -> None:
        super().__init__(message or self.kind.value)
        self.message = message or self.kind.value
        self.details = details


class ValidationError(DomainError):
    """Entrada inválida (campo obrigatório ausente, contexto ambíguo)."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str = "", *, fields: tuple[str, ...] = (), **details: object) -> None:
        super().__init__(message, **details)
        self.fields = fields


class NotFoundError(DomainError):
    kind = ErrorKind.NOT_FOUND


class UnknownProviderError(DomainError):
    kind = ErrorKind.UNKNOWN_PROVIDER


class ProviderDisabledError(DomainError):
    """A configuração existe, mas está desabilitada (distinto de NotFound)."""

    kind = ErrorKind.PROVIDER_DISABLED


class AuthFailureError(DomainError):
    kind = ErrorKind.AUTH_FAILURE


class TransientDispatchError(DomainError):
    """Falha recuperável no dispatch (timeout, transporte, 5xx)."""

    kind = ErrorKind.TRANSIENT_DISPATCH


class EmptyTemplateError(DomainError):
    kind = ErrorKind.EMPTY_TEMPLATE


class UnknownExecutionError(DomainError):
    """Execução inexistente ou snapshot indisponível dentro do prazo."""

    kind = ErrorKind.UNKNOWN_EXECUTION

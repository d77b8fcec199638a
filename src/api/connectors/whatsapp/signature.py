"""Validação de assinatura HMAC-SHA256 (`X-Hub-Signature-256`) da Meta."""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

SIGNATURE_HEADER = "x-hub-signature-256"
_SIGNATURE_PREFIX = "sha256="


@dataclass(frozen=True, slots=True)
class SignatureResult:
    """Resultado da validação.

    skipped=True quando não há secret configurado (validação não se aplica).
    """

    valid: bool
    skipped: bool = False
    error: str | None = None


def verify_meta_signature(
    raw_body: bytes,
    headers: Mapping[str, str],
    secret: str | None,
) -> SignatureResult:
    """Valida a assinatura do corpo bruto contra o app secret.

    Args:
        raw_body: Corpo bruto do request (bytes exatamente como recebidos)
        headers: Headers do request (busca case-insensitive)
        secret: App secret do tenant; None/vazio desativa a validação

    Returns:
        SignatureResult
    """
    if not secret:
        return SignatureResult(valid=True, skipped=True)

    signature = ""
    for name, value in headers.items():
        if name.lower() == SIGNATURE_HEADER:
            signature = value
            break

    if not signature:
        return SignatureResult(valid=False, error="missing_signature")
    if not signature.startswith(_SIGNATURE_PREFIX):
        return SignatureResult(valid=False, error="malformed_signature")

    expected = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()
    if not hmac.compare_digest(expected, signature[len(_SIGNATURE_PREFIX):]):
        return SignatureResult(valid=False, error="signature_mismatch")
    return SignatureResult(valid=True)

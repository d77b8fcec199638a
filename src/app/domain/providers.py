"""Providers de integração — definições globais e configurações por tenant.

ProviderDefinition é imutável e vem do catálogo carregado no boot.
TenantProviderSetting é a única linha por (tenant_id, provider_key); um
upsert substitui `config_values` por inteiro (sem merge).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

ConfigScalar = str | int | float | bool | None

# Valores com até este tamanho são mascarados por completo
_MASK_KEEP_CHARS = 4


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Campo de configuração de um provider."""

    name: str
    required: bool = True
    secret: bool = False
    description: str = ""


@dataclass(frozen=True, slots=True)
class ProviderDefinition:
    """Definição de provider (global, somente leitura)."""

    key: str
    category: str
    display_name: str
    required_fields: tuple[FieldSpec, ...] = ()
    optional_fields: tuple[FieldSpec, ...] = ()
    schema_version: int = 1
    icon: str = ""
    auth_type: str = "apiKey"
    default_api_url: str = ""
    default_model: str | None = None
    supported_models: tuple[str, ...] = ()
    default_config: tuple[tuple[str, Any], ...] = ()

    @property
    def all_fields(self) -> tuple[FieldSpec, ...]:
        return self.required_fields + self.optional_fields

    @property
    def secret_field_names(self) -> frozenset[str]:
        return frozenset(spec.name for spec in self.all_fields if spec.secret)

    def missing_required(self, config_values: dict[str, Any]) -> tuple[str, ...]:
        """Campos obrigatórios ausentes, nulos ou em branco (na ordem do catálogo)."""
        missing: list[str] = []
        for spec in self.required_fields:
            value = config_values.get(spec.name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(spec.name)
        return tuple(missing)

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "category": self.category,
            "display_name": self.display_name,
            "icon": self.icon,
            "auth_type": self.auth_type,
            "default_api_url": self.default_api_url,
            "default_model": self.default_model,
            "supported_models": list(self.supported_models),
            "default_config": dict(self.default_config),
            "schema_version": self.schema_version,
            "required_fields": [_field_to_dict(spec) for spec in self.required_fields],
            "optional_fields": [_field_to_dict(spec) for spec in self.optional_fields],
        }


def _field_to_dict(spec: FieldSpec) -> dict[str, Any]:
    return {
        "name": spec.name,
        "required": spec.required,
        "secret": spec.secret,
        "description": spec.description,
    }


@dataclass(frozen=True, slots=True)
class TenantProviderSetting:
    """Configuração de um provider para um tenant."""

    tenant_id: str
    provider_key: str
    config_values: dict[str, ConfigScalar] = field(default_factory=dict)
    enabled: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def get_value(self, name: str) -> str:
        """Valor do campo como string ("" quando ausente)."""
        value = self.config_values.get(name)
        return "" if value is None else str(value)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tenant_id": self.tenant_id,
            "provider_key": self.provider_key,
            "config_values": dict(self.config_values),
            "enabled": self.enabled,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TenantProviderSetting:
        return cls(
            tenant_id=data["tenant_id"],
            provider_key=data["provider_key"],
            config_values=dict(data.get("config_values") or {}),
            enabled=bool(data.get("enabled", True)),
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )

    def masked(self, secret_fields: frozenset[str]) -> dict[str, Any]:
        """Representação para API com campos secretos mascarados."""
        data = self.to_dict()
        data["config_values"] = {
            name: mask_secret(value) if name in secret_fields else value
            for name, value in self.config_values.items()
        }
        return data


def mask_secret(value: ConfigScalar) -> ConfigScalar:
    """Mascara segredo preservando os 4 últimos caracteres.

    Exemplo:
        mask_secret("sk-1234567890") -> "*********7890"
        mask_secret("abcd") -> "****"
    """
    if value is None:
        return None
    text = str(value)
    if len(text) <= _MASK_KEEP_CHARS:
        return "*" * _MASK_KEEP_CHARS
    return "*" * (len(text) - _MASK_KEEP_CHARS) + text[-_MASK_KEEP_CHARS:]

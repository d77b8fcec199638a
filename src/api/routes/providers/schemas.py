"""Schemas HTTP das APIs de providers."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

ConfigScalar = str | int | float | bool | None


class UpsertProviderSettingRequest(BaseModel):
    """Corpo de `POST /providers/tenant/{provider_key}`."""

    config_values: dict[str, ConfigScalar] = Field(default_factory=dict)
    enabled: bool = True


class ProviderListResponse(BaseModel):
    success: bool = True
    data: list[dict[str, Any]]


class ProviderItemResponse(BaseModel):
    success: bool = True
    data: dict[str, Any]

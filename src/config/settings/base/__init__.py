"""Agregador de settings base."""

from __future__ import annotations

from config.settings.base.core import (
    BaseSettings,
    Environment,
    get_base_settings,
)
from config.settings.base.dedupe import (
    DedupeBackend,
    DedupeSettings,
    get_dedupe_settings,
)

__all__ = [
    "BaseSettings",
    "DedupeBackend",
    "DedupeSettings",
    "Environment",
    "get_base_settings",
    "get_dedupe_settings",
]

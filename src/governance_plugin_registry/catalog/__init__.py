"""Bundled plugin catalog."""
from __future__ import annotations

from governance_plugin_registry.catalog.builtin import (
    BUILTIN_CATALOG_YAML,
    builtin_catalog,
    default_store,
    reset_default_store,
)

__all__ = [
    "BUILTIN_CATALOG_YAML",
    "builtin_catalog",
    "default_store",
    "reset_default_store",
]

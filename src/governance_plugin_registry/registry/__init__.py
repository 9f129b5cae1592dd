"""Registry store: catalog schema, validation on load and read-only lookup."""
from __future__ import annotations

from governance_plugin_registry.registry.loader import CatalogLoader
from governance_plugin_registry.registry.schema import (
    PluginRecord,
    Scope,
    ScopeDefaults,
    ScopeFixedPaths,
)
from governance_plugin_registry.registry.store import RegistryStore, load

__all__ = [
    "CatalogLoader",
    "PluginRecord",
    "RegistryStore",
    "Scope",
    "ScopeDefaults",
    "ScopeFixedPaths",
    "load",
]

"""governance-plugin-registry: Read-only plugin catalog for governance spaces.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import governance_plugin_registry as reg
>>> store = reg.RegistryStore.load({
...     "Quorum": {"name": "Quorum", "version": "0.1.0",
...                "defaults": {"space": {"threshold": 50}}},
... })
>>> reg.resolve(store, "Quorum", "space", {"threshold": 75})
{'threshold': 75}
>>> reg.is_compatible(store.get("Quorum"), "0.1.0")
True
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------
from governance_plugin_registry.errors import (
    InvalidScopeError,
    InvalidVersionRangeError,
    MergeConflictError,
    NotFoundError,
    PluginRegistryError,
    SchemaError,
)

# ---------------------------------------------------------------------------
# Registry store
# ---------------------------------------------------------------------------
from governance_plugin_registry.registry.loader import CatalogLoader
from governance_plugin_registry.registry.schema import (
    PluginRecord,
    Scope,
    ScopeDefaults,
    ScopeFixedPaths,
)
from governance_plugin_registry.registry.store import RegistryStore, load

# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------
from governance_plugin_registry.resolution.engine import (
    ResolutionEngine,
    resolve,
    resolve_many,
)
from governance_plugin_registry.resolution.merge import deep_merge
from governance_plugin_registry.versioning import (
    SemanticVersion,
    VersionRequirement,
    is_compatible,
)

# ---------------------------------------------------------------------------
# Catalog & settings
# ---------------------------------------------------------------------------
from governance_plugin_registry.catalog.builtin import builtin_catalog, default_store
from governance_plugin_registry.config.settings import (
    RegistrySettings,
    SettingsLoader,
    build_engine,
)

__all__ = [
    "__version__",
    # Errors
    "InvalidScopeError",
    "InvalidVersionRangeError",
    "MergeConflictError",
    "NotFoundError",
    "PluginRegistryError",
    "SchemaError",
    # Registry store
    "CatalogLoader",
    "PluginRecord",
    "RegistryStore",
    "Scope",
    "ScopeDefaults",
    "ScopeFixedPaths",
    "load",
    # Resolution
    "ResolutionEngine",
    "SemanticVersion",
    "VersionRequirement",
    "deep_merge",
    "is_compatible",
    "resolve",
    "resolve_many",
    # Catalog & settings
    "RegistrySettings",
    "SettingsLoader",
    "build_engine",
    "builtin_catalog",
    "default_store",
]

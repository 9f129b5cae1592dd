"""Resolution & merge engine layered on the registry store."""
from __future__ import annotations

from governance_plugin_registry.resolution.engine import (
    ResolutionEngine,
    resolve,
    resolve_many,
)
from governance_plugin_registry.resolution.merge import deep_merge

__all__ = [
    "ResolutionEngine",
    "deep_merge",
    "resolve",
    "resolve_many",
]

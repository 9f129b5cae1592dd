"""Registry settings loading."""
from __future__ import annotations

from governance_plugin_registry.config.settings import (
    RegistrySettings,
    SettingsLoader,
    build_engine,
)

__all__ = ["RegistrySettings", "SettingsLoader", "build_engine"]

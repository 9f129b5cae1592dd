"""Registry settings loader with Pydantic v2 validation.

Loads ``plugin_registry.yaml`` into a typed :class:`RegistrySettings`
object.  Unknown keys are allowed so the surrounding application can keep its
own settings in the same file.

Example
-------
::

    settings = SettingsLoader().load(Path("plugin_registry.yaml"))
    engine = build_engine(settings)
    engine.resolve("Quorum", "space", {"threshold": 75})

Schema
------
::

    catalog_path: ./plugins.yaml   # omit to use the bundled catalog
    strict_merge: false
    log_level: INFO
    required_versions:
      SafeSnap: "^1.0.0"
"""
from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator

from governance_plugin_registry.catalog.builtin import default_store
from governance_plugin_registry.registry.loader import CatalogLoader
from governance_plugin_registry.resolution.engine import ResolutionEngine
from governance_plugin_registry.versioning import VersionRequirement


class RegistrySettings(BaseModel):
    """Top-level registry settings.  Every field is optional."""

    model_config = {"extra": "allow"}

    catalog_path: Path | None = Field(default=None)
    strict_merge: bool = Field(default=False)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="WARNING")
    required_versions: dict[str, str] = Field(default_factory=dict)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalise_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    @field_validator("required_versions")
    @classmethod
    def validate_requirements(cls, values: dict[str, str]) -> dict[str, str]:
        for requirement in values.values():
            VersionRequirement.parse(requirement)
        return values


class SettingsLoader:
    """Loads and validates registry settings YAML."""

    def load(self, config_path: Path) -> RegistrySettings:
        """Load and validate a settings file.

        Raises
        ------
        FileNotFoundError:
            When the file does not exist.
        ValueError:
            When the YAML content fails Pydantic validation.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Registry settings not found: {config_path}")

        with config_path.open("r", encoding="utf-8") as fh:
            raw: dict[str, object] = yaml.safe_load(fh) or {}

        settings = RegistrySettings.model_validate(raw)
        if settings.catalog_path is not None and not settings.catalog_path.is_absolute():
            settings = settings.model_copy(
                update={"catalog_path": config_path.parent / settings.catalog_path}
            )
        return settings

    def load_string(self, yaml_content: str) -> RegistrySettings:
        """Load and validate settings from a YAML string."""
        raw: dict[str, object] = yaml.safe_load(yaml_content) or {}
        return RegistrySettings.model_validate(raw)

    def defaults(self) -> RegistrySettings:
        """Return settings with every default applied."""
        return RegistrySettings()


def build_engine(settings: RegistrySettings | None = None) -> ResolutionEngine:
    """Build a :class:`ResolutionEngine` for ``settings``.

    The bundled catalog is used when ``settings.catalog_path`` is unset.
    Catalog errors propagate unchanged; they are fatal to startup.
    """
    settings = settings or RegistrySettings()
    if settings.catalog_path is None:
        store = default_store()
    else:
        store = CatalogLoader().load(settings.catalog_path)
    return ResolutionEngine(store, strict=settings.strict_merge)

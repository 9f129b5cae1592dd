"""Tests for registry settings loading and engine construction."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from governance_plugin_registry.catalog.builtin import default_store
from governance_plugin_registry.config.settings import (
    RegistrySettings,
    SettingsLoader,
    build_engine,
)
from governance_plugin_registry.errors import MergeConflictError, SchemaError

_CATALOG_YAML = textwrap.dedent(
    """\
    Quorum:
      name: Quorum
      version: 0.1.0
      defaults:
        space:
          threshold: 50
    """
)


@pytest.fixture()
def loader() -> SettingsLoader:
    return SettingsLoader()


class TestSettingsLoader:
    def test_defaults(self, loader: SettingsLoader) -> None:
        settings = loader.defaults()
        assert settings.catalog_path is None
        assert settings.strict_merge is False
        assert settings.log_level == "WARNING"
        assert settings.required_versions == {}

    def test_load_string(self, loader: SettingsLoader) -> None:
        settings = loader.load_string(
            "strict_merge: true\nlog_level: debug\nrequired_versions:\n  SafeSnap: '^1.0.0'\n"
        )
        assert settings.strict_merge is True
        assert settings.log_level == "DEBUG"
        assert settings.required_versions == {"SafeSnap": "^1.0.0"}

    def test_empty_string_gives_defaults(self, loader: SettingsLoader) -> None:
        assert loader.load_string("") == RegistrySettings()

    def test_extra_keys_allowed(self, loader: SettingsLoader) -> None:
        settings = loader.load_string("ui_theme: dark\n")
        assert settings.model_extra == {"ui_theme": "dark"}

    def test_bad_requirement_rejected(self, loader: SettingsLoader) -> None:
        with pytest.raises(ValidationError, match="required_versions"):
            loader.load_string("required_versions:\n  HAL: newest\n")

    def test_bad_log_level_rejected(self, loader: SettingsLoader) -> None:
        with pytest.raises(ValidationError):
            loader.load_string("log_level: LOUD\n")

    def test_missing_file(self, loader: SettingsLoader, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            loader.load(tmp_path / "plugin_registry.yaml")

    def test_relative_catalog_path_resolved_against_file(
        self, loader: SettingsLoader, tmp_path: Path
    ) -> None:
        config_dir = tmp_path / "conf"
        config_dir.mkdir()
        config_file = config_dir / "plugin_registry.yaml"
        config_file.write_text("catalog_path: plugins.yaml\n", encoding="utf-8")
        settings = loader.load(config_file)
        assert settings.catalog_path == config_dir / "plugins.yaml"


class TestBuildEngine:
    def test_bundled_catalog_by_default(self) -> None:
        engine = build_engine()
        assert engine.store is default_store()
        assert engine.strict is False

    def test_catalog_path_used(self, tmp_path: Path) -> None:
        path = tmp_path / "plugins.yaml"
        path.write_text(_CATALOG_YAML, encoding="utf-8")
        engine = build_engine(RegistrySettings(catalog_path=path))
        assert list(engine.store.keys()) == ["Quorum"]
        assert engine.resolve("Quorum", "space", {"threshold": 75}) == {"threshold": 75}

    def test_strict_merge_setting(self) -> None:
        engine = build_engine(RegistrySettings(strict_merge=True))
        with pytest.raises(MergeConflictError):
            engine.resolve("SafeSnap", "proposal", {"tx": "raw"})

    def test_invalid_catalog_is_fatal(self, tmp_path: Path) -> None:
        path = tmp_path / "plugins.yaml"
        path.write_text("Quorum: {name: Quorum, version: zero}\n", encoding="utf-8")
        with pytest.raises(SchemaError):
            build_engine(RegistrySettings(catalog_path=path))

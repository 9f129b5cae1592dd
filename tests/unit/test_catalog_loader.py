"""Tests for CatalogLoader (YAML/JSON catalog files)."""
from __future__ import annotations

import json
import textwrap
from pathlib import Path

import pytest

from governance_plugin_registry.errors import SchemaError
from governance_plugin_registry.registry.loader import CatalogLoader

_VALID_YAML = textwrap.dedent(
    """\
    Quorum:
      name: Quorum
      author: lbeder
      version: 0.1.0
      defaults:
        space:
          threshold: 50
    SafeSnap:
      name: Gnosis SafeSnap
      version: 1.0.0
      defaults:
        space:
          safes: ["0x123"]
        proposal:
          tx: {}
    """
)


@pytest.fixture()
def loader() -> CatalogLoader:
    return CatalogLoader()


class TestLoadString:
    def test_valid_catalog(self, loader: CatalogLoader) -> None:
        store = loader.load_string(_VALID_YAML)
        assert list(store.keys()) == ["Quorum", "SafeSnap"]
        assert store.get("Quorum").scope_defaults("space") == {"threshold": 50}

    def test_empty_document_is_empty_catalog(self, loader: CatalogLoader) -> None:
        assert len(loader.load_string("")) == 0

    def test_comment_only_document(self, loader: CatalogLoader) -> None:
        assert len(loader.load_string("# nothing here\n")) == 0

    def test_duplicate_top_level_keys_reported(self, loader: CatalogLoader) -> None:
        text = _VALID_YAML + textwrap.dedent(
            """\
            Quorum:
              name: Quorum v2
              version: 0.2.0
            """
        )
        with pytest.raises(SchemaError) as exc_info:
            loader.load_string(text, source_name="dup.yaml")
        assert exc_info.value.keys == ["Quorum"]
        assert exc_info.value.source == "dup.yaml"

    def test_duplicates_reported_with_other_violations(self, loader: CatalogLoader) -> None:
        text = textwrap.dedent(
            """\
            HAL: {name: HAL, version: 1.0.0}
            HAL: {name: HAL, version: 1.0.1}
            Poap: {name: Poap, version: "1"}
            """
        )
        with pytest.raises(SchemaError) as exc_info:
            loader.load_string(text)
        assert exc_info.value.keys == ["HAL", "Poap"]

    def test_nested_duplicate_keys_not_top_level(self, loader: CatalogLoader) -> None:
        text = textwrap.dedent(
            """\
            HAL:
              name: HAL
              version: 1.0.0
              defaults:
                space: {a: 1, a: 2}
            """
        )
        store = loader.load_string(text)
        assert store.get("HAL").scope_defaults("space") == {"a": 2}

    def test_malformed_yaml_raises_schema_error(self, loader: CatalogLoader) -> None:
        with pytest.raises(SchemaError, match="failed to parse YAML"):
            loader.load_string("Quorum: [unclosed")

    def test_recursive_anchor_rejected(self, loader: CatalogLoader) -> None:
        text = textwrap.dedent(
            """\
            Loop:
              name: Loop
              version: 1.0.0
              defaults:
                space: &cfg
                  again: *cfg
            """
        )
        with pytest.raises(SchemaError, match="cyclic"):
            loader.load_string(text)

    def test_yaml_boolean_and_null_keys_rejected(self, loader: CatalogLoader) -> None:
        text = textwrap.dedent(
            """\
            On:
              name: OnPlugin
              version: 1.0.0
            ~:
              name: NullPlugin
              version: 1.0.0
            "Yes":
              name: Quoted
              version: 1.0.0
            """
        )
        with pytest.raises(SchemaError) as exc_info:
            loader.load_string(text)
        assert exc_info.value.keys == ["True", "None"]
        assert any("catalog key must be a string" in v for v in exc_info.value.violations)

    def test_sequence_document(self, loader: CatalogLoader) -> None:
        text = textwrap.dedent(
            """\
            - key: HAL
              name: HAL
              version: 1.0.0
            """
        )
        assert "HAL" in loader.load_string(text)


class TestLoadFile:
    def test_load_yaml_file(self, loader: CatalogLoader, tmp_path: Path) -> None:
        path = tmp_path / "plugins.yaml"
        path.write_text(_VALID_YAML, encoding="utf-8")
        store = loader.load(path)
        assert store.source_name == str(path)
        assert len(store) == 2

    def test_load_json_file(self, loader: CatalogLoader, tmp_path: Path) -> None:
        path = tmp_path / "plugins.json"
        path.write_text(
            json.dumps({"HAL": {"name": "HAL", "version": "1.0.0", "defaults": {"space": {}}}}),
            encoding="utf-8",
        )
        assert loader.load(str(path)).get("HAL").supports_scope("space")

    def test_missing_file_raises(self, loader: CatalogLoader, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            loader.load(tmp_path / "missing.yaml")

    def test_error_names_file(self, loader: CatalogLoader, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("HAL: {name: HAL, version: one}\n", encoding="utf-8")
        with pytest.raises(SchemaError) as exc_info:
            loader.load(path)
        assert exc_info.value.source == str(path)


    def test_non_utf8_file_raises_schema_error(self, loader: CatalogLoader, tmp_path: Path) -> None:
        path = tmp_path / "latin1.yaml"
        path.write_bytes(b"HAL:\n  name: \xff\xfeHAL\n  version: 1.0.0\n")
        with pytest.raises(SchemaError, match="not valid UTF-8") as exc_info:
            loader.load(path)
        assert exc_info.value.source == str(path)


class TestLoadFromDict:
    def test_load_from_dict(self, loader: CatalogLoader) -> None:
        store = loader.load_from_dict({"HAL": {"name": "HAL", "version": "1.0.0"}}, source_name="inline")
        assert store.source_name == "inline"

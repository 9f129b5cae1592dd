"""YAML catalog loader.

Reads a catalog document from disk or from a string and hands it to
:meth:`RegistryStore.load`.  JSON catalogs load too, since JSON is valid YAML.

A plain ``yaml.safe_load`` silently keeps the last of two identical mapping
keys, which would hide a duplicated plugin.  The loader therefore inspects the
composed node graph first and reports duplicated top-level keys alongside
every other schema violation.

Example
-------
::

    loader = CatalogLoader()
    store = loader.load("plugins.yaml")
    store.get("SafeSnap").scope_defaults("proposal")
"""
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from governance_plugin_registry.errors import SchemaError
from governance_plugin_registry.registry.store import RegistryStore

logger = logging.getLogger(__name__)


class CatalogLoader:
    """Builds :class:`RegistryStore` instances from YAML/JSON sources."""

    def load(self, catalog_path: str | Path) -> RegistryStore:
        """Load a catalog file.

        Parameters
        ----------
        catalog_path:
            Path to a YAML or JSON catalog document.

        Returns
        -------
        RegistryStore

        Raises
        ------
        FileNotFoundError
            If the file does not exist.
        SchemaError
            If the file is not UTF-8, the document cannot be parsed, or any
            record is invalid.
        """
        catalog_path = Path(catalog_path)
        if not catalog_path.exists():
            raise FileNotFoundError(f"Plugin catalog not found: {catalog_path}")

        try:
            text = catalog_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise SchemaError(
                [f"<catalog>: not valid UTF-8: {exc}"], source=str(catalog_path)
            ) from exc
        return self.load_string(text, source_name=str(catalog_path))

    def load_string(self, yaml_content: str, source_name: str | None = None) -> RegistryStore:
        """Load a catalog from YAML text."""
        data, duplicates = _parse_document(yaml_content, source_name)
        return RegistryStore.load(
            data, source_name=source_name, duplicate_keys=duplicates
        )

    def load_from_dict(
        self,
        data: Mapping[str, Any] | Sequence[Mapping[str, Any]],
        source_name: str | None = None,
    ) -> RegistryStore:
        """Load a catalog from already-parsed data."""
        return RegistryStore.load(data, source_name=source_name)


def _parse_document(text: str, source_name: str | None) -> tuple[object, list[str]]:
    """Parse YAML text, returning the data and any duplicated top-level keys."""
    loader = yaml.SafeLoader(text)
    try:
        root = loader.get_single_node()
        if root is None:
            return {}, []
        duplicates = _duplicate_top_level_keys(root)
        data = loader.construct_document(root)
    except yaml.YAMLError as exc:
        raise SchemaError([f"<catalog>: failed to parse YAML: {exc}"], source=source_name) from exc
    finally:
        loader.dispose()

    if duplicates:
        logger.debug("Duplicate catalog keys in %s: %s", source_name or "<string>", duplicates)
    return data if data is not None else {}, duplicates


def _duplicate_top_level_keys(root: yaml.Node) -> list[str]:
    if not isinstance(root, yaml.MappingNode):
        return []
    seen: set[str] = set()
    duplicates: list[str] = []
    for key_node, _ in root.value:
        if not isinstance(key_node, yaml.ScalarNode):
            continue
        if key_node.value in seen and key_node.value not in duplicates:
            duplicates.append(key_node.value)
        seen.add(key_node.value)
    return duplicates

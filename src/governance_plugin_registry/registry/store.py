"""Immutable, validated plugin catalog.

:class:`RegistryStore` is built once from a catalog source and never mutated
afterwards.  Loading is all-or-nothing: every candidate record is validated,
every problem is collected, and a single :class:`SchemaError` lists them all.

Accepted catalog shapes::

    # mapping form: key -> record ("key" inside the record is optional)
    Quorum:
      name: Quorum
      version: 0.1.0
      defaults:
        space: {threshold: 50}

    # sequence form: every record carries its own key
    - key: Quorum
      name: Quorum
      version: 0.1.0

Example
-------
>>> store = RegistryStore.load({"Quorum": {"name": "Quorum", "version": "0.1.0"}})
>>> store.get("Quorum").version
'0.1.0'
>>> len(store)
1
"""
from __future__ import annotations

import copy
import hashlib
import json
import logging
from collections.abc import ItemsView, Iterator, KeysView, Mapping, Sequence, ValuesView
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError

from governance_plugin_registry.errors import NotFoundError, SchemaError
from governance_plugin_registry.registry.schema import PluginRecord, Scope

logger = logging.getLogger(__name__)

_KNOWN_RECORD_KEYS: frozenset[str] = frozenset(PluginRecord.model_fields)


class RegistryStore:
    """Read-only mapping of plugin key to :class:`PluginRecord`.

    Instances are only created through :meth:`load` (or the loaders built on
    it).  There is no mutation API; the underlying mapping is exposed only as
    read-only views.
    """

    def __init__(
        self,
        records: Mapping[str, PluginRecord],
        source_name: str | None = None,
    ) -> None:
        self._records: Mapping[str, PluginRecord] = MappingProxyType(dict(records))
        self._source_name = source_name

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def load(
        cls,
        source: Mapping[str, Any] | Sequence[Mapping[str, Any]],
        *,
        source_name: str | None = None,
        duplicate_keys: Sequence[str] = (),
    ) -> RegistryStore:
        """Validate a catalog source and build a store from it.

        Parameters
        ----------
        source:
            Mapping of key to record, or a sequence of records with ``key``.
        source_name:
            Identifier used in log lines and error messages.
        duplicate_keys:
            Keys already known to be duplicated in the raw document (mapping
            sources cannot represent duplicates themselves).

        Returns
        -------
        RegistryStore
            A fully built store.

        Raises
        ------
        SchemaError
            If any record is invalid or any key is duplicated.
        """
        violations: list[str] = []
        offending: list[str] = []
        for dup in duplicate_keys:
            violations.append(f"{dup}: duplicate plugin key")
            offending.append(dup)

        candidates = _candidate_records(source, violations, offending)

        records: dict[str, PluginRecord] = {}
        for key, raw_record in candidates:
            if key in records:
                violations.append(f"{key}: duplicate plugin key")
                offending.append(key)
                continue
            record = _validate_record(key, raw_record, violations, offending)
            if record is not None:
                records[record.key] = record

        if violations:
            raise SchemaError(violations, keys=offending, source=source_name)

        logger.info("Loaded %d plugins from %s", len(records), source_name or "<dict>")
        return cls(records, source_name=source_name)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, key: str) -> PluginRecord:
        """Return the record for ``key``.

        Raises
        ------
        NotFoundError
            If no plugin is registered under ``key``.
        """
        try:
            return self._records[key]
        except (KeyError, TypeError):
            raise NotFoundError(key) from None

    def list_plugins(self) -> ValuesView[PluginRecord]:
        """Return every record in catalog order.

        The returned view is lazy and can be iterated any number of times.
        """
        return self._records.values()

    def keys(self) -> KeysView[str]:
        return self._records.keys()

    def items(self) -> ItemsView[str, PluginRecord]:
        return self._records.items()

    def with_scope(self, scope: Scope | str) -> list[PluginRecord]:
        """Return the records that declare defaults for ``scope``, in catalog order."""
        parsed = Scope.parse(scope)
        return [record for record in self._records.values() if record.supports_scope(parsed)]

    def to_dict(self) -> dict[str, dict[str, Any]]:
        """Export the catalog as plain data in mapping form."""
        return {key: record.to_dict() for key, record in self._records.items()}

    def fingerprint(self) -> str:
        """Return a SHA-256 digest of the canonical catalog export.

        Two stores loaded from equal sources have equal fingerprints.
        """
        canonical = json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()

    @property
    def source_name(self) -> str | None:
        return self._source_name

    # ------------------------------------------------------------------
    # Dunder methods
    # ------------------------------------------------------------------

    def __contains__(self, key: object) -> bool:
        try:
            return key in self._records
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[PluginRecord]:
        return iter(self._records.values())

    def __repr__(self) -> str:
        return (
            f"RegistryStore(source={self._source_name or '<dict>'!r}, "
            f"plugins={list(self._records)!r})"
        )


def load(
    source: Mapping[str, Any] | Sequence[Mapping[str, Any]],
    *,
    source_name: str | None = None,
) -> RegistryStore:
    """Module-level alias for :meth:`RegistryStore.load`."""
    return RegistryStore.load(source, source_name=source_name)


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _candidate_records(
    source: object,
    violations: list[str],
    offending: list[str],
) -> list[tuple[str, object]]:
    """Flatten either catalog shape into ``(key, raw_record)`` pairs."""
    if isinstance(source, Mapping):
        pairs: list[tuple[str, object]] = []
        for map_key, raw_record in source.items():
            if not isinstance(map_key, str):
                # YAML 1.1 reads unquoted On/Yes/~ as booleans and null
                violations.append(
                    f"{map_key!r}: catalog key must be a string, got {type(map_key).__name__}"
                )
                offending.append(repr(map_key))
                continue
            key = map_key
            if isinstance(raw_record, Mapping) and "key" in raw_record:
                inner_key = raw_record["key"]
                if inner_key != map_key:
                    violations.append(
                        f"{key}: record key {inner_key!r} does not match catalog key {map_key!r}"
                    )
                    offending.append(key)
                    continue
            pairs.append((key, raw_record))
        return pairs

    if isinstance(source, Sequence) and not isinstance(source, (str, bytes)):
        pairs = []
        for index, raw_record in enumerate(source):
            if not isinstance(raw_record, Mapping):
                violations.append(f"<index {index}>: record must be a mapping")
                continue
            raw_key = raw_record.get("key")
            if not isinstance(raw_key, str) or not raw_key.strip():
                violations.append(f"<index {index}>: record is missing a non-empty 'key'")
                continue
            pairs.append((raw_key, raw_record))
        return pairs

    violations.append(
        f"<catalog>: must be a mapping or a list of records, got {type(source).__name__}"
    )
    return []


def _validate_record(
    key: str,
    raw_record: object,
    violations: list[str],
    offending: list[str],
) -> PluginRecord | None:
    """Validate one record, appending any problems to ``violations``."""
    if not isinstance(raw_record, Mapping):
        violations.append(f"{key}: record must be a mapping")
        offending.append(key)
        return None

    unknown = sorted(str(name) for name in raw_record if name not in _KNOWN_RECORD_KEYS)
    if unknown:
        logger.warning("Plugin '%s' has unknown fields %s; ignoring them.", key, unknown)

    payload = copy.deepcopy(dict(raw_record))
    payload["key"] = key
    try:
        return PluginRecord.model_validate(payload)
    except ValidationError as exc:
        for error in exc.errors():
            location = ".".join(str(part) for part in error["loc"]) or "<record>"
            violations.append(f"{key}: {location}: {error['msg']}")
        offending.append(key)
        return None

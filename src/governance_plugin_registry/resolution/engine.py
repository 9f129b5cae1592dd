"""Resolution engine: turn (key, scope, overrides) into an effective configuration.

Every operation here is a pure function of its arguments and the read-only
store, so it is safe to call concurrently without coordination and the same
inputs always produce an equal result.

Example
-------
>>> store = RegistryStore.load({
...     "Quorum": {"name": "Quorum", "version": "0.1.0",
...                "defaults": {"space": {"threshold": 50}}},
... })
>>> resolve(store, "Quorum", "space", {"threshold": 75})
{'threshold': 75}
>>> resolve(store, "Quorum", "proposal")
{}
"""
from __future__ import annotations

import logging
from collections.abc import Mapping, ValuesView
from typing import Any

from governance_plugin_registry.registry.schema import PluginRecord, Scope
from governance_plugin_registry.registry.store import RegistryStore
from governance_plugin_registry.resolution.merge import deep_merge
from governance_plugin_registry.versioning import VersionRequirement, is_compatible

logger = logging.getLogger(__name__)


def resolve(
    store: RegistryStore,
    key: str,
    scope: Scope | str,
    overrides: Mapping[str, Any] | None = None,
    *,
    strict: bool = False,
) -> dict[str, Any]:
    """Compute the effective configuration of plugin ``key`` for ``scope``.

    Parameters
    ----------
    store:
        The registry to resolve against.
    key:
        Plugin key; must be registered in ``store``.
    scope:
        ``"space"`` or ``"proposal"``.
    overrides:
        Caller values merged onto the plugin's defaults.  ``None`` or ``{}``
        returns the defaults unchanged.
    strict:
        Refuse overrides that change the shape of a path the plugin marks as
        fixed.

    Returns
    -------
    dict
        A new dict; it never aliases the stored defaults or ``overrides``.

    Raises
    ------
    InvalidScopeError
        If ``scope`` is not a known scope.
    NotFoundError
        If ``key`` is not registered.
    MergeConflictError
        Strict mode only.
    TypeError
        If ``overrides`` is neither ``None`` nor a mapping.
    """
    parsed_scope = Scope.parse(scope)
    record = store.get(key)

    if overrides is None:
        overrides = {}
    elif not isinstance(overrides, Mapping):
        raise TypeError(
            f"overrides for plugin '{key}' must be a mapping, got {type(overrides).__name__}"
        )

    base = record.scope_defaults(parsed_scope) or {}
    effective = deep_merge(
        base,
        overrides,
        fixed_paths=record.fixed_paths(parsed_scope),
        strict=strict,
        key=record.key,
    )
    logger.debug(
        "Resolved plugin '%s' for scope %s (%d override key(s), strict=%s)",
        record.key,
        parsed_scope.value,
        len(overrides),
        strict,
    )
    return effective


def resolve_many(
    store: RegistryStore,
    enabled: Mapping[str, Mapping[str, Any] | None],
    scope: Scope | str,
    *,
    strict: bool = False,
) -> dict[str, dict[str, Any]]:
    """Resolve a whole ``plugins`` settings block.

    ``enabled`` maps plugin keys to their overrides, the shape a space or a
    proposal stores its plugin settings in.  The result preserves that order.
    The first failing plugin's error propagates; no partial result is
    returned.
    """
    return {
        key: resolve(store, key, scope, overrides, strict=strict)
        for key, overrides in enabled.items()
    }


class ResolutionEngine:
    """Consumer-facing facade over a :class:`RegistryStore`.

    Parameters
    ----------
    store:
        The loaded registry, passed in explicitly rather than looked up from
        a global.
    strict:
        Default strictness for :meth:`resolve` and :meth:`resolve_many`.

    Example
    -------
    ::

        engine = ResolutionEngine(default_store())
        for record in engine.list_plugins():
            print(record.key, record.version)
        config = engine.resolve("SafeSnap", "proposal", {"safe": "0xDef"})
    """

    def __init__(self, store: RegistryStore, strict: bool = False) -> None:
        self._store = store
        self._strict = strict

    @property
    def store(self) -> RegistryStore:
        return self._store

    @property
    def strict(self) -> bool:
        return self._strict

    def list_plugins(self) -> ValuesView[PluginRecord]:
        return self._store.list_plugins()

    def get(self, key: str) -> PluginRecord:
        return self._store.get(key)

    def resolve(
        self,
        key: str,
        scope: Scope | str,
        overrides: Mapping[str, Any] | None = None,
        *,
        strict: bool | None = None,
    ) -> dict[str, Any]:
        """See :func:`resolve`; ``strict`` defaults to the engine setting."""
        return resolve(
            self._store,
            key,
            scope,
            overrides,
            strict=self._strict if strict is None else strict,
        )

    def resolve_many(
        self,
        enabled: Mapping[str, Mapping[str, Any] | None],
        scope: Scope | str,
    ) -> dict[str, dict[str, Any]]:
        return resolve_many(self._store, enabled, scope, strict=self._strict)

    def is_compatible(
        self,
        plugin: str | PluginRecord,
        requirement: str | VersionRequirement,
    ) -> bool:
        """Check a registered plugin (by key or record) against ``requirement``.

        Raises
        ------
        NotFoundError
            If ``plugin`` is a key that is not registered.
        InvalidVersionRangeError
            If ``requirement`` cannot be parsed.
        """
        record = self._store.get(plugin) if isinstance(plugin, str) else plugin
        return is_compatible(record, requirement)

    def __repr__(self) -> str:
        return f"ResolutionEngine(plugins={len(self._store)}, strict={self._strict})"

"""Deep merge of plugin defaults with caller overrides.

Structural recursion happens only through mappings.  Wherever either side
holds a non-mapping value (scalar, list, ``None``) the override replaces the
base value outright; lists are never concatenated or merged element-wise.

Example
-------
>>> deep_merge({"a": {"x": 1, "y": 2}, "b": [1]}, {"a": {"y": 3}, "b": [2]})
{'a': {'x': 1, 'y': 3}, 'b': [2]}
"""
from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from typing import Any

from governance_plugin_registry.errors import MergeConflictError


def deep_merge(
    base: Mapping[str, Any],
    overrides: Mapping[str, Any],
    *,
    fixed_paths: Iterable[str] = (),
    strict: bool = False,
    key: str | None = None,
) -> dict[str, Any]:
    """Merge ``overrides`` onto ``base`` and return a new dict.

    Neither input is mutated and the result shares no containers with them.

    Parameters
    ----------
    base:
        Default configuration.
    overrides:
        Caller-supplied values; these win at every leaf.
    fixed_paths:
        Dotted paths whose shape (mapping or not) must not change.  Only
        consulted when ``strict`` is ``True``.
    strict:
        When ``True``, an override that swaps a mapping for a non-mapping (or
        the reverse) at a fixed path raises :class:`MergeConflictError`.
    key:
        Plugin key, used only to label errors.

    Raises
    ------
    MergeConflictError
        Strict mode only; see ``strict``.
    """
    fixed = frozenset(fixed_paths) if strict else frozenset()
    return _merge(base, overrides, "", fixed, key)


def _merge(
    base: Mapping[str, Any],
    overrides: Mapping[str, Any],
    prefix: str,
    fixed: frozenset[str],
    key: str | None,
) -> dict[str, Any]:
    merged: dict[str, Any] = {name: copy.deepcopy(value) for name, value in base.items()}
    for name, override_value in overrides.items():
        path = f"{prefix}.{name}" if prefix else str(name)
        if name not in base:
            merged[name] = copy.deepcopy(override_value)
            continue

        base_value = base[name]
        base_is_mapping = isinstance(base_value, Mapping)
        override_is_mapping = isinstance(override_value, Mapping)

        if path in fixed and base_is_mapping != override_is_mapping:
            expected = "a mapping" if base_is_mapping else "a non-mapping value"
            raise MergeConflictError(
                path,
                f"value is structurally fixed as {expected}, "
                f"override has type {type(override_value).__name__}",
                key=key,
            )

        if base_is_mapping and override_is_mapping:
            merged[name] = _merge(base_value, override_value, path, fixed, key)
        else:
            merged[name] = copy.deepcopy(override_value)
    return merged

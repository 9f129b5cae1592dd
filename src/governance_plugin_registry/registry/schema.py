"""Plugin record schema: Pydantic v2 models for catalog entries.

A catalog entry describes one plugin: identity metadata plus a pair of
default configuration templates, one per :class:`Scope`.

Example
-------
>>> record = PluginRecord.model_validate({
...     "key": "Quorum",
...     "name": "Quorum",
...     "version": "0.1.0",
...     "defaults": {"space": {"threshold": 50}},
... })
>>> record.scope_defaults("space")
{'threshold': 50}
>>> record.scope_defaults("proposal") is None
True
"""
from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator

from governance_plugin_registry.errors import InvalidScopeError
from governance_plugin_registry.versioning import SemanticVersion

# ---------------------------------------------------------------------------
# Scope
# ---------------------------------------------------------------------------


class Scope(str, Enum):
    """Configuration context a plugin may customise."""

    SPACE = "space"
    PROPOSAL = "proposal"

    @classmethod
    def parse(cls, value: object) -> Scope:
        """Return the :class:`Scope` for ``value`` or raise :class:`InvalidScopeError`."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass
        raise InvalidScopeError(value)


# ---------------------------------------------------------------------------
# Plain-data check
# ---------------------------------------------------------------------------

_SCALAR_TYPES = (str, int, float, bool, type(None))


def _check_plain_data(value: object, path: str, stack: set[int]) -> None:
    """Raise ``ValueError`` unless ``value`` is acyclic JSON-like data."""
    if isinstance(value, _SCALAR_TYPES):
        return
    if isinstance(value, (dict, list)):
        marker = id(value)
        if marker in stack:
            raise ValueError(f"cyclic reference at '{path or '<root>'}'")
        stack.add(marker)
        if isinstance(value, dict):
            for child_key, child in value.items():
                if not isinstance(child_key, str):
                    raise ValueError(
                        f"mapping key {child_key!r} at '{path or '<root>'}' is not a string"
                    )
                _check_plain_data(child, f"{path}.{child_key}" if path else child_key, stack)
        else:
            for index, child in enumerate(value):
                _check_plain_data(child, f"{path}[{index}]", stack)
        stack.discard(marker)
        return
    raise ValueError(
        f"value at '{path or '<root>'}' has unsupported type {type(value).__name__}"
    )


def _freeze(value: Any) -> Any:
    """Return a read-only deep copy: mappings become proxies, lists become tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    """Return a fresh mutable copy of a value produced by :func:`_freeze`."""
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# Scope-level models
# ---------------------------------------------------------------------------


class ScopeDefaults(BaseModel):
    """Default configuration templates keyed by scope.

    ``None`` means the plugin declares no defaults for that scope; ``{}``
    means defaults exist but are trivial.  Both merge identically.

    Payloads are stored deep-frozen (read-only mappings and tuples), so a
    record handed out by a store cannot be used to change the catalog.
    """

    model_config = {"frozen": True}

    space: dict[str, Any] | None = None
    proposal: dict[str, Any] | None = None

    @field_validator("space", "proposal")
    @classmethod
    def must_be_plain_data(cls, value: dict[str, Any] | None) -> Mapping[str, Any] | None:
        if value is None:
            return value
        _check_plain_data(value, "", set())
        return _freeze(value)


class ScopeFixedPaths(BaseModel):
    """Dotted key paths whose structure strict merging refuses to change."""

    model_config = {"frozen": True}

    space: tuple[str, ...] = ()
    proposal: tuple[str, ...] = ()

    @field_validator("space", "proposal")
    @classmethod
    def paths_well_formed(cls, paths: tuple[str, ...]) -> tuple[str, ...]:
        for path in paths:
            if not path or any(not part for part in path.split(".")):
                raise ValueError(f"fixed path {path!r} must be dot-separated non-empty keys")
        return paths


# ---------------------------------------------------------------------------
# PluginRecord
# ---------------------------------------------------------------------------


class PluginRecord(BaseModel):
    """One registered plugin.

    Attributes
    ----------
    key:
        Stable unique identifier, used as the catalog key.
    name:
        Human-readable display name.
    author:
        Optional attribution.
    version:
        ``MAJOR.MINOR.PATCH`` version string.
    website, icon:
        Optional URIs.  Only their shape is checked, never reachability.
    defaults:
        Per-scope default configuration templates.
    fixed:
        Per-scope dotted paths treated as structurally fixed by strict merges.
    """

    model_config = {"frozen": True, "extra": "ignore"}

    key: str
    name: str
    author: str | None = None
    version: str
    website: str | None = None
    icon: str | None = None
    defaults: ScopeDefaults = Field(default_factory=ScopeDefaults)
    fixed: ScopeFixedPaths = Field(default_factory=ScopeFixedPaths)

    @field_validator("key", "name")
    @classmethod
    def must_not_be_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must be a non-empty string")
        return value

    @field_validator("version")
    @classmethod
    def must_be_semver(cls, value: str) -> str:
        SemanticVersion.parse(value)
        return value.strip()

    @field_validator("website", "icon")
    @classmethod
    def must_look_like_uri(cls, value: str | None) -> str | None:
        if value is None:
            return value
        parsed = urlparse(value)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(f"{value!r} is not a well-formed URI")
        return value

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def semantic_version(self) -> SemanticVersion:
        return SemanticVersion.parse(self.version)

    def scope_defaults(self, scope: Scope | str) -> dict[str, Any] | None:
        """Return a mutable deep copy of the defaults for ``scope``, or ``None`` if absent."""
        value = getattr(self.defaults, Scope.parse(scope).value)
        return _thaw(value) if value is not None else None

    def supports_scope(self, scope: Scope | str) -> bool:
        """Return ``True`` when the plugin declares defaults for ``scope``."""
        return getattr(self.defaults, Scope.parse(scope).value) is not None

    def fixed_paths(self, scope: Scope | str) -> tuple[str, ...]:
        return getattr(self.fixed, Scope.parse(scope).value)

    def to_dict(self) -> dict[str, Any]:
        """Export the record as plain data, omitting absent optional fields."""
        data: dict[str, Any] = {"key": self.key, "name": self.name}
        if self.author is not None:
            data["author"] = self.author
        data["version"] = self.version
        if self.website is not None:
            data["website"] = self.website
        if self.icon is not None:
            data["icon"] = self.icon
        defaults: dict[str, Any] = {}
        fixed: dict[str, list[str]] = {}
        for scope in Scope:
            scope_value = self.scope_defaults(scope)
            if scope_value is not None:
                defaults[scope.value] = scope_value
            if self.fixed_paths(scope):
                fixed[scope.value] = list(self.fixed_paths(scope))
        data["defaults"] = defaults
        if fixed:
            data["fixed"] = fixed
        return data

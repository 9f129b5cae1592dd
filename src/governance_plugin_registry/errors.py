"""Error taxonomy for the plugin registry.

Every error derives from :class:`PluginRegistryError` and from the builtin
exception that best describes it, so callers can catch either the specific
type or the generic builtin (``KeyError`` for lookups, ``ValueError`` for
malformed input).

Only :class:`SchemaError` is fatal: it is raised while loading a catalog and
the caller is expected to abort startup.  Everything else is reported to the
immediate caller and is never retried here.
"""
from __future__ import annotations


class PluginRegistryError(Exception):
    """Base class for all registry errors."""


class SchemaError(PluginRegistryError, ValueError):
    """Raised when a catalog fails validation at load time.

    Attributes
    ----------
    violations:
        One human-readable message per problem found.  Loading never stops
        at the first problem so operators can fix everything in one pass.
    keys:
        Every offending plugin key, in catalog order, without duplicates.
    source:
        Identifier of the catalog that was being loaded, if known.
    """

    def __init__(
        self,
        violations: list[str],
        keys: list[str] | None = None,
        source: str | None = None,
    ) -> None:
        self.violations = list(violations)
        self.keys = list(dict.fromkeys(keys or []))
        self.source = source
        prefix = f"[{source}] " if source else ""
        details = "\n".join(f"  - {violation}" for violation in self.violations)
        super().__init__(
            f"{prefix}Catalog failed validation with "
            f"{len(self.violations)} violation(s):\n{details}"
        )


class NotFoundError(PluginRegistryError, KeyError):
    """Raised when a plugin key is not present in the store."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"Plugin {self.key!r} is not registered."


class InvalidScopeError(PluginRegistryError, ValueError):
    """Raised when a scope outside ``space``/``proposal`` is requested."""

    def __init__(self, scope: object) -> None:
        self.scope = scope
        super().__init__(
            f"Invalid scope {scope!r}. Valid scopes: ['proposal', 'space']."
        )


class InvalidVersionRangeError(PluginRegistryError, ValueError):
    """Raised when a version requirement string cannot be parsed."""

    def __init__(self, requirement: object, reason: str = "") -> None:
        self.requirement = requirement
        suffix = f": {reason}" if reason else ""
        super().__init__(f"Invalid version requirement {requirement!r}{suffix}")


class MergeConflictError(PluginRegistryError, ValueError):
    """Raised in strict mode when an override changes the shape of a fixed path.

    Attributes
    ----------
    path:
        Dotted path of the conflicting value inside the scope configuration.
    key:
        Plugin key whose defaults were being merged, if known.
    """

    def __init__(self, path: str, message: str, key: str | None = None) -> None:
        self.path = path
        self.key = key
        prefix = f"[{key}] " if key else ""
        super().__init__(f"{prefix}Merge conflict at '{path}': {message}")

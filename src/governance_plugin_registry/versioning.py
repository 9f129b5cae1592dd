"""Semantic version parsing and compatibility checks.

Plugin versions are strict ``MAJOR.MINOR.PATCH`` triples of non-negative
integers.  A version *requirement* is what a consumer needs from an installed
plugin, written in one of these forms:

``1.2.0`` or ``^1.2.0``
    Same major version, ``(minor, patch) >= (2, 0)``.  A major bump breaks
    compatibility, so ``2.0.0`` never satisfies ``1.2.0``.
``~1.2.0``
    Same major and minor version, ``patch >= 0``.
``>=1.2.0``
    Plain minimum, across major versions.
``=1.2.0`` or ``==1.2.0``
    Exact match.

Example
-------
>>> is_compatible("1.3.0", "1.2.0")
True
>>> is_compatible({"version": "2.0.0"}, "1.2.0")
False
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from governance_plugin_registry.errors import InvalidVersionRangeError

if TYPE_CHECKING:
    from governance_plugin_registry.registry.schema import PluginRecord

_VERSION_RE = re.compile(r"^([0-9]+)\.([0-9]+)\.([0-9]+)$")
_REQUIREMENT_RE = re.compile(r"^(\^|~|>=|==|=)?\s*(\S+)$")


@dataclass(frozen=True, order=True)
class SemanticVersion:
    """An ordered ``MAJOR.MINOR.PATCH`` triple."""

    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, text: str) -> SemanticVersion:
        """Parse ``text`` into a :class:`SemanticVersion`.

        Raises
        ------
        ValueError
            If ``text`` is not three dot-separated non-negative integers.
        """
        if not isinstance(text, str):
            raise ValueError(f"version must be a string, got {type(text).__name__}")
        match = _VERSION_RE.match(text.strip())
        if match is None:
            raise ValueError(
                f"version {text!r} must be MAJOR.MINOR.PATCH with non-negative integers"
            )
        major, minor, patch = (int(part) for part in match.groups())
        return cls(major=major, minor=minor, patch=patch)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True)
class VersionRequirement:
    """A parsed version requirement; see the module docstring for the forms."""

    operator: str
    version: SemanticVersion

    @classmethod
    def parse(cls, text: str) -> VersionRequirement:
        """Parse a requirement string.

        Raises
        ------
        InvalidVersionRangeError
            If the operator is unknown or the version part does not parse.
        """
        if not isinstance(text, str):
            raise InvalidVersionRangeError(text, "requirement must be a string")
        match = _REQUIREMENT_RE.match(text.strip())
        if match is None:
            raise InvalidVersionRangeError(text, "expected e.g. '1.2.0', '^1.2.0' or '>=1.2.0'")
        operator = match.group(1) or "^"
        if operator == "=":
            operator = "=="
        try:
            version = SemanticVersion.parse(match.group(2))
        except ValueError as exc:
            raise InvalidVersionRangeError(text, str(exc)) from exc
        return cls(operator=operator, version=version)

    def is_satisfied_by(self, installed: SemanticVersion) -> bool:
        """Return ``True`` when ``installed`` meets this requirement."""
        required = self.version
        if self.operator == "^":
            return installed.major == required.major and (
                installed.minor,
                installed.patch,
            ) >= (required.minor, required.patch)
        if self.operator == "~":
            return (
                installed.major == required.major
                and installed.minor == required.minor
                and installed.patch >= required.patch
            )
        if self.operator == ">=":
            return installed >= required
        return installed == required

    def __str__(self) -> str:
        return f"{self.operator}{self.version}"


def is_compatible(
    record: PluginRecord | Mapping[str, object] | str,
    requirement: str | VersionRequirement,
) -> bool:
    """Check whether a plugin's version satisfies ``requirement``.

    Parameters
    ----------
    record:
        A :class:`PluginRecord`, any mapping with a ``version`` key, or a bare
        version string.
    requirement:
        Requirement string (or an already parsed :class:`VersionRequirement`).

    Returns
    -------
    bool
        ``False`` when the record's version is missing or does not parse.

    Raises
    ------
    InvalidVersionRangeError
        If ``requirement`` cannot be parsed.  This is a caller programming
        error, not a property of the record.
    """
    if not isinstance(requirement, VersionRequirement):
        requirement = VersionRequirement.parse(requirement)

    if isinstance(record, str):
        raw_version: object = record
    elif isinstance(record, Mapping):
        raw_version = record.get("version")
    else:
        raw_version = getattr(record, "version", None)

    try:
        installed = SemanticVersion.parse(raw_version)  # type: ignore[arg-type]
    except ValueError:
        return False
    return requirement.is_satisfied_by(installed)

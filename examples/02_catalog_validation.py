#!/usr/bin/env python3
"""Example: Catalog validation and strict merging

Shows that a broken catalog is rejected as a whole, with every problem
reported at once, and how strict mode protects structurally fixed paths.

Usage:
    python examples/02_catalog_validation.py
"""
from __future__ import annotations

import textwrap

import governance_plugin_registry as reg

_BROKEN_CATALOG = textwrap.dedent(
    """\
    HAL:
      name: HAL
      version: 1.0
    Poap:
      name: ""
      version: 1.0.0
    HAL:
      name: HAL again
      version: 1.0.1
    """
)


def main() -> None:
    loader = reg.CatalogLoader()

    # Step 1: Every violation is listed, not just the first
    try:
        loader.load_string(_BROKEN_CATALOG, source_name="broken.yaml")
    except reg.SchemaError as exc:
        print(f"Rejected catalog, offending keys: {exc.keys}")
        for violation in exc.violations:
            print(f"  - {violation}")

    # Step 2: Strict merging refuses shape changes at fixed paths
    engine = reg.ResolutionEngine(reg.default_store(), strict=True)
    print(f"\nSafeSnap proposal: {engine.resolve('SafeSnap', 'proposal', {'tx': {'to': '0x1'}})}")
    try:
        engine.resolve("SafeSnap", "proposal", {"tx": "0xdeadbeef"})
    except reg.MergeConflictError as exc:
        print(f"Strict merge refused: {exc}")


if __name__ == "__main__":
    main()

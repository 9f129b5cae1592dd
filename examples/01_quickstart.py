#!/usr/bin/env python3
"""Example: Quickstart for governance-plugin-registry

Minimal working example: load a catalog, list plugins, resolve a plugin's
effective configuration and gate a feature on its version.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install governance-plugin-registry
"""
from __future__ import annotations

import governance_plugin_registry as reg


def main() -> None:
    print(f"governance-plugin-registry version: {reg.__version__}")

    # Step 1: Load a catalog once at startup
    store = reg.RegistryStore.load({
        "Quorum": {
            "name": "Quorum",
            "author": "lbeder",
            "version": "0.1.0",
            "defaults": {"space": {"threshold": 50}},
        },
        "SafeSnap": {
            "name": "Gnosis SafeSnap",
            "version": "1.0.0",
            "defaults": {
                "space": {"safes": ["0x123"], "oracles": ["0x456"]},
                "proposal": {"safe": "0xAbc", "oracle": "0x456", "tx": {}},
            },
        },
    })
    print(f"Catalog ready: {len(store)} plugins")

    # Step 2: List plugins for display
    for record in store.list_plugins():
        print(f"  {record.key:<10} v{record.version}  {record.name}")

    # Step 3: Resolve effective configuration
    engine = reg.ResolutionEngine(store)
    print("\nEffective configuration:")
    print(f"  Quorum/space:      {engine.resolve('Quorum', 'space', {'threshold': 75})}")
    print(f"  Quorum/proposal:   {engine.resolve('Quorum', 'proposal')}")
    print(f"  SafeSnap/proposal: {engine.resolve('SafeSnap', 'proposal', {'tx': {'to': '0xDef'}})}")

    # Step 4: Handle unknown plugins
    try:
        engine.resolve("doesNotExist", "space")
    except reg.NotFoundError as exc:
        print(f"\nLookup failed: {exc}")

    # Step 5: Gate a feature on a minimum version
    for requirement in ("1.0.0", "1.2.0", "0.9.0"):
        ok = engine.is_compatible("SafeSnap", requirement)
        print(f"  SafeSnap satisfies {requirement}: {ok}")


if __name__ == "__main__":
    main()

"""Bundled plugin catalog and the process-wide default store.

The bundled entries describe the plugins shipped with the governance
platform.  They are example data: the registry treats them like any other
catalog source.

Example
-------
>>> store = default_store()
>>> store.get("SafeSnap").name
'Gnosis SafeSnap'
>>> default_store() is store
True
"""
from __future__ import annotations

import logging
import threading
from typing import Any

import yaml

from governance_plugin_registry.registry.loader import CatalogLoader
from governance_plugin_registry.registry.store import RegistryStore

logger = logging.getLogger(__name__)

_ICON_BASE = "https://raw.githubusercontent.com/snapshot-labs/snapshot-plugins/master/src/plugins"

# ---------------------------------------------------------------------------
# Catalog document
# ---------------------------------------------------------------------------

BUILTIN_CATALOG_YAML = f"""\
# Bundled plugin catalog
# ----------------------
# One entry per plugin key.  "defaults" holds the space-level and
# proposal-level templates merged into user settings when the plugin is
# enabled.  A missing scope means the plugin has nothing to configure there.

AragonGovern:
  name: AragonGovern
  author: Evalir
  version: 0.1.3
  website: https://aragon.org/blog/snapshot
  icon: {_ICON_BASE}/aragon/logo.png
  defaults:
    space: {{}}
    proposal: {{}}

Chainlink:
  name: Chainlink Result Oracle
  author: mktcode
  version: 0.0.1
  website: https://...
  icon: https://...
  defaults:
    space:
      registry: "0x123"
    proposal:
      oracles:
        - "0xAbc"

Charts:
  name: Charts
  author: zerquix18
  version: 0.1.0
  icon: {_ICON_BASE}/charts/logo.png
  defaults:
    space: {{}}

CommentBox:
  name: Comment Box
  author: spiritbro1
  version: 0.0.1
  icon: {_ICON_BASE}/commentBox/logo.png
  defaults:
    space: {{}}

GnosisImpact:
  name: Gnosis Impact
  author: davidalbela
  version: 0.0.1
  website: https://gnosis.io
  icon: {_ICON_BASE}/gnosis/logo.png
  defaults:
    space: {{}}
    proposal: {{}}

HAL:
  name: HAL
  author: hal.xyz
  version: 1.0.0
  icon: {_ICON_BASE}/hal/logo.png
  defaults:
    space: {{}}

Poap:
  name: Poap Module
  author: Poap-xyz
  version: 1.0.0
  icon: {_ICON_BASE}/poap/logo.png
  defaults:
    space: {{}}

Quorum:
  name: Quorum
  author: lbeder
  version: 0.1.0
  icon: {_ICON_BASE}/quorum/logo.png
  defaults:
    space: {{}}

SafeSnap:
  name: Gnosis SafeSnap
  author: Gnosis
  version: 1.0.0
  website: https://safe.gnosis.io
  icon: {_ICON_BASE}/safeSnap/logo.png
  defaults:
    space:
      safes:
        - "0x123"
      oracles:
        - "0x456"
    proposal:
      safe: "0xAbc"
      oracle: "0x456"
      tx: {{}}
  fixed:
    space:
      - safes
      - oracles
    proposal:
      - tx

Subscribe:
  name: Subscribe
  author: Kapp
  version: 1.0.0
  icon: {_ICON_BASE}/subscribe/logo.png
  defaults:
    space: {{}}
"""


def builtin_catalog() -> dict[str, Any]:
    """Return the bundled catalog as freshly parsed plain data."""
    return yaml.safe_load(BUILTIN_CATALOG_YAML)


# ---------------------------------------------------------------------------
# Process-wide default store
# ---------------------------------------------------------------------------

_default_store: RegistryStore | None = None
_default_store_lock = threading.Lock()


def default_store() -> RegistryStore:
    """Return the store built from the bundled catalog, loading it on first use.

    The store is fully constructed before it is published, and the lock makes
    concurrent first callers agree on a single instance.
    """
    global _default_store
    store = _default_store
    if store is not None:
        return store
    with _default_store_lock:
        if _default_store is None:
            _default_store = CatalogLoader().load_string(
                BUILTIN_CATALOG_YAML, source_name="<builtin>"
            )
        return _default_store


def reset_default_store() -> None:
    """Forget the published default store (used by tests)."""
    global _default_store
    with _default_store_lock:
        _default_store = None
        logger.debug("Default plugin store reset")

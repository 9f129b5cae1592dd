"""Tests for the bundled catalog and the process-wide default store."""
from __future__ import annotations

import threading
from collections.abc import Iterator

import pytest

from governance_plugin_registry.catalog.builtin import (
    builtin_catalog,
    default_store,
    reset_default_store,
)
from governance_plugin_registry.errors import MergeConflictError
from governance_plugin_registry.registry.store import RegistryStore
from governance_plugin_registry.resolution.engine import resolve

_EXPECTED_KEYS = [
    "AragonGovern",
    "Chainlink",
    "Charts",
    "CommentBox",
    "GnosisImpact",
    "HAL",
    "Poap",
    "Quorum",
    "SafeSnap",
    "Subscribe",
]


@pytest.fixture(autouse=True)
def _fresh_default_store() -> Iterator[None]:
    reset_default_store()
    yield
    reset_default_store()


class TestBuiltinCatalog:
    def test_catalog_keys_in_order(self) -> None:
        assert list(builtin_catalog()) == _EXPECTED_KEYS

    def test_catalog_is_fresh_copy(self) -> None:
        first = builtin_catalog()
        first["Quorum"]["name"] = "changed"
        assert builtin_catalog()["Quorum"]["name"] == "Quorum"

    def test_addresses_stay_strings(self) -> None:
        assert builtin_catalog()["Chainlink"]["defaults"]["space"]["registry"] == "0x123"

    def test_catalog_loads_cleanly(self) -> None:
        store = RegistryStore.load(builtin_catalog())
        assert list(store.keys()) == _EXPECTED_KEYS

    def test_scope_presence_preserved(self) -> None:
        store = default_store()
        assert store.get("Charts").supports_scope("proposal") is False
        assert store.get("AragonGovern").scope_defaults("proposal") == {}

    def test_safesnap_defaults(self) -> None:
        effective = resolve(default_store(), "SafeSnap", "proposal", {"safe": "0xDef"})
        assert effective == {"safe": "0xDef", "oracle": "0x456", "tx": {}}

    def test_safesnap_tx_is_fixed(self) -> None:
        with pytest.raises(MergeConflictError):
            resolve(default_store(), "SafeSnap", "proposal", {"tx": "raw"}, strict=True)

    def test_proposal_capable_plugins(self) -> None:
        keys = [record.key for record in default_store().with_scope("proposal")]
        assert keys == ["AragonGovern", "Chainlink", "GnosisImpact", "SafeSnap"]


class TestDefaultStore:
    def test_loaded_once(self) -> None:
        assert default_store() is default_store()

    def test_source_name(self) -> None:
        assert default_store().source_name == "<builtin>"

    def test_reset_builds_equal_store(self) -> None:
        first = default_store()
        reset_default_store()
        second = default_store()
        assert first is not second
        assert first.fingerprint() == second.fingerprint()

    def test_concurrent_first_calls_share_instance(self) -> None:
        results: list[RegistryStore] = []
        lock = threading.Lock()
        barrier = threading.Barrier(8)

        def worker() -> None:
            barrier.wait()
            store = default_store()
            with lock:
                results.append(store)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert len(results) == 8
        assert all(store is results[0] for store in results)

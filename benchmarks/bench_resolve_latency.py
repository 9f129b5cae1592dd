"""Benchmark: resolve() latency, per-call mean/p99.

Measures the per-call latency of resolve() against the bundled catalog for a
proposal-scope merge with nested overrides.
"""
from __future__ import annotations

import json
import time
from pathlib import Path

from governance_plugin_registry.catalog.builtin import default_store
from governance_plugin_registry.resolution.engine import resolve

_WARMUP: int = 100
_ITERATIONS: int = 5_000
_OVERRIDES: dict[str, object] = {
    "safe": "0xDef",
    "tx": {"to": "0x1", "value": 0, "data": "0x"},
}


def bench_resolve_latency() -> dict[str, object]:
    """Benchmark resolve() per-call latency.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms, p99_latency_ms.
    """
    store = default_store()

    for _ in range(_WARMUP):
        resolve(store, "SafeSnap", "proposal", _OVERRIDES)

    latencies_ms: list[float] = []
    for _ in range(_ITERATIONS):
        t0 = time.perf_counter()
        resolve(store, "SafeSnap", "proposal", _OVERRIDES)
        latencies_ms.append((time.perf_counter() - t0) * 1000)

    sorted_lats = sorted(latencies_ms)
    n = len(sorted_lats)
    total = sum(latencies_ms) / 1000

    result: dict[str, object] = {
        "operation": "resolve_latency",
        "iterations": _ITERATIONS,
        "total_seconds": round(total, 4),
        "ops_per_second": round(_ITERATIONS / total, 1),
        "avg_latency_ms": round(sum(latencies_ms) / n, 4),
        "p99_latency_ms": round(sorted_lats[min(int(n * 0.99), n - 1)], 4),
    }
    print(
        f"[bench_resolve_latency] {result['operation']}: "
        f"p99={result['p99_latency_ms']:.4f}ms  "
        f"mean={result['avg_latency_ms']:.4f}ms"
    )
    return result


def run_benchmark() -> dict[str, object]:
    """Entry point returning the benchmark result dict."""
    return bench_resolve_latency()


if __name__ == "__main__":
    result = run_benchmark()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "resolve_latency_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")

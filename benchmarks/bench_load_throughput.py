"""Benchmark: catalog load throughput.

Measures how many full validate-and-build cycles of the bundled catalog
complete per second.
"""
from __future__ import annotations

import json
import time
from pathlib import Path

from governance_plugin_registry.catalog.builtin import BUILTIN_CATALOG_YAML
from governance_plugin_registry.registry.loader import CatalogLoader

_WARMUP: int = 10
_ITERATIONS: int = 200


def bench_load_throughput() -> dict[str, object]:
    """Benchmark CatalogLoader.load_string() on the bundled catalog."""
    loader = CatalogLoader()

    for _ in range(_WARMUP):
        loader.load_string(BUILTIN_CATALOG_YAML)

    t0 = time.perf_counter()
    for _ in range(_ITERATIONS):
        loader.load_string(BUILTIN_CATALOG_YAML)
    total = time.perf_counter() - t0

    result: dict[str, object] = {
        "operation": "catalog_load_throughput",
        "iterations": _ITERATIONS,
        "total_seconds": round(total, 4),
        "ops_per_second": round(_ITERATIONS / total, 1),
        "avg_latency_ms": round(total / _ITERATIONS * 1000, 4),
    }
    print(
        f"[bench_load_throughput] {result['operation']}: "
        f"{result['ops_per_second']} loads/s"
    )
    return result


def run_benchmark() -> dict[str, object]:
    """Entry point returning the benchmark result dict."""
    return bench_load_throughput()


if __name__ == "__main__":
    result = run_benchmark()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "load_throughput_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")

"""
Enumerable Performance Measurement Examples

Run:
  python examples/performance.py --size 100000 --runs 5 --out examples/benchmark_results.json

This script benchmarks positional access on a few representative chains:
- select + skip + take over a list (seekable: closed-form count and lookups)
- concat of two lists (seekable)
- where + take over the same list (scanning)
- negative-start splice (seekable once the count is known)

Each chain is measured for count(), element_at() near the end and last().
"""

from __future__ import annotations

import argparse
import json
import random
import statistics
import time
from typing import Dict, List

from linqer import Enumerable


def gen_values(n: int) -> List[int]:
    random.seed(42)
    return [random.randint(0, 1000) for _ in range(n)]


def time_query(fn, runs: int) -> Dict[str, float]:
    durations: List[float] = []
    for _ in range(runs):
        t0 = time.perf_counter()
        fn()
        t1 = time.perf_counter()
        durations.append((t1 - t0) * 1000.0)  # ms
    avg = sum(durations) / len(durations)
    p50 = statistics.median(durations)
    p95 = statistics.quantiles(durations, n=20)[18] if len(durations) >= 20 else max(durations)
    std = statistics.pstdev(durations) if len(durations) > 1 else 0.0
    qps = 1000.0 / avg if avg > 0 else 0.0
    return {"avg_ms": avg, "p50_ms": p50, "p95_ms": p95, "std_ms": std, "qps": qps}


def build_chains(values: List[int]) -> Dict[str, Enumerable]:
    n = len(values)
    return {
        "select_skip_take": Enumerable(values).select(lambda x: x * 2).skip(n // 4).take(n // 2),
        "concat": Enumerable(values).concat(values),
        "where_take": Enumerable(values).where(lambda x: x >= 0).take(n // 2),
        "splice": Enumerable(values).splice(-(n // 2), 10, -1, -2),
    }


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--size", type=int, default=50000, help="Number of values to generate")
    parser.add_argument("--runs", type=int, default=5, help="Repetitions per query")
    parser.add_argument("--out", type=str, default="", help="Optional JSON output path")
    args = parser.parse_args()

    chains = build_chains(gen_values(args.size))

    results = {"config": {"size": args.size, "runs": args.runs}}
    for label, q in chains.items():
        results[label] = {"explain": q.explain()}
        for op, fn in (("count", q.count),
                       ("element_at", lambda q=q: q.element_at(q.count() - 1)),
                       ("last", q.last)):
            stats = time_query(fn, args.runs)
            results[label][op] = stats
            print(f"{label}:{op} [{'seek' if q.seekable else 'scan'}] -> avg={stats['avg_ms']:.3f} ms, "
                  f"p50={stats['p50_ms']:.3f} ms, p95={stats['p95_ms']:.3f} ms, qps={stats['qps']:.1f}")

    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            json.dump(results, f, indent=2)
        print(f"Saved results to {args.out}")


if __name__ == "__main__":
    main()

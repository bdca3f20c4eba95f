#!/usr/bin/env python3
"""Benchmark MinMaxLTTB against plain LTTB on synthetic signals.

Each configuration runs the serial and threaded MinMaxLTTB pipelines plus a
plain LTTB pass over the same signal and reports the mean wall time per call
together with the peak Python memory observed while downsampling.
"""

from __future__ import annotations

import argparse
import gc
import math
import statistics
import sys
import time
import tracemalloc
from dataclasses import dataclass
from typing import Callable

import numpy as np

from tsdecimate.downsampler import default_thread_count
from tsdecimate.lttb import lttb_without_x
from tsdecimate.minmaxlttb import (
    minmaxlttb_without_x,
    minmaxlttb_without_x_parallel,
)


@dataclass
class BenchmarkResult:
    method: str
    samples: int
    n_out: int
    call_ms: float
    peak_bytes: int


def _format_bytes(num_bytes: int) -> str:
    if num_bytes <= 0:
        return "0 B"
    units = ["B", "KiB", "MiB", "GiB"]
    value = float(num_bytes)
    unit = units[0]
    for unit in units[1:]:
        if value < 1024.0:
            break
        value /= 1024.0
    else:
        unit = units[-1]
    return f"{value:.1f} {unit}"


def _build_signal(n_samples: int, seed: int = 0) -> np.ndarray:
    t = np.linspace(0.0, 1.0, n_samples, dtype=np.float64)
    signal = np.sin(2 * math.pi * 7.0 * t)
    signal += 0.3 * np.sin(2 * math.pi * 190.0 * t)
    signal += 0.05 * np.random.default_rng(seed).standard_normal(n_samples)
    return signal.astype(np.float32, copy=False)


def _run(method: str, fn: Callable[[], np.ndarray], samples: int, n_out: int, iterations: int) -> BenchmarkResult:
    fn()  # warm-up
    timings: list[float] = []
    gc.collect()
    tracemalloc.start()
    for _ in range(iterations):
        start = time.perf_counter()
        fn()
        timings.append((time.perf_counter() - start) * 1000.0)
    _, peak = tracemalloc.get_traced_memory()
    tracemalloc.stop()
    return BenchmarkResult(method, samples, n_out, statistics.fmean(timings), peak)


def main(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--samples",
        type=int,
        action="append",
        help="Signal length (repeatable; default: 100k, 1M, 5M)",
    )
    parser.add_argument("--n-out", type=int, default=2000, help="Points to keep")
    parser.add_argument("--minmax-ratio", type=int, default=4, help="Preselection oversampling")
    parser.add_argument("--threads", type=int, default=default_thread_count(), help="Worker threads")
    parser.add_argument("--iterations", type=int, default=5, help="Calls per method")
    parser.add_argument("--skip-lttb", action="store_true", help="Skip the plain LTTB baseline")
    args = parser.parse_args(argv)

    for samples in args.samples or [100_000, 1_000_000, 5_000_000]:
        y = _build_signal(samples)
        methods: list[tuple[str, Callable[[], np.ndarray]]] = [
            ("minmaxlttb", lambda: minmaxlttb_without_x(y, args.n_out, args.minmax_ratio)),
            (
                f"minmaxlttb x{args.threads}",
                lambda: minmaxlttb_without_x_parallel(y, args.n_out, args.minmax_ratio, args.threads),
            ),
        ]
        if not args.skip_lttb:
            methods.append(("lttb", lambda: lttb_without_x(y, args.n_out)))

        print(f"== Samples: {samples:,} -> {args.n_out:,} points ==")
        for name, fn in methods:
            result = _run(name, fn, samples, args.n_out, args.iterations)
            print(
                "{method:>16}: {ms:.2f} ms avg, peak {mem}".format(
                    method=result.method,
                    ms=result.call_ms,
                    mem=_format_bytes(result.peak_bytes),
                )
            )

    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))

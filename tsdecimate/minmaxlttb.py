"""MinMax-LTTB: min/max preselection followed by LTTB on the survivors.

The min/max pass runs on the interior of the series (the endpoints are
re-added explicitly) and keeps ``n_out * minmax_ratio`` candidates. LTTB then
reduces the candidates to ``n_out`` points, and the chosen positions are
mapped back to indices of the original series.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Union

import numpy as np

from tsdecimate import minmax
from tsdecimate.lttb import lttb_with_x, lttb_without_x

__all__ = [
    "Serial",
    "Parallel",
    "MinMaxStrategy",
    "compose_indices",
    "minmaxlttb_generic",
    "minmaxlttb_generic_without_x",
    "minmaxlttb_with_x",
    "minmaxlttb_without_x",
    "minmaxlttb_with_x_parallel",
    "minmaxlttb_without_x_parallel",
]

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class Serial:
    """Min/max selection called as ``func(*arrays, n_out)``."""

    func: Callable[..., np.ndarray]

    def __call__(self, *arrays: np.ndarray, n_out: int) -> np.ndarray:
        return self.func(*arrays, n_out)


@dataclass(frozen=True)
class Parallel:
    """Min/max selection called as ``func(*arrays, n_out, n_threads)``."""

    func: Callable[..., np.ndarray]
    n_threads: int | None = None

    def __call__(self, *arrays: np.ndarray, n_out: int) -> np.ndarray:
        if self.n_threads is None:
            raise ValueError("parallel min/max selection requires n_threads")
        return self.func(*arrays, n_out, self.n_threads)


MinMaxStrategy = Union[Serial, Parallel]


def compose_indices(candidates: np.ndarray, positions: np.ndarray) -> np.ndarray:
    """Translate positions in ``candidates`` into original sample indices."""
    positions = np.asarray(positions, dtype=np.int64)
    if positions.size:
        assert positions[0] >= 0 and positions[-1] < candidates.size, "position out of range"
        assert np.all(np.diff(positions) > 0), "positions must be strictly increasing"
    return candidates[positions]


def _check_contract(n_out: int, minmax_ratio: int) -> None:
    if minmax_ratio <= 1:
        raise ValueError("minmax_ratio must be greater than 1")
    if n_out < 1:
        raise ValueError("n_out must be positive")


def _candidates(interior: np.ndarray, n: int) -> np.ndarray:
    # Interior indices are relative to the slice [1, n - 1)
    candidates = np.empty(interior.size + 2, dtype=np.int64)
    candidates[0] = 0
    candidates[1:-1] = interior + 1
    candidates[-1] = n - 1
    assert np.all(np.diff(candidates) > 0), "min/max candidates must be strictly increasing"
    return candidates


def minmaxlttb_generic(
    x: np.ndarray,
    y: np.ndarray,
    n_out: int,
    minmax_ratio: int,
    strategy: MinMaxStrategy,
) -> np.ndarray:
    """Run MinMax-LTTB on ``(x, y)`` with the given min/max ``strategy``."""
    x = np.asarray(x)
    y = np.asarray(y)
    if x.size != y.size:
        raise ValueError("x and y must have the same length")
    n = x.size
    _check_contract(n_out, minmax_ratio)

    if n // n_out > minmax_ratio:
        interior = strategy(x[1 : n - 1], y[1 : n - 1], n_out=n_out * minmax_ratio)
        candidates = _candidates(np.asarray(interior, dtype=np.int64), n)
        LOG.debug(
            "MinMax preselection kept %d of %d samples (n_out=%d, ratio=%d)",
            candidates.size,
            n,
            n_out,
            minmax_ratio,
        )
        positions = lttb_with_x(x[candidates], y[candidates], n_out)
        return compose_indices(candidates, positions)

    LOG.debug("Skipping MinMax preselection for %d samples (n_out=%d)", n, n_out)
    return lttb_with_x(x, y, n_out)


def minmaxlttb_generic_without_x(
    y: np.ndarray,
    n_out: int,
    minmax_ratio: int,
    strategy: MinMaxStrategy,
) -> np.ndarray:
    """Run MinMax-LTTB on ``y`` sampled at unit spacing.

    After preselection the survivors are irregularly spaced, so the second
    LTTB pass uses the candidate indices themselves as x-coordinates rather
    than assuming unit spacing between candidates.
    """
    y = np.asarray(y)
    n = y.size
    _check_contract(n_out, minmax_ratio)

    if n // n_out > minmax_ratio:
        interior = strategy(y[1 : n - 1], n_out=n_out * minmax_ratio)
        candidates = _candidates(np.asarray(interior, dtype=np.int64), n)
        LOG.debug(
            "MinMax preselection kept %d of %d samples (n_out=%d, ratio=%d)",
            candidates.size,
            n,
            n_out,
            minmax_ratio,
        )
        positions = lttb_with_x(candidates, y[candidates], n_out)
        return compose_indices(candidates, positions)

    LOG.debug("Skipping MinMax preselection for %d samples (n_out=%d)", n, n_out)
    return lttb_without_x(y, n_out)


def minmaxlttb_with_x(x: np.ndarray, y: np.ndarray, n_out: int, minmax_ratio: int) -> np.ndarray:
    return minmaxlttb_generic(x, y, n_out, minmax_ratio, Serial(minmax.min_max_with_x))


def minmaxlttb_without_x(y: np.ndarray, n_out: int, minmax_ratio: int) -> np.ndarray:
    return minmaxlttb_generic_without_x(y, n_out, minmax_ratio, Serial(minmax.min_max_without_x))


def minmaxlttb_with_x_parallel(
    x: np.ndarray, y: np.ndarray, n_out: int, minmax_ratio: int, n_threads: int
) -> np.ndarray:
    return minmaxlttb_generic(
        x, y, n_out, minmax_ratio, Parallel(minmax.min_max_with_x_parallel, n_threads)
    )


def minmaxlttb_without_x_parallel(
    y: np.ndarray, n_out: int, minmax_ratio: int, n_threads: int
) -> np.ndarray:
    return minmaxlttb_generic_without_x(
        y, n_out, minmax_ratio, Parallel(minmax.min_max_without_x_parallel, n_threads)
    )

"""Min/max bucket selection for dense time-series."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import numpy as np

__all__ = [
    "min_max_without_x",
    "min_max_with_x",
    "min_max_without_x_parallel",
    "min_max_with_x_parallel",
]


def _check_n_out(n_out: int) -> None:
    if n_out < 2:
        raise ValueError("n_out must be >= 2")


def _check_threads(n_threads: int) -> None:
    if n_threads < 1:
        raise ValueError("n_threads must be positive")


def _block_edges(n: int, n_bins: int) -> np.ndarray:
    """Return ``n_bins + 1`` sample-space edges covering ``[0, n)``."""
    # n - 1 matches the delta of the index range 0..n-1
    block_size = (n - 1) / n_bins
    edges = np.empty(n_bins + 1, dtype=np.int64)
    edges[0] = 0
    edges[1:] = (block_size * np.arange(1, n_bins + 1, dtype=np.float64)).astype(np.int64) + 1
    edges[-1] = n
    np.maximum.accumulate(edges, out=edges)
    return edges


def _equidistant_edges(x: np.ndarray, n_bins: int) -> np.ndarray:
    """Return edges of ``n_bins`` bins of equal width in x-space.

    Empty bins show up as repeated edges.
    """
    n = x.size
    x_first = float(x[0])
    x_last = float(x[-1])
    step = x_last / n_bins - x_first / n_bins
    bounds = x_first + step * np.arange(1, n_bins, dtype=np.float64)
    edges = np.empty(n_bins + 1, dtype=np.int64)
    edges[0] = 0
    edges[1:-1] = np.searchsorted(x, bounds, side="right")
    edges[-1] = n
    return edges


def _select_bins(y: np.ndarray, edges: np.ndarray, keep_small: bool) -> np.ndarray:
    out: list[np.ndarray] = []
    for start, end in zip(edges[:-1], edges[1:]):
        if end <= start:
            continue
        if keep_small and end - start <= 2:
            out.append(np.arange(start, end, dtype=np.int64))
            continue
        segment = y[start:end]
        local_min = int(np.argmin(segment))
        local_max = int(np.argmax(segment))
        if local_min == local_max:
            idxs = [local_min]
        elif local_min < local_max:
            idxs = [local_min, local_max]
        else:
            idxs = [local_max, local_min]
        out.append(start + np.asarray(idxs, dtype=np.int64))
    if not out:
        return np.empty(0, dtype=np.int64)
    return np.concatenate(out)


def _select_bins_parallel(
    y: np.ndarray, edges: np.ndarray, keep_small: bool, n_threads: int
) -> np.ndarray:
    n_bins = edges.size - 1
    n_groups = min(n_threads, n_bins)
    # Groups share their boundary edge so every bin lands in exactly one group
    splits = np.linspace(0, n_bins, num=n_groups + 1, dtype=np.int64)
    groups = [edges[lo : hi + 1] for lo, hi in zip(splits[:-1], splits[1:]) if hi > lo]
    if len(groups) == 1:
        return _select_bins(y, edges, keep_small)
    with ThreadPoolExecutor(max_workers=len(groups)) as executor:
        futures = [executor.submit(_select_bins, y, group, keep_small) for group in groups]
        parts = [future.result() for future in futures]
    return np.concatenate(parts)


def min_max_without_x(y: np.ndarray, n_out: int) -> np.ndarray:
    """Return indices of the min and max sample of ``n_out // 2`` equal blocks.

    Parameters
    ----------
    y : np.ndarray
        Signal values.
    n_out : int
        Upper bound on the number of returned indices. An odd value is
        rounded down to the number of whole min/max pairs.

    Returns
    -------
    np.ndarray
        Ascending, duplicate-free int64 indices into ``y``. When ``n_out``
        covers the whole input every index is returned.
    """
    _check_n_out(n_out)
    y = np.asarray(y)
    if n_out >= y.size:
        return np.arange(y.size, dtype=np.int64)
    return _select_bins(y, _block_edges(y.size, n_out // 2), keep_small=False)


def min_max_with_x(x: np.ndarray, y: np.ndarray, n_out: int) -> np.ndarray:
    """Like :func:`min_max_without_x` but with bins of equal width along ``x``.

    ``x`` must be sorted ascending. Bins holding no sample are skipped and
    bins with at most two samples contribute all of them.
    """
    _check_n_out(n_out)
    x = np.asarray(x)
    y = np.asarray(y)
    if x.size != y.size:
        raise ValueError("x and y must have the same length")
    if n_out >= y.size:
        return np.arange(y.size, dtype=np.int64)
    return _select_bins(y, _equidistant_edges(x, n_out // 2), keep_small=True)


def min_max_without_x_parallel(y: np.ndarray, n_out: int, n_threads: int) -> np.ndarray:
    """Threaded :func:`min_max_without_x`; output does not depend on ``n_threads``."""
    _check_n_out(n_out)
    _check_threads(n_threads)
    y = np.asarray(y)
    if n_out >= y.size:
        return np.arange(y.size, dtype=np.int64)
    edges = _block_edges(y.size, n_out // 2)
    return _select_bins_parallel(y, edges, False, n_threads)


def min_max_with_x_parallel(
    x: np.ndarray, y: np.ndarray, n_out: int, n_threads: int
) -> np.ndarray:
    """Threaded :func:`min_max_with_x`; output does not depend on ``n_threads``."""
    _check_n_out(n_out)
    _check_threads(n_threads)
    x = np.asarray(x)
    y = np.asarray(y)
    if x.size != y.size:
        raise ValueError("x and y must have the same length")
    if n_out >= y.size:
        return np.arange(y.size, dtype=np.int64)
    edges = _equidistant_edges(x, n_out // 2)
    return _select_bins_parallel(y, edges, True, n_threads)

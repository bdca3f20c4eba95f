"""Largest-Triangle-Three-Buckets point selection.

Reference: Sveinn Steinarsson, *Downsampling Time Series for Visual
Representation*, MSc thesis, University of Iceland, 2013.
"""
from __future__ import annotations

import math

import numpy as np

__all__ = ["lttb_with_x", "lttb_without_x"]


def _lttb(x: np.ndarray, y: np.ndarray, n_out: int) -> np.ndarray:
    n = y.size
    if n_out >= n:
        return np.arange(n, dtype=np.int64)
    if n_out < 3:
        raise ValueError("n_out must be >= 3 to downsample with LTTB")

    x = x.astype(np.float64, copy=False)
    y = y.astype(np.float64, copy=False)

    # First and last samples are fixed; the rest is split into n_out - 2 buckets
    every = (n - 2) / (n_out - 2)
    out = np.empty(n_out, dtype=np.int64)
    out[0] = 0
    out[-1] = n - 1

    a = 0
    for i in range(n_out - 2):
        avg_start = math.floor(every * (i + 1)) + 1
        avg_end = min(math.floor(every * (i + 2)) + 1, n)
        avg_x = x[avg_start:avg_end].mean()
        avg_y = y[avg_start:avg_end].mean()

        start = math.floor(every * i) + 1
        end = avg_start
        ax = x[a]
        ay = y[a]
        areas = np.abs(
            (ax - avg_x) * (y[start:end] - ay) - (ax - x[start:end]) * (avg_y - ay)
        )
        a = start + int(np.argmax(areas))
        out[i + 1] = a
    return out


def lttb_with_x(x: np.ndarray, y: np.ndarray, n_out: int) -> np.ndarray:
    """Select ``n_out`` sample indices that best preserve the visual shape.

    Parameters
    ----------
    x : np.ndarray
        Horizontal coordinates, sorted ascending (spacing may be irregular).
    y : np.ndarray
        Signal values.
    n_out : int
        Number of points to keep.

    Returns
    -------
    np.ndarray
        ``min(n_out, len(y))`` ascending int64 indices, always starting at 0
        and ending at ``len(y) - 1``.
    """
    x = np.asarray(x)
    y = np.asarray(y)
    if x.size != y.size:
        raise ValueError("x and y must have the same length")
    return _lttb(x, y, n_out)


def lttb_without_x(y: np.ndarray, n_out: int) -> np.ndarray:
    """LTTB assuming unit spacing between consecutive samples."""
    y = np.asarray(y)
    return _lttb(np.arange(y.size, dtype=np.float64), y, n_out)

"""Downsampler objects validating user input before dispatching to the kernels."""
from __future__ import annotations

import logging
import operator
import os

import numpy as np

from tsdecimate import lttb, minmax, minmaxlttb

__all__ = [
    "AbstractDownsampler",
    "MinMaxDownsampler",
    "LTTBDownsampler",
    "MinMaxLTTBDownsampler",
    "DEFAULT_MINMAX_RATIO",
    "default_thread_count",
    "downsample_xy",
]

LOG = logging.getLogger(__name__)

DEFAULT_MINMAX_RATIO = 4


def default_thread_count() -> int:
    return max(1, os.cpu_count() or 1)


def _resolve_threads(n_threads: int | None) -> int:
    if n_threads is None:
        return default_thread_count()
    n_threads = operator.index(n_threads)
    if n_threads < 1:
        raise ValueError("n_threads must be positive")
    return n_threads


def _as_1d(arr, name: str) -> np.ndarray:
    arr = np.asarray(arr)
    if arr.ndim != 1:
        raise ValueError(f"{name} must be one-dimensional")
    if arr.dtype.kind in "mM":
        # Datetimes and durations are binned on their integer representation
        arr = arr.view(np.int64)
    elif arr.dtype.kind not in "biuf":
        raise ValueError(f"{name} must hold numeric values, got dtype {arr.dtype}")
    return arr


class AbstractDownsampler:
    """Shared validation for the concrete downsamplers.

    ``downsample`` accepts either ``(y,)`` or ``(x, y)`` and returns int64
    indices into the input.
    """

    min_n_out = 1

    def _check_n_out(self, n_out: int) -> int:
        n_out = operator.index(n_out)
        if n_out < self.min_n_out:
            raise ValueError(f"n_out must be >= {self.min_n_out}")
        return n_out

    def downsample(self, *data, n_out: int, **kwargs) -> np.ndarray:
        if len(data) == 1:
            x, y = None, _as_1d(data[0], "y")
        elif len(data) == 2:
            x, y = _as_1d(data[0], "x"), _as_1d(data[1], "y")
            if x.size != y.size:
                raise ValueError(f"x and y must have the same length ({x.size} != {y.size})")
        else:
            raise ValueError("downsample expects (y,) or (x, y)")
        n_out = self._check_n_out(n_out)
        if y.size == 0:
            return np.empty(0, dtype=np.int64)
        if y.size <= n_out:
            return np.arange(y.size, dtype=np.int64)
        return self._downsample(x, y, n_out, **kwargs)

    def _downsample(self, x, y, n_out: int, **kwargs) -> np.ndarray:
        raise NotImplementedError


class MinMaxDownsampler(AbstractDownsampler):
    """Keep the min and max of ``n_out // 2`` buckets."""

    min_n_out = 2

    def _check_n_out(self, n_out: int) -> int:
        n_out = super()._check_n_out(n_out)
        if n_out % 2:
            raise ValueError("n_out must be even for min/max downsampling")
        return n_out

    def _downsample(self, x, y, n_out, parallel: bool = False, n_threads: int | None = None):
        if parallel:
            n_threads = _resolve_threads(n_threads)
            if x is None:
                return minmax.min_max_without_x_parallel(y, n_out, n_threads)
            return minmax.min_max_with_x_parallel(x, y, n_out, n_threads)
        if x is None:
            return minmax.min_max_without_x(y, n_out)
        return minmax.min_max_with_x(x, y, n_out)


class LTTBDownsampler(AbstractDownsampler):
    """Plain Largest-Triangle-Three-Buckets."""

    min_n_out = 3

    def _downsample(self, x, y, n_out):
        if x is None:
            return lttb.lttb_without_x(y, n_out)
        return lttb.lttb_with_x(x, y, n_out)


class MinMaxLTTBDownsampler(AbstractDownsampler):
    """Min/max preselection of ``n_out * minmax_ratio`` candidates, then LTTB.

    Parameters accepted by :meth:`downsample`:

    minmax_ratio : int
        Oversampling factor of the preselection, at least 2.
    parallel : bool
        Run the preselection on a thread pool.
    n_threads : int, optional
        Worker count for ``parallel``; defaults to the number of CPUs.
    """

    min_n_out = 3

    def _downsample(
        self,
        x,
        y,
        n_out,
        minmax_ratio: int = DEFAULT_MINMAX_RATIO,
        parallel: bool = False,
        n_threads: int | None = None,
    ):
        minmax_ratio = operator.index(minmax_ratio)
        if minmax_ratio < 2:
            raise ValueError("minmax_ratio must be >= 2")
        if parallel:
            n_threads = _resolve_threads(n_threads)
            LOG.debug("MinMaxLTTB on %d samples with %d threads", y.size, n_threads)
            if x is None:
                return minmaxlttb.minmaxlttb_without_x_parallel(y, n_out, minmax_ratio, n_threads)
            return minmaxlttb.minmaxlttb_with_x_parallel(x, y, n_out, minmax_ratio, n_threads)
        if x is None:
            return minmaxlttb.minmaxlttb_without_x(y, n_out, minmax_ratio)
        return minmaxlttb.minmaxlttb_with_x(x, y, n_out, minmax_ratio)


def downsample_xy(
    x: np.ndarray,
    y: np.ndarray,
    n_out: int,
    *,
    minmax_ratio: int = DEFAULT_MINMAX_RATIO,
    parallel: bool = False,
    n_threads: int | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Return the MinMaxLTTB-selected samples of ``(x, y)``.

    If the input already fits in ``n_out`` points the original arrays are
    returned unchanged.
    """
    if len(x) <= n_out and len(x) == len(y):
        return x, y
    idx = MinMaxLTTBDownsampler().downsample(
        x,
        y,
        n_out=n_out,
        minmax_ratio=minmax_ratio,
        parallel=parallel,
        n_threads=n_threads,
    )
    return np.asarray(x)[idx], np.asarray(y)[idx]

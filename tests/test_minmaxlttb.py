import os

import numpy as np
import pytest

from tsdecimate.lttb import lttb_with_x, lttb_without_x
from tsdecimate.minmaxlttb import (
    Parallel,
    Serial,
    compose_indices,
    minmaxlttb_generic,
    minmaxlttb_generic_without_x,
    minmaxlttb_with_x,
    minmaxlttb_with_x_parallel,
    minmaxlttb_without_x,
    minmaxlttb_without_x_parallel,
)

CORES = os.cpu_count() or 1
THREADS = [1, max(1, CORES // 2), CORES, CORES * 2]


def _random_walk(n: int, seed: int = 0) -> np.ndarray:
    return np.cumsum(np.random.default_rng(seed).standard_normal(n))


def test_minmaxlttb_with_x():
    x = np.arange(10)
    y = np.arange(10, dtype=np.float64)
    np.testing.assert_array_equal(minmaxlttb_with_x(x, y, 4, 2), [0, 1, 5, 9])


def test_minmaxlttb_without_x():
    y = np.arange(10, dtype=np.float64)
    np.testing.assert_array_equal(minmaxlttb_without_x(y, 4, 2), [0, 1, 5, 9])


@pytest.mark.parametrize("n_threads", THREADS)
def test_minmaxlttb_with_x_parallel(n_threads: int):
    x = np.arange(10)
    y = np.arange(10, dtype=np.float64)
    np.testing.assert_array_equal(minmaxlttb_with_x_parallel(x, y, 4, 2, n_threads), [0, 1, 5, 9])


@pytest.mark.parametrize("n_threads", THREADS)
def test_minmaxlttb_without_x_parallel(n_threads: int):
    y = np.arange(10, dtype=np.float64)
    np.testing.assert_array_equal(minmaxlttb_without_x_parallel(y, 4, 2, n_threads), [0, 1, 5, 9])


def test_compose_indices():
    candidates = np.array([0, 3, 7, 12, 19])
    np.testing.assert_array_equal(compose_indices(candidates, [0, 2, 4]), [0, 7, 19])
    np.testing.assert_array_equal(compose_indices(candidates, np.arange(5)), candidates)


def test_compose_indices_rejects_unordered_positions():
    with pytest.raises(AssertionError):
        compose_indices(np.array([0, 3, 7]), [0, 2, 1])
    with pytest.raises(AssertionError):
        compose_indices(np.array([0, 3, 7]), [0, 3])


def test_falls_back_to_lttb_below_ratio():
    y = _random_walk(50)
    x = np.linspace(0.0, 1.0, 50)
    # 50 // 10 == 5 is not above the ratio
    np.testing.assert_array_equal(minmaxlttb_without_x(y, 10, 5), lttb_without_x(y, 10))
    np.testing.assert_array_equal(minmaxlttb_with_x(x, y, 10, 5), lttb_with_x(x, y, 10))


@pytest.mark.parametrize("with_x", [False, True])
def test_reduction_path_properties(with_x: bool):
    y = _random_walk(10_000, seed=5)
    if with_x:
        x = np.cumsum(np.random.default_rng(6).uniform(0.5, 1.5, size=y.size))
        idx = minmaxlttb_with_x(x, y, 100, 4)
    else:
        idx = minmaxlttb_without_x(y, 100, 4)
    assert idx.size == 100
    assert idx[0] == 0
    assert idx[-1] == y.size - 1
    assert np.all(np.diff(idx) > 0)


def test_prefilter_runs_on_interior_and_candidates_act_as_x():
    y = _random_walk(200, seed=2)
    calls = []

    def fake_minmax(values, n_out):
        calls.append((values.size, n_out))
        return np.array([3, 4, 5, 90, 150])

    idx = minmaxlttb_generic_without_x(y, 5, 2, Serial(fake_minmax))

    assert calls == [(198, 10)]
    candidates = np.array([0, 4, 5, 6, 91, 151, 199])
    expected = candidates[lttb_with_x(candidates, y[candidates], 5)]
    np.testing.assert_array_equal(idx, expected)


def test_with_x_gathers_candidate_coordinates():
    x = np.linspace(0.0, 20.0, 200)
    y = _random_walk(200, seed=4)
    seen = {}

    def fake_minmax(xs, ys, n_out):
        seen["first"] = (xs[0], ys[0])
        return np.array([10, 20, 30, 40, 50, 60])

    idx = minmaxlttb_generic(x, y, 5, 3, Serial(fake_minmax))

    assert seen["first"] == (x[1], y[1])
    candidates = np.array([0, 11, 21, 31, 41, 51, 61, 199])
    expected = candidates[lttb_with_x(x[candidates], y[candidates], 5)]
    np.testing.assert_array_equal(idx, expected)


def test_input_is_not_modified():
    y = _random_walk(5_000, seed=9)
    x = np.arange(y.size)
    y_copy = y.copy()
    minmaxlttb_with_x(x, y, 50, 4)
    minmaxlttb_without_x(y, 50, 4)
    np.testing.assert_array_equal(y, y_copy)
    np.testing.assert_array_equal(x, np.arange(y.size))


def test_parallel_strategy_requires_thread_count():
    y = _random_walk(1_000)
    with pytest.raises(ValueError):
        minmaxlttb_generic_without_x(y, 10, 4, Parallel(lambda *a: np.arange(3)))


def test_contract_violations():
    y = np.arange(100, dtype=np.float64)
    with pytest.raises(ValueError):
        minmaxlttb_with_x(np.arange(99), y, 10, 2)
    with pytest.raises(ValueError):
        minmaxlttb_without_x(y, 10, 1)
    with pytest.raises(ValueError):
        minmaxlttb_without_x(y, 0, 2)


@pytest.mark.parametrize("n_threads", THREADS)
def test_many_random_runs_same_output(n_threads: int):
    rng = np.random.default_rng(n_threads)
    for _ in range(100):
        arr = rng.uniform(-1e6, 1e6, size=20_000).astype(np.float32)
        serial = minmaxlttb_without_x(arr, 100, 5)
        parallel = minmaxlttb_without_x_parallel(arr, 100, 5, n_threads)
        np.testing.assert_array_equal(serial, parallel)


@pytest.mark.parametrize("n_threads", THREADS)
def test_many_random_runs_same_output_with_x(n_threads: int):
    rng = np.random.default_rng(100 + n_threads)
    for _ in range(10):
        x = np.cumsum(rng.uniform(0.1, 1.0, size=20_000))
        y = rng.uniform(-1e6, 1e6, size=20_000).astype(np.float32)
        np.testing.assert_array_equal(
            minmaxlttb_with_x(x, y, 100, 5),
            minmaxlttb_with_x_parallel(x, y, 100, 5, n_threads),
        )

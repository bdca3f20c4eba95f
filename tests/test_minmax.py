import numpy as np
import pytest

from tsdecimate.minmax import (
    min_max_with_x,
    min_max_with_x_parallel,
    min_max_without_x,
    min_max_without_x_parallel,
)


def test_returns_all_indices_when_budget_covers_input():
    y = np.arange(6, dtype=np.float64)
    np.testing.assert_array_equal(min_max_without_x(y, 6), np.arange(6))
    np.testing.assert_array_equal(min_max_with_x(y, y, 10), np.arange(6))


def test_min_and_max_per_block_in_time_order():
    y = np.array([3, 1, 4, 1, 5, 9, 2, 6, 5, 3, 5], dtype=np.float64)
    # two blocks: [0, 6) and [6, 11)
    np.testing.assert_array_equal(min_max_without_x(y, 4), [1, 5, 6, 7])


def test_flat_block_contributes_a_single_index():
    y = np.zeros(20)
    np.testing.assert_array_equal(min_max_without_x(y, 4), [0, 10])


def test_random_signal_keeps_global_extrema():
    rng = np.random.default_rng(1)
    y = rng.standard_normal(5_000)
    idx = min_max_without_x(y, 100)
    assert idx.size <= 100
    assert np.all(np.diff(idx) > 0)
    assert int(np.argmin(y)) in idx
    assert int(np.argmax(y)) in idx


def test_with_x_skips_empty_bins():
    x = np.array([0, 1, 2, 3, 100, 101, 102, 103])
    y = np.array([0, 5, -1, 2, 7, 7, 3, 9], dtype=np.float64)
    # three bins of width ~34; the middle one holds no samples
    np.testing.assert_array_equal(min_max_with_x(x, y, 6), [1, 2, 6, 7])


def test_with_x_keeps_small_bins_whole():
    x = np.array([0, 1, 10, 11, 12, 13, 14])
    y = np.array([5, 4, 1, 2, 3, 8, 0], dtype=np.float64)
    np.testing.assert_array_equal(min_max_with_x(x, y, 4), [0, 1, 5, 6])


def test_with_x_length_mismatch():
    with pytest.raises(ValueError):
        min_max_with_x(np.arange(5), np.arange(4), 2)


def test_n_out_must_hold_a_pair():
    with pytest.raises(ValueError):
        min_max_without_x(np.arange(10), 1)


def test_parallel_requires_positive_threads():
    with pytest.raises(ValueError):
        min_max_without_x_parallel(np.arange(100), 10, 0)


@pytest.mark.parametrize("n_threads", [1, 2, 3, 7, 64])
def test_parallel_matches_serial(n_threads: int):
    rng = np.random.default_rng(n_threads)
    y = rng.standard_normal(10_001).astype(np.float32)
    x = np.cumsum(rng.uniform(0.1, 2.0, size=y.size))
    np.testing.assert_array_equal(
        min_max_without_x_parallel(y, 200, n_threads), min_max_without_x(y, 200)
    )
    np.testing.assert_array_equal(
        min_max_with_x_parallel(x, y, 200, n_threads), min_max_with_x(x, y, 200)
    )

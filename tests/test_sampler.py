import tracemalloc

import numpy as np
import pytest

import sampler
from sampler import count_inside, sample_worker, worker_stream


def test_boundary_counts_as_inside():
    xs = np.array([1.0, 0.0, 0.5, 0.9])
    ys = np.array([0.0, 1.0, 0.5, 0.9])

    assert count_inside(xs, ys) == 3


def test_zero_samples():
    assert sample_worker(42, 0, 0) == 0


def test_same_seed_and_worker_reproduce():
    assert sample_worker(42, 3, 5000) == sample_worker(42, 3, 5000)


def test_workers_get_distinct_streams():
    a = worker_stream(42, 0).random(16)
    b = worker_stream(42, 1).random(16)

    assert not np.array_equal(a, b)


def test_global_seed_changes_stream():
    a = worker_stream(1, 0).random(16)
    b = worker_stream(2, 0).random(16)

    assert not np.array_equal(a, b)


@pytest.mark.parametrize("dtype", [np.float64, np.float32])
def test_hits_within_bounds(dtype):
    hits = sample_worker(7, 11, 20_000, dtype)

    assert 0 <= hits <= 20_000
    # pi/4 of the points, well inside six standard deviations
    assert abs(hits / 20_000 - np.pi / 4) < 0.02


def test_chunked_draws(monkeypatch):
    monkeypatch.setattr(sampler, "CHUNK_SIZE", 7)

    hits = sample_worker(5, 0, 100)

    assert 0 <= hits <= 100
    assert hits == sample_worker(5, 0, 100)


def test_memory_bounded_by_chunk():
    tracemalloc.start()
    try:
        sample_worker(9, 0, 200 * sampler.CHUNK_SIZE)
        _, peak = tracemalloc.get_traced_memory()
    finally:
        tracemalloc.stop()

    # Two coordinate batches plus temporaries, not the whole share
    assert peak < 8 * sampler.CHUNK_SIZE * np.dtype(np.float64).itemsize

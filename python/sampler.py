import time

import numpy as np

# Draws per batch. A whole group of workers holds its batches at once,
# so 256 workers stay within a few tens of MB between them.
CHUNK_SIZE = 1 << 12


def new_global_seed():
    return time.time_ns() & 0xFFFFFFFFFFFFFFFF


def worker_stream(global_seed, worker_id):
    # Spawn keys give each worker an independent stream from one run seed
    seq = np.random.SeedSequence(global_seed, spawn_key=(worker_id,))
    return np.random.Generator(np.random.PCG64(seq))


def count_inside(xs, ys):
    # Points on the arc count as inside
    r2 = xs * xs
    r2 += ys * ys
    return int(np.count_nonzero(r2 <= 1.0))


def sample_worker(global_seed, worker_id, num_samples, dtype=np.float64):
    """Return how many of ``num_samples`` uniform points land in the quarter circle.

    The stream is rebuilt on every call from ``(global_seed, worker_id)`` so the
    same arguments always reproduce the same count.
    """
    rng = worker_stream(global_seed, worker_id)
    inside = 0
    remaining = num_samples

    while remaining > 0:
        n = min(remaining, CHUNK_SIZE)
        xs = rng.random(n, dtype=dtype)
        ys = rng.random(n, dtype=dtype)
        inside += count_inside(xs, ys)
        remaining -= n

    return inside

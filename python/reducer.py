import logging
import threading
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from errors import DeviceFailure
from sampler import sample_worker

logger = logging.getLogger(__name__)


def next_power_of_two(n):
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


def tree_reduce(values):
    """Sum counts with the same halving steps a worker group performs.

    The scratch is padded with zero slots up to a power of two, so any number
    of values reduces in log2 stages.
    """
    values = np.asarray(values, dtype=np.uint64)
    scratch = np.zeros(next_power_of_two(len(values)), dtype=np.uint64)
    scratch[:len(values)] = values

    stride = len(scratch) // 2
    while stride > 0:
        scratch[:stride] += scratch[stride:2 * stride]
        stride //= 2

    return int(scratch[0])


def combine_partials(partials):
    total = 0
    for partial in partials:
        total += int(partial)
    return total


def _cooperate(tid, group_size, scratch, barrier, sample):
    try:
        scratch[tid] = sample(tid)
        barrier.wait()

        # Guarded halving: slots past the group size act as zero padding
        stride = next_power_of_two(group_size) // 2
        while stride > 0:
            if tid < stride and tid + stride < group_size:
                scratch[tid] += scratch[tid + stride]
            barrier.wait()
            stride //= 2
    except Exception:
        # Release peers already parked on the barrier
        barrier.abort()
        raise

    if tid == 0:
        return int(scratch[0])
    return None


def run_group(group_id, workers_per_group, samples_per_worker, global_seed,
              sampler=sample_worker, dtype=np.float64):
    """Run one worker group and return its partial hit count.

    Every worker gets its own thread; all of them must be alive at once for
    the barrier to be satisfied. The scratch array belongs to this call only.
    """
    if workers_per_group == 0:
        return 0

    scratch = np.zeros(workers_per_group, dtype=np.uint64)
    barrier = threading.Barrier(workers_per_group)
    first_id = group_id * workers_per_group

    def sample(tid):
        return sampler(global_seed, first_id + tid, samples_per_worker, dtype)

    with ThreadPoolExecutor(max_workers=workers_per_group) as executor:
        futures = []
        try:
            for tid in range(workers_per_group):
                futures.append(executor.submit(
                    _cooperate, tid, workers_per_group, scratch, barrier, sample))
        except RuntimeError as err:
            # Workers already started would otherwise wait forever
            barrier.abort()
            raise DeviceFailure(f"start worker group {group_id}", err) from err

    errors = [f.exception() for f in futures if f.exception() is not None]
    if errors:
        # A broken barrier is a symptom; report the worker that caused it
        root = next(
            (e for e in errors if not isinstance(e, threading.BrokenBarrierError)),
            errors[0],
        )
        if isinstance(root, DeviceFailure):
            raise root
        raise DeviceFailure(f"worker group {group_id}", repr(root)) from root

    partial = futures[0].result()
    logger.debug("group %d partial sum %d", group_id, partial)
    return partial

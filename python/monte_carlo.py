import logging
import math
import time
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass

import numpy as np

from errors import DeviceFailure
from plan import make_plan
from reducer import combine_partials, run_group
from sampler import new_global_seed, sample_worker

logger = logging.getLogger(__name__)

DEFAULT_SAMPLES = 2**30
WORKERS_PER_GROUP = 256
GROUPS_PER_UNIT = 2

BACKENDS = ("process", "thread")


@dataclass(frozen=True)
class GlobalResult:
    total_hits: int
    actual_total_samples: int
    elapsed_time: float

    @property
    def pi_estimate(self):
        if self.actual_total_samples == 0:
            return None
        return 4.0 * self.total_hits / self.actual_total_samples

    @property
    def absolute_error(self):
        estimate = self.pi_estimate
        if estimate is None:
            return None
        return abs(estimate - math.pi)


def build_plan(total_samples, device):
    return make_plan(total_samples, device.compute_units * GROUPS_PER_UNIT, WORKERS_PER_GROUP)


def group_task(args):
    group_id, plan, global_seed, sampler, dtype = args
    return run_group(group_id, plan.workers_per_group, plan.samples_per_worker,
                     global_seed, sampler, dtype)


def dispatch(tasks, backend, processes):
    # A worker process that dies breaks the pool instead of losing its task
    pool_type = ProcessPoolExecutor if backend == "process" else ThreadPoolExecutor
    with pool_type(max_workers=processes) as executor:
        start = time.perf_counter()
        partials = list(executor.map(group_task, tasks))
        elapsed = time.perf_counter() - start
    return partials, elapsed


def monte_carlo_operation(total_samples, plan=None, *, device=None, seed=None,
                          backend="process", sampler=sample_worker,
                          dtype=np.float64, processes=None):
    """Estimate pi by sampling across a grid of worker groups.

    Each group is dispatched exactly once and returns one partial count; the
    partials are summed here. Only the dispatch and gather are timed. Any
    backend failure is raised as DeviceFailure with no partial result.
    """
    if backend not in BACKENDS:
        raise ValueError(f"unknown backend: {backend}")
    if plan is not None and plan.total_samples_requested != total_samples:
        raise ValueError(
            f"plan sized for {plan.total_samples_requested} samples, not {total_samples}")
    if plan is None:
        if device is None:
            raise ValueError("either plan or device is required")
        plan = build_plan(total_samples, device)
        processes = processes or device.compute_units
    if seed is None:
        seed = new_global_seed()

    if plan.actual_total_samples == 0:
        logger.debug("empty plan, nothing to dispatch")
        return GlobalResult(total_hits=0, actual_total_samples=0, elapsed_time=0.0)

    processes = min(processes or plan.worker_group_count, plan.worker_group_count)
    tasks = [(g, plan, seed, sampler, dtype) for g in range(plan.worker_group_count)]
    logger.debug("dispatching %d groups of %d workers on %d %s workers, seed %d",
                 plan.worker_group_count, plan.workers_per_group, processes, backend, seed)

    try:
        partials, elapsed = dispatch(tasks, backend, processes)
    except DeviceFailure:
        raise
    except (OSError, RuntimeError, MemoryError, ValueError) as err:
        raise DeviceFailure("dispatch worker groups", repr(err)) from err

    total_hits = combine_partials(partials)
    if total_hits > plan.actual_total_samples:
        raise DeviceFailure("combine partial results",
                            f"{total_hits} hits exceed {plan.actual_total_samples} samples")

    return GlobalResult(
        total_hits=total_hits,
        actual_total_samples=plan.actual_total_samples,
        elapsed_time=elapsed,
    )


def _format(value):
    return "undefined" if value is None else f"{value:.10f}"


def report(device, plan, result):
    print(f"Device: {device.name}")
    print(f"Worker groups: {plan.worker_group_count}")
    print(f"Workers per group: {plan.workers_per_group}")
    print(f"Samples per worker: {plan.samples_per_worker}")
    print(f"Requested samples: {plan.total_samples_requested}")
    print(f"Actual samples: {result.actual_total_samples}")
    print(f"Points inside circle: {result.total_hits}")
    print(f"Elapsed time: {result.elapsed_time * 1000:.3f}ms")
    print(f"Pi estimate: {_format(result.pi_estimate)}")
    print(f"Reference pi: {math.pi:.10f}")
    print(f"Absolute error: {_format(result.absolute_error)}")

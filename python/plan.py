from dataclasses import dataclass

from errors import InvalidInput

MAX_SAMPLES = 2**64 - 1


@dataclass(frozen=True)
class SamplePlan:
    total_samples_requested: int
    worker_group_count: int
    workers_per_group: int
    samples_per_worker: int
    actual_total_samples: int

    @property
    def total_workers(self):
        return self.worker_group_count * self.workers_per_group


def make_plan(total_samples, worker_group_count, workers_per_group):
    """Size the grid so every worker draws the same number of samples.

    Ceiling division means the actual total never undercounts the request.
    An empty grid yields a plan with no samples at all.
    """
    if total_samples < 0 or total_samples > MAX_SAMPLES:
        raise InvalidInput(f"sample count out of range: {total_samples}")
    if worker_group_count < 0 or workers_per_group < 0:
        raise InvalidInput("worker counts must be non-negative")

    total_workers = worker_group_count * workers_per_group
    if total_workers == 0:
        samples_per_worker = 0
    else:
        samples_per_worker = -(-total_samples // total_workers)

    return SamplePlan(
        total_samples_requested=total_samples,
        worker_group_count=worker_group_count,
        workers_per_group=workers_per_group,
        samples_per_worker=samples_per_worker,
        actual_total_samples=samples_per_worker * total_workers,
    )

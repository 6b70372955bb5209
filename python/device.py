import os
import platform
from dataclasses import dataclass


@dataclass(frozen=True)
class DeviceInfo:
    name: str
    compute_units: int


def query_device():
    # Affinity reflects what this process may actually schedule on
    if hasattr(os, "sched_getaffinity"):
        units = len(os.sched_getaffinity(0))
    else:
        units = os.cpu_count() or 1

    name = platform.processor() or platform.machine() or "unknown"
    return DeviceInfo(name=f"{name} (CPU)", compute_units=max(units, 1))

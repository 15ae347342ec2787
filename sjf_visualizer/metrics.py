from __future__ import annotations

from typing import Optional, Sequence

from .errors import EmptyResultError
from .models import Process, SimulationResult, Statistics


def compute_statistics(
    result: SimulationResult,
    processes: Optional[Sequence[Process]] = None,
) -> Statistics:
    """
    Compute averages, CPU utilization, throughput and idle time from a
    finished simulation.

    ``processes`` is the originating process set; when omitted the
    per-process stats of the result are used for the process count.
    """
    if not result.intervals:
        raise EmptyResultError("No simulation result yet; run a simulation first")

    per_process = list(result.stats.values())
    n = len(processes) if processes is not None else len(per_process)

    total_time = result.total_span
    busy_time = result.busy_time
    idle_time = max(0, total_time - busy_time)

    return Statistics(
        process_count=n,
        avg_waiting=sum(s.waiting for s in per_process) / n,
        avg_turnaround=sum(s.turnaround for s in per_process) / n,
        avg_response=sum(s.response for s in per_process) / n,
        busy_time=busy_time,
        total_time=total_time,
        idle_time=idle_time,
        cpu_utilization=busy_time / total_time * 100,
        throughput=n / total_time,
    )

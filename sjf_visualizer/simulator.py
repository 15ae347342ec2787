from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from .models import (
    EventKind,
    GanttInterval,
    Process,
    ProcessStats,
    SimulationEvent,
    SimulationResult,
)
from .validation import validate_process_set

logger = logging.getLogger(__name__)

PENDING = "pending"
READY = "ready"
SCHEDULED = "scheduled"


def simulate_sjf(processes: Sequence[Process]) -> SimulationResult:
    """
    Shortest Job First (non-preemptive).

    At each decision point, among processes that have arrived and have not
    started yet, choose the one with the smallest burst time. Ties go to the
    earlier arrival, then to the earlier position in ``processes``.

    The input is assumed to be validated already (see ``run_simulation``).
    """
    # Work on a copy so the caller's process set is never touched.
    procs: List[Process] = list(processes)
    order = {p.pid: idx for idx, p in enumerate(procs)}
    by_arrival = sorted(procs, key=lambda p: p.arrival)

    state: Dict[str, str] = {p.pid: PENDING for p in procs}
    ready: List[Process] = []

    time = 0
    intervals: List[GanttInterval] = []
    stats: Dict[str, ProcessStats] = {}
    events: List[SimulationEvent] = []
    scheduled = 0

    events.append(
        SimulationEvent(0, f"Simulation started with {len(procs)} processes.", EventKind.START)
    )

    first_arrival = by_arrival[0].arrival
    if first_arrival > 0:
        events.append(
            SimulationEvent(0, f"CPU idle until t={first_arrival}", EventKind.IDLE, until=first_arrival)
        )
        time = first_arrival

    while scheduled < len(procs):
        for p in by_arrival:
            if state[p.pid] == PENDING and p.arrival <= time:
                state[p.pid] = READY
                ready.append(p)
                events.append(
                    SimulationEvent(time, f"t={time} → Process {p.pid} arrived", EventKind.ARRIVAL, pid=p.pid)
                )

        if ready:
            current = min(ready, key=lambda x: (x.burst, x.arrival, order[x.pid]))
            ready.remove(current)

            start = max(time, current.arrival)
            finish = start + current.burst
            intervals.append(GanttInterval(pid=current.pid, start=start, end=finish))

            waiting = start - current.arrival
            stats[current.pid] = ProcessStats(
                pid=current.pid,
                arrival=current.arrival,
                burst=current.burst,
                start=start,
                finish=finish,
                waiting=waiting,
                turnaround=finish - current.arrival,
                response=waiting,  # first run only; non-preemptive
            )

            events.append(
                SimulationEvent(
                    start,
                    f"t={start} → {current.pid} started (burst={current.burst})",
                    EventKind.DISPATCH,
                    pid=current.pid,
                )
            )
            events.append(
                SimulationEvent(finish, f"t={finish} → {current.pid} completed", EventKind.COMPLETE, pid=current.pid)
            )

            state[current.pid] = SCHEDULED
            scheduled += 1
            time = finish
            continue

        nxt = next((p for p in by_arrival if state[p.pid] == PENDING), None)
        if nxt is not None:
            events.append(
                SimulationEvent(
                    time, f"t={time} → CPU idle until t={nxt.arrival}", EventKind.IDLE, until=nxt.arrival
                )
            )
            time = nxt.arrival
        else:
            time += 1

    # Report per-process stats in submission order.
    ordered_stats = {p.pid: stats[p.pid] for p in procs}

    logger.debug(
        "Simulated %d processes: order=%s span=%s",
        len(procs),
        [iv.pid for iv in intervals],
        intervals[-1].end,
    )
    return SimulationResult(intervals=intervals, stats=ordered_stats, events=events)


def run_simulation(processes: Sequence[Process]) -> SimulationResult:
    """
    Validate ``processes`` and run the SJF simulation over them.

    Raises ValidationError before anything is simulated if the set is empty,
    has duplicate ids, or has a non-positive burst / negative arrival.
    """
    validated = validate_process_set(processes)
    return simulate_sjf(validated)

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Process:
    pid: str
    burst: int
    arrival: int


@dataclass(frozen=True)
class GanttInterval:
    """
    One contiguous span of execution for a process in the Gantt chart.
    Non-preemptive scheduling produces exactly one per process.
    """

    pid: str
    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class ProcessStats:
    pid: str
    arrival: int
    burst: int
    start: float
    finish: float
    waiting: float
    turnaround: float
    response: float


class EventKind(Enum):
    START = "start"
    IDLE = "idle"
    ARRIVAL = "arrival"
    DISPATCH = "dispatch"
    COMPLETE = "complete"


@dataclass(frozen=True)
class SimulationEvent:
    timestamp: float
    text: str
    kind: EventKind
    pid: Optional[str] = None
    # End of the gap for IDLE events.
    until: Optional[float] = None


@dataclass
class SimulationResult:
    intervals: List[GanttInterval] = field(default_factory=list)
    stats: Dict[str, ProcessStats] = field(default_factory=dict)
    events: List[SimulationEvent] = field(default_factory=list)

    @property
    def total_span(self) -> float:
        return self.intervals[-1].end if self.intervals else 0

    @property
    def busy_time(self) -> float:
        return sum(iv.duration for iv in self.intervals)

    def idle_gaps(self) -> List[Tuple[float, float]]:
        return [(ev.timestamp, ev.until) for ev in self.events if ev.kind is EventKind.IDLE]

    def interval_for(self, pid: str) -> Optional[GanttInterval]:
        for iv in self.intervals:
            if iv.pid == pid:
                return iv
        return None

    def running_at(self, t: float) -> Optional[str]:
        """Return the pid occupying the CPU at time ``t``, or None when idle."""
        for iv in self.intervals:
            if iv.start <= t < iv.end:
                return iv.pid
        return None


@dataclass(frozen=True)
class Statistics:
    process_count: int
    avg_waiting: float
    avg_turnaround: float
    avg_response: float
    busy_time: float
    total_time: float
    idle_time: float
    cpu_utilization: float
    throughput: float

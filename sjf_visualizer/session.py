from __future__ import annotations

import logging
from typing import List, Optional

from .config import PlaybackSettings
from .errors import EmptyResultError
from .metrics import compute_statistics
from .models import Process, SimulationResult, Statistics
from .playback import PlaybackEngine
from .simulator import run_simulation
from .validation import parse_process

logger = logging.getLogger(__name__)


class SimulationSession:
    """
    Everything one user works with: the submitted processes, the latest
    simulation result with its statistics, and the playback cursor over it.

    A run replaces ``result`` and ``statistics`` as a whole; a failed run
    leaves the previous ones in place.
    """

    def __init__(self, playback_settings: Optional[PlaybackSettings] = None) -> None:
        self.processes: List[Process] = []
        self.result: Optional[SimulationResult] = None
        self._statistics: Optional[Statistics] = None
        self.playback = PlaybackEngine(playback_settings)

    @property
    def statistics(self) -> Statistics:
        if self._statistics is None:
            raise EmptyResultError("No statistics yet; run a simulation first")
        return self._statistics

    @property
    def has_result(self) -> bool:
        return self.result is not None

    def submit_process(self, pid, burst, arrival) -> Process:
        process = parse_process(
            pid,
            burst,
            arrival,
            existing_ids=[p.pid for p in self.processes],
            index=len(self.processes),
        )
        self.processes.append(process)
        logger.debug("submitted %s", process)
        return process

    def run_simulation(self) -> SimulationResult:
        result = run_simulation(self.processes)
        statistics = compute_statistics(result, self.processes)

        self.result = result
        self._statistics = statistics
        self.playback.load(result)
        logger.debug("simulation finished: span=%s", result.total_span)
        return result

    def reset(self) -> None:
        """Drop the result and statistics but keep the submitted processes."""
        self.result = None
        self._statistics = None
        self.playback.load(None)

    def clear_all(self) -> None:
        self.processes = []
        self.reset()

    # Playback commands

    def play(self) -> bool:
        return self.playback.play()

    def pause(self) -> None:
        self.playback.pause()

    def tick(self, elapsed: Optional[float] = None) -> bool:
        return self.playback.tick(elapsed)

    def step_forward(self) -> float:
        return self.playback.step_forward()

    def step_back(self) -> float:
        return self.playback.step_back()

    def seek(self, t: float) -> float:
        return self.playback.seek(t)

    def set_speed(self, multiplier: float) -> None:
        self.playback.set_speed(multiplier)

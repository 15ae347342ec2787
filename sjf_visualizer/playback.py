from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .config import PlaybackSettings
from .errors import EmptyResultError, ValidationError
from .models import GanttInterval, SimulationResult

logger = logging.getLogger(__name__)


class PlaybackStatus(Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"


@dataclass(frozen=True)
class PlaybackState:
    cursor: float
    playing: bool
    speed_multiplier: float
    status: PlaybackStatus


def completion_fraction(interval: GanttInterval, t: float) -> float:
    """
    Visual completion of ``interval`` at cursor ``t``: 0 before it starts,
    1 once it has ended, linear in between.
    """
    if t <= interval.start:
        return 0.0
    if t >= interval.end:
        return 1.0
    return (t - interval.start) / (interval.end - interval.start)


class PlaybackEngine:
    """
    Time cursor over ``[0, total_span]`` of the bound simulation result.

    The engine does not schedule itself: the environment calls ``tick()``
    at its own cadence (see ``drive``), and every tick advances the cursor by
    ``tick_increment * speed`` while the engine is playing.
    """

    def __init__(self, settings: Optional[PlaybackSettings] = None) -> None:
        self.settings = settings or PlaybackSettings()
        self._result: Optional[SimulationResult] = None
        self._span: float = 0
        self.cursor: float = 0
        self.speed: float = self.settings.default_speed
        self.status = PlaybackStatus.IDLE

    # -- binding ---------------------------------------------------------

    def load(self, result: Optional[SimulationResult]) -> None:
        """Bind a new simulation result (or none) and reset playback."""
        self._result = result
        self._span = result.total_span if result is not None else 0
        self.reset()

    def bounds(self) -> tuple[float, float]:
        if self._result is None or not self._result.intervals:
            raise EmptyResultError("No simulation result bound to playback")
        return 0, self._span

    @property
    def total_span(self) -> float:
        return self._span

    # -- queries ---------------------------------------------------------

    @property
    def is_playing(self) -> bool:
        return self.status is PlaybackStatus.PLAYING

    @property
    def state(self) -> PlaybackState:
        return PlaybackState(
            cursor=self.cursor,
            playing=self.is_playing,
            speed_multiplier=self.speed,
            status=self.status,
        )

    @property
    def progress_percent(self) -> float:
        if self._span <= 0:
            return 0.0
        return self.cursor / self._span * 100

    def fraction(self, interval: GanttInterval) -> float:
        return completion_fraction(interval, self.cursor)

    # -- commands --------------------------------------------------------

    def play(self) -> bool:
        """Start or resume playback. Returns True if the engine is now playing."""
        if self.status is PlaybackStatus.IDLE:
            if self._span > 0:
                self._transition(PlaybackStatus.PLAYING)
        elif self.status is PlaybackStatus.PAUSED:
            if self.cursor < self._span:
                self._transition(PlaybackStatus.PLAYING)
        return self.is_playing

    def pause(self) -> None:
        if self.status is PlaybackStatus.PLAYING:
            self._transition(PlaybackStatus.PAUSED)

    def tick(self, elapsed: Optional[float] = None) -> bool:
        """
        Apply one tick. A tick that fires after ``pause`` or ``reset`` is a
        no-op. Returns True if the cursor moved.

        ``elapsed`` is accepted from frame clocks that report it; the advance
        per tick is always ``tick_increment * speed``.
        """
        if self.status is not PlaybackStatus.PLAYING:
            return False

        if self.cursor >= self._span:
            self._transition(PlaybackStatus.PAUSED)
            return False

        self.cursor = min(self.cursor + self.settings.tick_increment * self.speed, self._span)
        if self.cursor >= self._span:
            self._transition(PlaybackStatus.PAUSED)
        return True

    def step_forward(self) -> float:
        self.cursor = self._clamp(self.cursor + self.settings.step_increment)
        return self.cursor

    def step_back(self) -> float:
        self.cursor = self._clamp(self.cursor - self.settings.step_increment)
        return self.cursor

    def seek(self, t: float) -> float:
        if not math.isfinite(t):
            raise ValidationError(f"seek time must be a finite number (got {t})")
        self.cursor = self._clamp(t)
        return self.cursor

    def set_speed(self, multiplier: float) -> None:
        if not (math.isfinite(multiplier) and multiplier > 0):
            raise ValidationError(f"speed multiplier must be a finite number > 0 (got {multiplier})")
        self.speed = float(multiplier)

    def reset(self) -> None:
        self.cursor = 0
        self.speed = self.settings.default_speed
        self._transition(PlaybackStatus.IDLE)

    # -- internals -------------------------------------------------------

    def _clamp(self, t: float) -> float:
        return min(max(t, 0), self._span)

    def _transition(self, status: PlaybackStatus) -> None:
        if status is not self.status:
            logger.debug("playback %s -> %s at t=%.2f", self.status.value, status.value, self.cursor)
        self.status = status


def drive(
    engine: PlaybackEngine,
    on_frame: Optional[Callable[[float], None]] = None,
    frame_interval: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """
    Tick ``engine`` until it stops playing, calling ``on_frame(cursor)``
    after each tick and sleeping ``frame_interval`` seconds between ticks.

    Returns the number of ticks applied.
    """
    interval = engine.settings.frame_interval if frame_interval is None else frame_interval
    ticks = 0
    while engine.is_playing:
        moved = engine.tick()
        if moved:
            ticks += 1
            if on_frame is not None:
                on_frame(engine.cursor)
        if engine.is_playing and interval > 0:
            sleep(interval)
    return ticks

from __future__ import annotations

from dataclasses import dataclass

from .errors import ValidationError

MIN_SCALE = 1
MAX_SCALE = 10


@dataclass(frozen=True)
class PlaybackSettings:
    # Simulated time added per tick at speed 1.0 (one frame's worth).
    tick_increment: float = 0.02
    step_increment: float = 0.5
    default_speed: float = 1.0
    # Seconds between ticks when driven from the terminal.
    frame_interval: float = 1 / 60


@dataclass(frozen=True)
class DisplaySettings:
    # Characters per simulated time unit in the Gantt chart.
    scale: int = 2

    def __post_init__(self) -> None:
        if not MIN_SCALE <= self.scale <= MAX_SCALE:
            raise ValidationError(f"scale must be between {MIN_SCALE} and {MAX_SCALE} (got {self.scale})")

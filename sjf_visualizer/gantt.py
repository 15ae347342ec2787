from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from rich import box
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import GanttInterval, SimulationResult
from .playback import completion_fraction

PALETTE = [
    "blue",
    "dark_orange",
    "green",
    "purple",
    "red",
    "dark_cyan",
    "yellow",
    "orange_red1",
    "dodger_blue2",
    "grey50",
]


def assign_colors(pids: Iterable[str]) -> Dict[str, str]:
    """Give each pid a palette colour by its submission position."""
    return {pid: PALETTE[idx % len(PALETTE)] for idx, pid in enumerate(pids)}


def _col(t: float, scale: int) -> int:
    return int(round(t * scale))


def build_rich_gantt(
    intervals: List[GanttInterval],
    cursor: Optional[float] = None,
    scale: int = 2,
    colors: Optional[Dict[str, str]] = None,
) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.

    With a ``cursor``, each interval is only filled up to its completion at
    that time and a pointer row marks the cursor. Without one, the finished
    schedule is drawn.
    """
    if not intervals:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    intervals = sorted(intervals, key=lambda iv: (iv.start, iv.end))
    if colors is None:
        colors = assign_colors(iv.pid for iv in intervals)
    span = intervals[-1].end

    timeline = Text()
    labels = Text()
    last_time: float = 0
    boundaries = [0]

    for iv in intervals:
        gap = _col(iv.start, scale) - _col(last_time, scale)
        if gap > 0:
            timeline.append(" " * gap)
            labels.append(" " * gap)
            boundaries.append(iv.start)

        width = max(1, _col(iv.end, scale) - _col(iv.start, scale))
        fraction = 1.0 if cursor is None else completion_fraction(iv, cursor)
        filled = int(round(fraction * width))
        color = colors.get(iv.pid, "white")

        timeline.append(" " * filled, style=f"on {color}")
        timeline.append("." * (width - filled), style="dim")
        labels.append(iv.pid[:width].ljust(width), style="bold" if fraction > 0 else "dim")

        last_time = iv.end
        boundaries.append(iv.end)

    time_marks = _time_marks(boundaries, scale)

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)
    if cursor is not None:
        shown = min(max(cursor, 0), span)
        pointer = Text(" " * _col(shown, scale) + "^", style="red")
        pointer.append(f" t={shown:.2f}", style="bold")
        table.add_row(pointer)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, time_marks


def _time_marks(boundaries: List[float], scale: int) -> str:
    marks: List[str] = []
    for t in boundaries:
        label = f"{t:g}"
        col = _col(t, scale)
        used = len("".join(marks))
        if col < used:
            # Would overlap the previous label.
            continue
        marks.append(" " * (col - used) + label)
    return "".join(marks)


def build_legend(colors: Dict[str, str]) -> Text:
    legend = Text("Legend: ", style="bold")
    for pid, color in colors.items():
        legend.append("  ", style=f"on {color}")
        legend.append(f" {pid}  ")
    return legend


def build_bar_chart(result: SimulationResult, width: int = 30) -> Table:
    """
    Waiting (green) and turnaround (blue) time per process as horizontal bars.
    """
    stats = list(result.stats.values())
    max_val = max([1] + [s.waiting for s in stats] + [s.turnaround for s in stats])

    table = Table(title="Waiting vs turnaround", box=box.SIMPLE_HEAVY)
    table.add_column("PID", justify="center")
    table.add_column("Waiting")
    table.add_column("Turnaround")

    for s in stats:
        wait_bar = Text("█" * int(round(s.waiting / max_val * width)), style="green")
        wait_bar.append(f" {s.waiting:g}")
        tat_bar = Text("█" * int(round(s.turnaround / max_val * width)), style="blue")
        tat_bar.append(f" {s.turnaround:g}")
        table.add_row(s.pid, wait_bar, tat_bar)

    return table

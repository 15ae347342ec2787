from __future__ import annotations

import argparse
import logging
import shlex
from pathlib import Path
from typing import Optional

from rich import box
from rich.console import Console, Group
from rich.live import Live
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from .config import DisplaySettings, PlaybackSettings
from .errors import SchedulerError
from .gantt import assign_colors, build_bar_chart, build_legend, build_rich_gantt
from .playback import drive
from .session import SimulationSession
from .workload_io import load_workload

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sjf-visualizer",
        description="Non-preemptive Shortest-Job-First CPU scheduling simulator with timeline playback.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Simulate a workload file and print the results.")
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    _add_display_options(run_parser)
    run_parser.add_argument(
        "--play",
        action="store_true",
        help="Animate the timeline cursor before printing the summary.",
    )

    menu_parser = subparsers.add_parser(
        "menu",
        help="Interactive session: add processes, run, and scrub the timeline.",
    )
    menu_parser.add_argument(
        "--workload",
        "-w",
        default=None,
        help="Optional workload file to preload into the session.",
    )
    _add_display_options(menu_parser)

    return parser


def _add_display_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--speed",
        "-s",
        type=float,
        default=1.0,
        help="Playback speed multiplier (default: 1.0).",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=DisplaySettings.scale,
        help="Characters per time unit in the Gantt chart, 1-10 (default: 2).",
    )
    parser.add_argument(
        "--fps",
        type=float,
        default=60.0,
        help="Playback frames per second (default: 60).",
    )


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=verbose)],
        force=True,
    )


def _playback_settings(args: argparse.Namespace) -> PlaybackSettings:
    frame_interval = 1 / args.fps if args.fps > 0 else 0
    return PlaybackSettings(frame_interval=frame_interval)


def _frame(session: SimulationSession, display: DisplaySettings) -> Group:
    """Gantt chart at the current cursor plus a one-line status."""
    engine = session.playback
    colors = assign_colors(p.pid for p in session.processes)
    panel, time_marks = build_rich_gantt(
        session.result.intervals if session.result else [],
        cursor=engine.cursor,
        scale=display.scale,
        colors=colors,
    )
    running = session.result.running_at(engine.cursor) if session.result else None
    status = Text(
        f"t={engine.cursor:.2f}  [{engine.status.value}]  speed x{engine.speed:g}  "
        f"{engine.progress_percent:.0f}%  running: {running or 'idle'}"
    )
    return Group(panel, Text(time_marks), status)


def _animate(session: SimulationSession, display: DisplaySettings, console: Console) -> None:
    if not session.play():
        console.print("[red]Nothing to play; run a simulation first.[/red]")
        return

    with Live(_frame(session, display), console=console, auto_refresh=False) as live:
        try:
            drive(session.playback, on_frame=lambda _t: live.update(_frame(session, display), refresh=True))
        except KeyboardInterrupt:
            session.pause()
            console.print("[yellow]Playback paused.[/yellow]")


def _print_process_table(session: SimulationSession, console: Console) -> None:
    table = Table(title="Processes", box=box.SIMPLE_HEAVY)
    table.add_column("PID", justify="center")
    table.add_column("Burst", justify="right")
    table.add_column("Arrive", justify="right")
    for p in session.processes:
        table.add_row(p.pid, str(p.burst), str(p.arrival))
    console.print(table)


def _print_result(session: SimulationSession, display: DisplaySettings, console: Console) -> None:
    stats = session.statistics
    result = session.result
    colors = assign_colors(p.pid for p in session.processes)

    panel, time_marks = build_rich_gantt(result.intervals, scale=display.scale, colors=colors)
    console.print(panel)
    if time_marks:
        console.print(time_marks)
    console.print(build_legend(colors))

    console.print()

    headers = [
        "PID",
        "Arrive",
        "Burst",
        "Start",
        "Finish",
        "Wait",
        "Turnaround",
        "Response",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h == "PID" else "right"
        proc_table.add_column(h, justify=justify)

    for s in result.stats.values():
        proc_table.add_row(
            s.pid,
            str(s.arrival),
            str(s.burst),
            f"{s.start:g}",
            f"{s.finish:g}",
            f"{s.waiting:g}",
            f"{s.turnaround:g}",
            f"{s.response:g}",
        )

    console.print(proc_table)
    console.print()

    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg waiting", f"{stats.avg_waiting:.2f} units")
    sys_table.add_row("Avg turnaround", f"{stats.avg_turnaround:.2f} units")
    sys_table.add_row("CPU utilization", f"{stats.cpu_utilization:.2f} %")
    sys_table.add_row("Throughput", f"{stats.throughput:.3f} processes/unit")
    sys_table.add_row("Idle time", f"{stats.idle_time:.2f} units")
    sys_table.add_row("Total time", f"{stats.total_time:g} units")

    console.print(sys_table)
    console.print(build_bar_chart(result))
    _print_event_log(session, console)


def _print_event_log(session: SimulationSession, console: Console) -> None:
    console.print("[bold]Event log:[/bold]")
    for event in session.result.events:
        console.print(f"  {event.text}", highlight=False)


def _load_into(session: SimulationSession, path: Path) -> int:
    processes = load_workload(path)
    for p in processes:
        session.submit_process(p.pid, p.burst, p.arrival)
    return len(processes)


MENU_HELP = """\
Commands:
  add BURST ARRIVAL [PID]   submit a process (PID defaults to P<n>)
  load PATH                 add processes from a JSON/CSV workload
  list                      show submitted processes
  run                       run the SJF simulation
  play                      play the timeline (Ctrl+C pauses)
  pause                     pause playback
  step | back               move the cursor forward / back
  seek T                    move the cursor to time T
  speed X                   set the playback speed multiplier
  show                      draw the Gantt chart at the cursor
  stats                     print the full result
  reset                     drop the result, keep processes
  clear                     drop processes and result
  help | quit"""


def _interactive_menu(session: SimulationSession, display: DisplaySettings) -> None:
    console = Console()
    console.print("\n[bold cyan]SJF Scheduler Menu[/bold cyan] [dim](help for commands, q to quit)[/dim]")

    while True:
        line = input("sjf> ").strip()
        if not line:
            continue
        try:
            parts = shlex.split(line)
        except ValueError as exc:
            console.print(f"[red]Error: {escape(str(exc))}[/red]")
            continue
        cmd, cmd_args = parts[0].lower(), parts[1:]

        if cmd in {"q", "quit", "exit"}:
            return

        try:
            if cmd == "help":
                console.print(MENU_HELP, markup=False, highlight=False)
            elif cmd == "add":
                if len(cmd_args) not in (2, 3):
                    console.print("[red]Usage: add BURST ARRIVAL \\[PID][/red]")
                    continue
                pid = cmd_args[2] if len(cmd_args) == 3 else ""
                p = session.submit_process(pid, cmd_args[0], cmd_args[1])
                console.print(f"Added [green]{p.pid}[/green] (burst={p.burst}, arrival={p.arrival})")
            elif cmd == "load":
                if len(cmd_args) != 1:
                    console.print("[red]Usage: load PATH[/red]")
                    continue
                count = _load_into(session, Path(cmd_args[0]))
                console.print(f"Loaded {count} processes.")
            elif cmd == "list":
                _print_process_table(session, console)
            elif cmd == "run":
                # A run resets playback; keep the speed the user chose.
                speed = session.playback.speed
                session.run_simulation()
                session.set_speed(speed)
                _print_result(session, display, console)
            elif cmd == "play":
                _animate(session, display, console)
            elif cmd == "pause":
                session.pause()
                console.print(_frame(session, display))
            elif cmd == "step":
                session.step_forward()
                console.print(_frame(session, display))
            elif cmd == "back":
                session.step_back()
                console.print(_frame(session, display))
            elif cmd == "seek":
                if len(cmd_args) != 1:
                    console.print("[red]Usage: seek T[/red]")
                    continue
                session.seek(float(cmd_args[0]))
                console.print(_frame(session, display))
            elif cmd == "speed":
                if len(cmd_args) != 1:
                    console.print("[red]Usage: speed X[/red]")
                    continue
                session.set_speed(float(cmd_args[0]))
                console.print(f"Speed set to x{session.playback.speed:g}")
            elif cmd == "show":
                console.print(_frame(session, display))
            elif cmd == "stats":
                _print_result(session, display, console)
            elif cmd == "reset":
                if input("Reset simulation (keeps processes)? [Enter=no, y=yes]: ").strip().lower() == "y":
                    session.reset()
                    console.print("Simulation reset.")
            elif cmd == "clear":
                if input("Clear all processes? [Enter=no, y=yes]: ").strip().lower() == "y":
                    session.clear_all()
                    console.print("All processes cleared.")
            else:
                console.print(f"[red]Unknown command: {cmd} (try help)[/red]")
        except SchedulerError as exc:
            console.print(f"[red]Error: {escape(str(exc))}[/red]")
        except ValueError as exc:
            console.print(f"[red]Invalid number: {escape(str(exc))}[/red]")
        except OSError as exc:
            console.print(f"[red]Error: {escape(str(exc))}[/red]")


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    console = Console()

    try:
        display = DisplaySettings(scale=args.scale)
        session = SimulationSession(_playback_settings(args))
        session.set_speed(args.speed)

        if args.command == "run":
            workload_path = Path(args.workload)
            if not workload_path.exists():
                console.print(f"[red]Workload not found: {workload_path}[/red]")
                return 1
            _load_into(session, workload_path)
            session.run_simulation()
            # run_simulation resets playback, speed included.
            session.set_speed(args.speed)
            if args.play:
                _animate(session, display, console)
            _print_result(session, display, console)
            return 0

        if args.command == "menu":
            if args.workload:
                _load_into(session, Path(args.workload))
            _interactive_menu(session, display)
            return 0
    except SchedulerError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        logger.debug("command failed", exc_info=True)
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations


class SchedulerError(Exception):
    """Base class for errors raised by the SJF visualizer."""


class ValidationError(SchedulerError, ValueError):
    """
    Bad process input: malformed fields, duplicate ids, or an empty process
    set on run. The simulation does not start when this is raised.
    """


class EmptyResultError(SchedulerError, RuntimeError):
    """Statistics or playback bounds were requested before a successful run."""

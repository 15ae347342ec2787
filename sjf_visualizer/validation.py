from __future__ import annotations

from typing import Iterable, List, Sequence

from .errors import ValidationError
from .models import Process


def _to_int(value) -> int:
    if isinstance(value, bool):
        raise ValueError(f"not an integer: {value!r}")
    if isinstance(value, str):
        return int(value.strip())
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"not an integer: {value!r}")
    return int(value)


def parse_process(
    pid,
    burst,
    arrival,
    existing_ids: Iterable[str] = (),
    index: int = 0,
) -> Process:
    """
    Build a Process from raw field values, as a form would supply them.

    A blank pid defaults to ``P{index + 1}``, where ``index`` is the number
    of processes already submitted.
    """
    pid = "" if pid is None else str(pid).strip()
    if not pid:
        pid = f"P{index + 1}"

    try:
        burst_val = _to_int(burst)
        arrival_val = _to_int(arrival)
    except (TypeError, ValueError) as exc:
        raise ValidationError(
            f"Please enter valid process details (burst={burst!r}, arrival={arrival!r})"
        ) from exc

    if burst_val <= 0 or arrival_val < 0:
        raise ValidationError(
            f"Please enter valid process details: burst must be > 0 and arrival >= 0 "
            f"(got burst={burst_val}, arrival={arrival_val})"
        )

    if pid in set(existing_ids):
        raise ValidationError(f"Process ID already exists: {pid}")

    return Process(pid=pid, burst=burst_val, arrival=arrival_val)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_process_set(processes: Sequence[Process]) -> List[Process]:
    """
    Check a whole process set before it is simulated.
    """
    if not processes:
        raise ValidationError("Add at least one process first")

    seen: set[str] = set()
    for p in processes:
        if not isinstance(p.pid, str) or not p.pid:
            raise ValidationError(f"Process ID must be a non-empty string (got {p.pid!r})")
        if not _is_int(p.burst) or not _is_int(p.arrival):
            raise ValidationError(
                f"Process {p.pid}: burst and arrival must be integers "
                f"(got burst={p.burst!r}, arrival={p.arrival!r})"
            )
        if p.pid in seen:
            raise ValidationError(f"Process ID already exists: {p.pid}")
        if p.burst <= 0:
            raise ValidationError(f"Process {p.pid}: burst must be > 0 (got {p.burst})")
        if p.arrival < 0:
            raise ValidationError(f"Process {p.pid}: arrival must be >= 0 (got {p.arrival})")
        seen.add(p.pid)

    return list(processes)

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import List, Mapping

from .errors import ValidationError
from .models import Process
from .validation import parse_process

_FIELD_ALIASES = {
    "pid": ("pid", "id"),
    "burst": ("burst", "burst_time"),
    "arrival": ("arrival", "arrival_time"),
}


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        return _load_json(path)
    if suffix == ".csv":
        return _load_csv(path)

    raise ValidationError(f"Unsupported workload format: {suffix} (use .json or .csv)")


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"Invalid JSON workload {path}: {exc}") from exc

    if not isinstance(raw, list):
        raise ValidationError("JSON workload must be a list of process objects")

    processes: List[Process] = []
    for entry in raw:
        processes.append(_process_from_mapping(entry, processes))

    return processes


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            processes.append(_process_from_mapping(row, processes))
    return processes


def _lookup(mapping: Mapping, name: str):
    for key in _FIELD_ALIASES[name]:
        if key in mapping and mapping[key] not in (None, ""):
            return mapping[key]
    return None


def _process_from_mapping(mapping, loaded: List[Process]) -> Process:
    if not isinstance(mapping, Mapping):
        raise ValidationError(f"Invalid process entry: {mapping!r}")

    burst = _lookup(mapping, "burst")
    arrival = _lookup(mapping, "arrival")
    if burst is None or arrival is None:
        raise ValidationError(f"Invalid process entry: {mapping!r}")

    return parse_process(
        _lookup(mapping, "pid"),
        burst,
        arrival,
        existing_ids=[p.pid for p in loaded],
        index=len(loaded),
    )

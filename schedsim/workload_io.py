from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Iterable, List, Mapping

from .errors import InvalidProcess
from .models import Process

# Accepted spellings for each field, first match wins.
_FIELD_NAMES = {
    "arrival_time": ("arrival_time", "arrival"),
    "burst_time": ("burst_time", "burst"),
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

    raise ValueError(f"Unsupported workload format: {suffix} (use .json or .csv)")


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, Iterable) or isinstance(raw, (str, dict)):
        raise InvalidProcess("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            processes.append(_process_from_mapping(row))
    return processes


def _lookup(mapping: Mapping, field: str):
    for name in _FIELD_NAMES.get(field, (field,)):
        value = mapping.get(name)
        if value not in (None, ""):
            return value
    raise KeyError(field)


def _as_int(value) -> int:
    # Whole-number floats such as 3.0 are accepted, 2.7 is not.
    if isinstance(value, bool):
        raise TypeError(f"expected an integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"expected a whole number, got {value!r}")
    return int(value)


def _process_from_mapping(mapping) -> Process:
    try:
        pid = _as_int(_lookup(mapping, "pid"))
        arrival_time = _as_int(_lookup(mapping, "arrival_time"))
        burst_time = _as_int(_lookup(mapping, "burst_time"))
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise InvalidProcess(f"Invalid process entry: {mapping!r}") from exc

    priority_val = mapping.get("priority")
    try:
        priority = _as_int(priority_val) if priority_val not in (None, "") else 0
    except (TypeError, ValueError) as exc:
        raise InvalidProcess(f"Invalid priority in process entry: {mapping!r}") from exc

    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )

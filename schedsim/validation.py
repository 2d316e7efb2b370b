from __future__ import annotations

import logging
from collections import Counter
from typing import List, Optional

from .errors import EmptyInput, InvalidProcess, InvalidQuantum, MissingQuantum
from .models import Process

logger = logging.getLogger(__name__)


def _is_int(value) -> bool:
    # bool is an int subclass but never a valid time, pid or priority.
    return isinstance(value, int) and not isinstance(value, bool)


def require_quantum(quantum: Optional[int], policy: str = "Round Robin") -> int:
    """
    Return ``quantum`` if it is a positive integer, else raise the matching error.
    """
    if quantum is None:
        raise MissingQuantum(
            f"{policy} requires a time quantum; pass a positive integer such as quantum=2"
        )
    if not _is_int(quantum):
        raise InvalidQuantum(
            f"{policy} quantum must be a positive integer, got {quantum!r}"
        )
    if quantum <= 0:
        raise InvalidQuantum(
            f"{policy} quantum must be a positive integer (1 or more), got {quantum}"
        )
    return quantum


def validate_processes(processes: List[Process]) -> None:
    """
    Check the semantic constraints on a process set before simulating it.

    Duplicate pids are allowed through with a warning; the caller owns
    uniqueness.
    """
    if not processes:
        raise EmptyInput("No processes to schedule; supply at least one process")

    for p in processes:
        if not _is_int(p.pid) or p.pid <= 0:
            raise InvalidProcess(f"Process pid must be a positive integer, got {p.pid!r}")
        for name in ("arrival_time", "burst_time", "priority"):
            value = getattr(p, name)
            if not _is_int(value):
                raise InvalidProcess(
                    f"Process {p.pid}: {name} must be an integer, got {value!r}"
                )
        if p.arrival_time < 0:
            raise InvalidProcess(
                f"Process {p.pid}: arrival time must be 0 or later, got {p.arrival_time}"
            )
        if p.burst_time <= 0:
            raise InvalidProcess(
                f"Process {p.pid}: burst time must be a positive integer, got {p.burst_time}"
            )

    dupes = sorted(pid for pid, count in Counter(p.pid for p in processes).items() if count > 1)
    if dupes:
        logger.warning("Duplicate pids in workload: %s", ", ".join(map(str, dupes)))

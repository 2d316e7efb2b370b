"""
schedsim: CPU scheduling simulation engine.

Computes execution timelines and per-process metrics for ten classical
scheduling policies, with a small command-line front end for trying them on
workload files.
"""

from .errors import (
    EmptyInput,
    InvalidProcess,
    InvalidQuantum,
    MissingQuantum,
    SchedulingError,
    SimulationFault,
    UnknownPolicy,
)
from .models import Averages, Process, ProcessMetrics, ScheduledSlice, ScheduleResult
from .registry import POLICIES, RunOutcome, compare, list_algorithms, run, run_algorithm

__all__ = [
    "Averages",
    "EmptyInput",
    "InvalidProcess",
    "InvalidQuantum",
    "MissingQuantum",
    "POLICIES",
    "Process",
    "ProcessMetrics",
    "RunOutcome",
    "ScheduleResult",
    "ScheduledSlice",
    "SchedulingError",
    "SimulationFault",
    "UnknownPolicy",
    "compare",
    "list_algorithms",
    "run",
    "run_algorithm",
]

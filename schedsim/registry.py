"""
Policy registry and dispatcher.

``run_algorithm`` raises SchedulingError subclasses; ``run`` wraps the same
call and hands the error back as a value, which is what ``compare`` relies on
to skip failing policies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from .algorithms import (
    schedule_fcfs,
    schedule_hrrn,
    schedule_priority,
    schedule_rr,
    schedule_sjf,
    schedule_srt,
)
from .errors import SchedulingError, SimulationFault, UnknownPolicy
from .feedback import schedule_aging, schedule_feedback, schedule_feedback_variable, schedule_mlfq
from .models import Process, ScheduleResult
from .validation import require_quantum, validate_processes

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 2

Simulator = Callable[..., ScheduleResult]


@dataclass(frozen=True)
class PolicyInfo:
    key: str
    name: str
    abbreviation: str
    preemptive: bool
    needs_quantum: bool
    needs_priority: bool
    description: str
    simulate: Simulator
    pros: Tuple[str, ...] = ()
    cons: Tuple[str, ...] = ()


POLICIES: Dict[str, PolicyInfo] = {
    info.key: info
    for info in (
        PolicyInfo(
            key="fcfs",
            name="First Come First Serve",
            abbreviation="FCFS",
            preemptive=False,
            needs_quantum=False,
            needs_priority=False,
            description="Runs processes in arrival order, each to completion.",
            simulate=schedule_fcfs,
            pros=("Simple to implement", "Fair, no starvation", "Predictable"),
            cons=("Convoy effect", "Poor average waiting time", "Not optimal"),
        ),
        PolicyInfo(
            key="sjf",
            name="Shortest Job First",
            abbreviation="SJF",
            preemptive=False,
            needs_quantum=False,
            needs_priority=False,
            description="Runs the arrived process with the shortest burst to completion.",
            simulate=schedule_sjf,
            pros=("Optimal average waiting time among non-preemptive policies", "Better than FCFS"),
            cons=("Long processes can starve", "Needs burst times in advance"),
        ),
        PolicyInfo(
            key="srt",
            name="Shortest Remaining Time",
            abbreviation="SRT",
            preemptive=True,
            needs_quantum=False,
            needs_priority=False,
            description="Each time unit, runs the arrived process with the least work left.",
            simulate=schedule_srt,
            pros=("Optimal average waiting time overall", "Very responsive"),
            cons=("High context-switch overhead", "Long processes can starve", "Needs remaining-time tracking"),
        ),
        PolicyInfo(
            key="rr",
            name="Round Robin",
            abbreviation="RR",
            preemptive=True,
            needs_quantum=True,
            needs_priority=False,
            description="Gives each process a fixed time slice in turn from a FIFO queue.",
            simulate=schedule_rr,
            pros=("Fair CPU distribution", "No starvation", "Good for time-sharing"),
            cons=("Performance depends on quantum size", "More context switches than FCFS"),
        ),
        PolicyInfo(
            key="hrrn",
            name="Highest Response Ratio Next",
            abbreviation="HRRN",
            preemptive=False,
            needs_quantum=False,
            needs_priority=False,
            description="Runs the process with the highest (waiting + burst) / burst ratio.",
            simulate=schedule_hrrn,
            pros=("Prevents starvation", "Balances short and long processes"),
            cons=("Needs burst times in advance", "Ratio computation overhead"),
        ),
        PolicyInfo(
            key="priority",
            name="Priority Scheduling",
            abbreviation="Priority",
            preemptive=False,
            needs_quantum=False,
            needs_priority=True,
            description="Runs the arrived process with the lowest priority number to completion.",
            simulate=schedule_priority,
            pros=("Important processes run first", "Good for real-time systems"),
            cons=("Low-priority processes can starve", "Priority inversion possible"),
        ),
        PolicyInfo(
            key="feedback",
            name="Feedback",
            abbreviation="FB",
            preemptive=True,
            needs_quantum=False,
            needs_priority=False,
            description="Five queues with quantum 1; a process drops a level each time it uses its slice.",
            simulate=schedule_feedback,
            pros=("Favors short and interactive processes", "Adapts without burst estimates"),
            cons=("Long processes can starve", "Many context switches"),
        ),
        PolicyInfo(
            key="fbv",
            name="Feedback Variable Quantum",
            abbreviation="FBV",
            preemptive=True,
            needs_quantum=False,
            needs_priority=False,
            description="Feedback where the quantum doubles at each level (1, 2, 4, 8, 16).",
            simulate=schedule_feedback_variable,
            pros=("Fewer context switches than FB", "Better for CPU-bound processes"),
            cons=("Starvation still possible", "More complex than FB"),
        ),
        PolicyInfo(
            key="aging",
            name="Aging",
            abbreviation="Aging",
            preemptive=True,
            needs_quantum=False,
            needs_priority=True,
            description="Preemptive priority where waiting processes gain urgency every time unit.",
            simulate=schedule_aging,
            pros=("Prevents starvation", "Combines priority with fairness"),
            cons=("Higher overhead", "Dynamic priorities are harder to reason about"),
        ),
        PolicyInfo(
            key="mlfq",
            name="Multi-Level Feedback Queue",
            abbreviation="MLFQ",
            preemptive=True,
            needs_quantum=False,
            needs_priority=False,
            description="Three levels: RR q=2, RR q=4, then FCFS; processes only move down.",
            simulate=schedule_mlfq,
            pros=("Mixes responsiveness with throughput", "Adapts to process behavior"),
            cons=("Most complex to implement", "Needs careful parameter tuning"),
        ),
    )
}

ALIASES = {
    "srtf": "srt",
    "fb": "feedback",
    "round-robin": "rr",
}


@dataclass
class RunOutcome:
    result: Optional[ScheduleResult] = None
    error: Optional[SchedulingError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def get_policy(name: str) -> PolicyInfo:
    key = name.strip().lower()
    key = ALIASES.get(key, key)
    if key not in POLICIES:
        valid = ", ".join(POLICIES)
        raise UnknownPolicy(f"Unknown scheduling policy '{name}'. Valid keys: {valid}")
    return POLICIES[key]


def list_algorithms() -> List[dict]:
    """
    Registry metadata for display, without the simulator functions.
    """
    return [
        {
            "key": info.key,
            "name": info.name,
            "abbreviation": info.abbreviation,
            "type": "Preemptive" if info.preemptive else "Non-preemptive",
            "needs_quantum": info.needs_quantum,
            "needs_priority": info.needs_priority,
            "description": info.description,
            "pros": list(info.pros),
            "cons": list(info.cons),
        }
        for info in POLICIES.values()
    ]


def run_algorithm(name: str, processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum is only checked and passed
    on for policies that need one.
    """
    info = get_policy(name)
    validate_processes(processes)
    if info.needs_quantum:
        quantum = require_quantum(quantum, policy=info.name)
    else:
        quantum = None

    logger.info("Running %s on %d processes", info.abbreviation, len(processes))
    result = info.simulate(processes, quantum=quantum)
    result.algorithm = info.name
    result.abbreviation = info.abbreviation
    return result


def run(name: str, processes: List[Process], quantum: Optional[int] = None) -> RunOutcome:
    """
    Like run_algorithm, but any SchedulingError comes back in the outcome.
    """
    try:
        return RunOutcome(result=run_algorithm(name, processes, quantum=quantum))
    except SimulationFault as exc:
        logger.error("Simulation fault in %s: %s", name, exc)
        return RunOutcome(error=exc)
    except SchedulingError as exc:
        logger.info("Rejected %s run: %s", name, exc)
        return RunOutcome(error=exc)


def compare(processes: List[Process], quantum: int = DEFAULT_QUANTUM) -> Dict[str, ScheduleResult]:
    """
    Run every registered policy on the same workload.

    Policies whose run fails are logged and left out of the returned mapping.
    """
    outcomes: Dict[str, ScheduleResult] = {}
    for key, info in POLICIES.items():
        outcome = run(key, processes, quantum=quantum if info.needs_quantum else None)
        if outcome.ok:
            outcomes[key] = outcome.result
        else:
            logger.warning("Skipping %s in comparison: %s", info.abbreviation, outcome.error)
    return outcomes

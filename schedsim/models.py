from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Process:
    pid: int
    arrival_time: int
    burst_time: int
    priority: int = 0


@dataclass
class ScheduledSlice:
    """
    One contiguous slice of the CPU timeline. ``pid`` is None while the CPU
    sits idle; ``level`` is the queue level for multi-level policies.
    """

    pid: Optional[int]
    start_time: int
    end_time: int
    level: Optional[int] = None

    @property
    def is_idle(self) -> bool:
        return self.pid is None

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass
class ProcessMetrics:
    pid: int
    arrival_time: int
    burst_time: int
    start_time: int
    completion_time: int
    waiting_time: int
    turnaround_time: int
    response_time: int
    priority: int = 0


@dataclass
class Averages:
    avg_turnaround: float = 0.0
    avg_waiting: float = 0.0
    avg_response: float = 0.0


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    makespan: int
    throughput: float
    cpu_utilization: float
    starvation_count: int = 0


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    abbreviation: str = ""
    processes: List[ProcessMetrics] = field(default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)
    averages: Averages = field(default_factory=Averages)
    system: Optional[SystemMetrics] = None

    def as_dict(self) -> dict:
        """
        Plain-data view of the result for consumers that chart or tabulate it.
        """
        return asdict(self)


@dataclass
class WorkingProcess:
    """
    Mutable per-run state wrapped around a caller-owned Process.

    Simulators clone their input into these and throw them away when the run
    ends, so the Process records themselves are never touched.
    """

    process: Process
    remaining: int = field(init=False)
    first_start: Optional[int] = None
    level: int = 0
    dynamic_priority: int = field(init=False)

    def __post_init__(self) -> None:
        self.remaining = self.process.burst_time
        self.dynamic_priority = self.process.priority

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def arrival_time(self) -> int:
        return self.process.arrival_time

    @property
    def burst_time(self) -> int:
        return self.process.burst_time

    @property
    def priority(self) -> int:
        return self.process.priority

    @property
    def done(self) -> bool:
        return self.remaining == 0

    def dispatch(self, now: int) -> None:
        # Response time is fixed by the first dispatch only.
        if self.first_start is None:
            self.first_start = now

    def finish(self, completion_time: int) -> ProcessMetrics:
        turnaround_time = completion_time - self.arrival_time
        return ProcessMetrics(
            pid=self.pid,
            arrival_time=self.arrival_time,
            burst_time=self.burst_time,
            start_time=self.first_start,
            completion_time=completion_time,
            waiting_time=turnaround_time - self.burst_time,
            turnaround_time=turnaround_time,
            response_time=self.first_start - self.arrival_time,
            priority=self.priority,
        )


def clone_processes(processes: List[Process]) -> List[WorkingProcess]:
    return [WorkingProcess(p) for p in processes]

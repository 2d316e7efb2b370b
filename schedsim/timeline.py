from __future__ import annotations

from collections import deque
from typing import List, Optional, Sequence

from .errors import SimulationFault
from .models import Process, ScheduledSlice, WorkingProcess


def safety_horizon(processes: Sequence[Process | WorkingProcess]) -> int:
    """
    Latest instant any correct schedule can reach: every burst run back to
    back after the last arrival, plus one.
    """
    if not processes:
        return 1
    return sum(p.burst_time for p in processes) + max(p.arrival_time for p in processes) + 1


class TimelineRecorder:
    """
    Builds a gapless timeline starting at 0.

    Contiguous slices with the same occupant and level are merged. Any slice
    that leaves a gap, is empty, or ends past the horizon raises
    SimulationFault.
    """

    def __init__(self, horizon: int) -> None:
        self.horizon = horizon
        self.slices: List[ScheduledSlice] = []

    @property
    def now(self) -> int:
        return self.slices[-1].end_time if self.slices else 0

    def run(self, pid: Optional[int], start: int, end: int, level: Optional[int] = None) -> None:
        if start != self.now:
            raise SimulationFault(
                f"Timeline gap: slice for {pid} starts at {start} but the clock is at {self.now}"
            )
        if end <= start:
            raise SimulationFault(f"Empty slice for {pid} at [{start}, {end})")
        if end > self.horizon:
            raise SimulationFault(
                f"Simulation ran past its safety horizon ({end} > {self.horizon})"
            )

        last = self.slices[-1] if self.slices else None
        if last is not None and last.pid == pid and last.level == level:
            last.end_time = end
        else:
            self.slices.append(ScheduledSlice(pid=pid, start_time=start, end_time=end, level=level))

    def idle(self, start: int, end: int) -> None:
        if end > start:
            self.run(None, start, end)


def next_arrival(jobs: Sequence[WorkingProcess], after: int) -> Optional[int]:
    future = [j.arrival_time for j in jobs if j.arrival_time > after and not j.done]
    return min(future) if future else None


class ArrivalFeed:
    """
    Releases jobs in (arrival, pid) order once the clock reaches their arrival.
    """

    def __init__(self, jobs: Sequence[WorkingProcess]) -> None:
        self._pending = deque(sorted(jobs, key=lambda j: (j.arrival_time, j.pid)))

    def release(self, now: int) -> List[WorkingProcess]:
        arrived: List[WorkingProcess] = []
        while self._pending and self._pending[0].arrival_time <= now:
            arrived.append(self._pending.popleft())
        return arrived

    @property
    def next_time(self) -> Optional[int]:
        return self._pending[0].arrival_time if self._pending else None

from __future__ import annotations

import logging
from collections import deque
from fractions import Fraction
from typing import Callable, Deque, List, Optional, Tuple

from .errors import SimulationFault
from .metrics import build_result
from .models import Process, ProcessMetrics, ScheduleResult, WorkingProcess, clone_processes
from .timeline import ArrivalFeed, TimelineRecorder, next_arrival, safety_horizon
from .validation import require_quantum

logger = logging.getLogger(__name__)

SelectionKey = Callable[[WorkingProcess, int], Tuple]


def _run_to_completion(processes: List[Process], algorithm: str, key: SelectionKey) -> ScheduleResult:
    """
    Shared loop for the non-preemptive policies.

    At each decision point the ready process with the smallest ``key(job, now)``
    runs until it finishes. If nothing is ready, the clock jumps to the next
    arrival and the gap is recorded as idle.
    """
    jobs = clone_processes(processes)
    recorder = TimelineRecorder(safety_horizon(jobs))
    metrics: List[ProcessMetrics] = []
    pending = list(jobs)
    time = 0

    while pending:
        ready = [j for j in pending if j.arrival_time <= time]
        if not ready:
            next_time = min(j.arrival_time for j in pending)
            recorder.idle(time, next_time)
            time = next_time
            continue

        job = min(ready, key=lambda j: key(j, time))
        job.dispatch(time)

        end_time = time + job.remaining
        recorder.run(job.pid, time, end_time)
        job.remaining = 0

        metrics.append(job.finish(end_time))
        pending = [j for j in pending if j is not job]
        time = end_time

    logger.debug("%s: %d processes finished at t=%d", algorithm, len(metrics), time)
    return build_result(algorithm, None, metrics, recorder.slices)


def schedule_fcfs(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.
    """
    return _run_to_completion(processes, "FCFS", lambda j, now: (j.arrival_time, j.pid))


def schedule_sjf(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Job First (non-preemptive).

    At each decision point, among processes that have arrived and are not yet
    completed, choose the one with the smallest burst time (tie-breaker:
    earlier arrival, then PID).
    """
    return _run_to_completion(
        processes, "SJF", lambda j, now: (j.burst_time, j.arrival_time, j.pid)
    )


def response_ratio(process: Process | WorkingProcess, now: int) -> Fraction:
    """
    (time waited so far + burst) / burst, kept exact so equal ratios compare equal.
    """
    waited = now - process.arrival_time
    return Fraction(waited + process.burst_time, process.burst_time)


def schedule_hrrn(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Highest Response Ratio Next (non-preemptive).

    The ratio grows the longer a process waits, so every process is
    eventually picked.
    """
    return _run_to_completion(
        processes, "HRRN", lambda j, now: (-response_ratio(j, now), j.arrival_time, j.pid)
    )


def schedule_priority(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority. Among ready
    processes, choose the one with the smallest priority; break ties
    by earlier arrival time, then PID.
    """
    return _run_to_completion(
        processes, "Priority", lambda j, now: (j.priority, j.arrival_time, j.pid)
    )


def schedule_srt(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Remaining Time (preemptive SJF).

    The choice is re-made every time unit, so a newly arrived short job
    takes the CPU from a longer one immediately.
    """
    jobs = clone_processes(processes)
    recorder = TimelineRecorder(safety_horizon(jobs))
    metrics: List[ProcessMetrics] = []
    time = 0

    while len(metrics) < len(jobs):
        ready = [j for j in jobs if j.arrival_time <= time and not j.done]
        if not ready:
            nxt = next_arrival(jobs, time)
            if nxt is None:
                raise SimulationFault(f"SRT: unfinished processes but no future arrival at t={time}")
            recorder.idle(time, nxt)
            time = nxt
            continue

        current = min(ready, key=lambda j: (j.remaining, j.arrival_time, j.pid))
        current.dispatch(time)

        recorder.run(current.pid, time, time + 1)
        current.remaining -= 1
        time += 1

        if current.done:
            metrics.append(current.finish(time))

    logger.debug("SRT: %d processes finished at t=%d", len(metrics), time)
    return build_result("SRT", None, metrics, recorder.slices)


def schedule_rr(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.

    Processes that arrive while a slice runs join the queue before the
    preempted process goes back to the tail.
    """
    quantum = require_quantum(quantum)

    jobs = clone_processes(processes)
    feed = ArrivalFeed(jobs)
    recorder = TimelineRecorder(safety_horizon(jobs))
    metrics: List[ProcessMetrics] = []
    ready: Deque[WorkingProcess] = deque(feed.release(0))
    time = 0

    while len(metrics) < len(jobs):
        if not ready:
            nxt = feed.next_time
            if nxt is None:
                raise SimulationFault(f"RR: empty ready queue and no future arrival at t={time}")
            recorder.idle(time, nxt)
            time = nxt
            ready.extend(feed.release(time))
            continue

        job = ready.popleft()
        job.dispatch(time)

        run_time = min(quantum, job.remaining)
        recorder.run(job.pid, time, time + run_time)
        job.remaining -= run_time
        time += run_time

        ready.extend(feed.release(time))

        if job.done:
            metrics.append(job.finish(time))
        else:
            ready.append(job)

    logger.debug("RR(q=%d): %d processes finished at t=%d", quantum, len(metrics), time)
    return build_result("Round Robin", quantum, metrics, recorder.slices)

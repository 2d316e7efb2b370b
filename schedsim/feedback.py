"""
Multi-level feedback policies: Feedback, Feedback with a doubling quantum,
the three-level MLFQ and priority Aging.

New arrivals always enter the top queue. A process that uses up its slice
without finishing drops one level and never climbs back.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, List, Optional, Sequence

from .errors import SimulationFault
from .metrics import build_result
from .models import Process, ProcessMetrics, ScheduleResult, WorkingProcess, clone_processes
from .timeline import ArrivalFeed, TimelineRecorder, next_arrival, safety_horizon

logger = logging.getLogger(__name__)

FEEDBACK_LEVELS = 5

# Level 0 and 1 are round robin, level 2 runs to completion.
MLFQ_QUANTA = (2, 4, None)

# How much a waiting process's dynamic priority improves per time unit.
AGING_STEP = 1


def _run_multilevel(
    processes: List[Process],
    algorithm: str,
    quanta: Sequence[Optional[int]],
) -> ScheduleResult:
    """
    Run the head of the highest non-empty queue for its level's quantum
    (``None`` means until completion), then demote it if work remains.
    """
    jobs = clone_processes(processes)
    feed = ArrivalFeed(jobs)
    recorder = TimelineRecorder(safety_horizon(jobs))
    metrics: List[ProcessMetrics] = []
    queues: List[Deque[WorkingProcess]] = [deque() for _ in quanta]
    bottom = len(quanta) - 1
    time = 0

    queues[0].extend(feed.release(time))

    while len(metrics) < len(jobs):
        level = next((i for i, q in enumerate(queues) if q), None)
        if level is None:
            nxt = feed.next_time
            if nxt is None:
                raise SimulationFault(f"{algorithm}: all queues empty and no future arrival at t={time}")
            recorder.idle(time, nxt)
            time = nxt
            queues[0].extend(feed.release(time))
            continue

        job = queues[level].popleft()
        job.dispatch(time)

        quantum = quanta[level]
        run_time = job.remaining if quantum is None else min(quantum, job.remaining)
        recorder.run(job.pid, time, time + run_time, level=level)
        job.remaining -= run_time
        time += run_time

        queues[0].extend(feed.release(time))

        if job.done:
            metrics.append(job.finish(time))
        else:
            job.level = min(level + 1, bottom)
            queues[job.level].append(job)

    logger.debug("%s: %d processes finished at t=%d", algorithm, len(metrics), time)
    return build_result(algorithm, None, metrics, recorder.slices)


def schedule_feedback(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Feedback with five queues and a quantum of 1 at every level.
    """
    return _run_multilevel(processes, "Feedback", [1] * FEEDBACK_LEVELS)


def schedule_feedback_variable(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Feedback whose quantum doubles with each level (1, 2, 4, 8, 16).
    """
    return _run_multilevel(
        processes, "Feedback (variable quantum)", [2**level for level in range(FEEDBACK_LEVELS)]
    )


def schedule_mlfq(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Multi-Level Feedback Queue with 3 levels.

    - Q0: round robin, quantum 2.
    - Q1: round robin, quantum 4.
    - Q2: FCFS, each process runs to completion.
    """
    return _run_multilevel(processes, "MLFQ", MLFQ_QUANTA)


def schedule_aging(
    processes: List[Process],
    quantum: Optional[int] = None,
    aging_step: int = AGING_STEP,
) -> ScheduleResult:
    """
    Preemptive priority scheduling with aging.

    Every time unit the ready process with the lowest dynamic priority runs
    and its dynamic priority snaps back to its static one. Every other ready
    process has its dynamic priority lowered by ``aging_step``, so a process
    that keeps being passed over eventually becomes the most urgent.
    """
    if isinstance(aging_step, bool) or not isinstance(aging_step, int) or aging_step <= 0:
        raise ValueError(f"aging_step must be a positive integer, got {aging_step!r}")

    jobs = clone_processes(processes)
    recorder = TimelineRecorder(safety_horizon(jobs))
    metrics: List[ProcessMetrics] = []
    time = 0

    while len(metrics) < len(jobs):
        ready = [j for j in jobs if j.arrival_time <= time and not j.done]
        if not ready:
            nxt = next_arrival(jobs, time)
            if nxt is None:
                raise SimulationFault(f"Aging: unfinished processes but no future arrival at t={time}")
            recorder.idle(time, nxt)
            time = nxt
            continue

        current = min(ready, key=lambda j: (j.dynamic_priority, j.arrival_time, j.pid))
        current.dispatch(time)
        current.dynamic_priority = current.priority
        for job in ready:
            if job is not current:
                job.dynamic_priority -= aging_step

        recorder.run(current.pid, time, time + 1)
        current.remaining -= 1
        time += 1

        if current.done:
            metrics.append(current.finish(time))

    logger.debug("Aging(step=%d): %d processes finished at t=%d", aging_step, len(metrics), time)
    return build_result("Aging", None, metrics, recorder.slices)

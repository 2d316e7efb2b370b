from __future__ import annotations

from typing import List

from .models import Averages, ProcessMetrics, ScheduledSlice, ScheduleResult, SystemMetrics


def compute_averages(processes: List[ProcessMetrics]) -> Averages:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    if not processes:
        return Averages()

    n = len(processes)
    return Averages(
        avg_turnaround=sum(p.turnaround_time for p in processes) / n,
        avg_waiting=sum(p.waiting_time for p in processes) / n,
        avg_response=sum(p.response_time for p in processes) / n,
    )


def compute_system_metrics(result: ScheduleResult) -> SystemMetrics:
    """
    Compute throughput and CPU utilization given populated per-process metrics
    and timeline slices.
    """
    if not result.processes:
        system = SystemMetrics(cpu_busy_time=0, makespan=0, throughput=0.0, cpu_utilization=0.0)
        result.system = system
        return system

    makespan = max(p.completion_time for p in result.processes)
    cpu_busy_time = sum(s.duration for s in result.timeline if not s.is_idle)

    throughput = len(result.processes) / makespan if makespan > 0 else 0.0
    cpu_utilization = cpu_busy_time / makespan if makespan > 0 else 0.0

    # Heuristic: a process waiting more than twice the average counts as starved.
    avg_wait = result.averages.avg_waiting
    starvation_count = sum(1 for p in result.processes if p.waiting_time > 2 * avg_wait)

    system = SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        makespan=makespan,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
        starvation_count=starvation_count,
    )
    result.system = system
    return system


def build_result(
    algorithm: str,
    quantum: int | None,
    metrics: List[ProcessMetrics],
    timeline: List[ScheduledSlice],
) -> ScheduleResult:
    """
    Assemble a ScheduleResult with pid-ordered metrics and all aggregates filled in.
    """
    ordered = sorted(metrics, key=lambda m: m.pid)
    result = ScheduleResult(
        algorithm=algorithm,
        quantum=quantum,
        processes=ordered,
        timeline=timeline,
        averages=compute_averages(ordered),
    )
    compute_system_metrics(result)
    return result

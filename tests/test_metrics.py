import pytest

from schedsim.algorithms import schedule_fcfs
from schedsim.errors import SimulationFault
from schedsim.metrics import compute_averages
from schedsim.models import Process, ProcessMetrics
from schedsim.timeline import TimelineRecorder, safety_horizon


def _metrics(pid, turnaround, waiting, response):
    return ProcessMetrics(
        pid=pid,
        arrival_time=0,
        burst_time=turnaround - waiting,
        start_time=response,
        completion_time=turnaround,
        waiting_time=waiting,
        turnaround_time=turnaround,
        response_time=response,
    )


def test_compute_averages():
    avg = compute_averages([_metrics(1, 5, 0, 0), _metrics(2, 7, 4, 4), _metrics(3, 10, 6, 6)])
    assert avg.avg_turnaround == pytest.approx(22 / 3)
    assert avg.avg_waiting == pytest.approx(10 / 3)
    assert avg.avg_response == pytest.approx(10 / 3)


def test_compute_averages_empty():
    avg = compute_averages([])
    assert (avg.avg_turnaround, avg.avg_waiting, avg.avg_response) == (0.0, 0.0, 0.0)


def test_system_metrics_ignore_idle_time():
    res = schedule_fcfs([Process(1, 2, 3), Process(2, 8, 2)])
    assert res.system.makespan == 10
    assert res.system.cpu_busy_time == 5
    assert res.system.cpu_utilization == pytest.approx(0.5)
    assert res.system.throughput == pytest.approx(0.2)


def test_safety_horizon():
    assert safety_horizon([Process(1, 0, 5), Process(2, 7, 3)]) == 16
    assert safety_horizon([]) == 1


def test_recorder_merges_contiguous_slices():
    rec = TimelineRecorder(horizon=10)
    rec.run(1, 0, 1)
    rec.run(1, 1, 3)
    rec.run(2, 3, 4)
    rec.run(2, 4, 5, level=1)
    assert [(s.pid, s.start_time, s.end_time, s.level) for s in rec.slices] == [
        (1, 0, 3, None),
        (2, 3, 4, None),
        (2, 4, 5, 1),
    ]
    assert rec.now == 5


def test_recorder_skips_empty_idle():
    rec = TimelineRecorder(horizon=10)
    rec.idle(0, 0)
    rec.idle(0, 2)
    assert [(s.pid, s.start_time, s.end_time) for s in rec.slices] == [(None, 0, 2)]


def test_recorder_rejects_overrun():
    rec = TimelineRecorder(horizon=5)
    with pytest.raises(SimulationFault, match="safety horizon"):
        rec.run(1, 0, 6)


def test_recorder_rejects_gaps_and_empty_slices():
    rec = TimelineRecorder(horizon=10)
    with pytest.raises(SimulationFault):
        rec.run(1, 1, 2)
    with pytest.raises(SimulationFault):
        rec.run(1, 0, 0)

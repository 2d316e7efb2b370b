import logging
from dataclasses import replace

import pytest

from schedsim.errors import (
    EmptyInput,
    InvalidProcess,
    InvalidQuantum,
    MissingQuantum,
    SimulationFault,
    UnknownPolicy,
)
from schedsim.models import Process
from schedsim.registry import (
    DEFAULT_QUANTUM,
    POLICIES,
    compare,
    get_policy,
    list_algorithms,
    run,
    run_algorithm,
)


def _procs():
    return [
        Process(1, arrival_time=0, burst_time=5, priority=2),
        Process(2, arrival_time=1, burst_time=3, priority=1),
        Process(3, arrival_time=2, burst_time=8, priority=3),
    ]


def test_registry_has_all_ten_policies():
    assert list(POLICIES) == [
        "fcfs",
        "sjf",
        "srt",
        "rr",
        "hrrn",
        "priority",
        "feedback",
        "fbv",
        "aging",
        "mlfq",
    ]
    assert [k for k, info in POLICIES.items() if info.needs_quantum] == ["rr"]
    assert {k for k, info in POLICIES.items() if info.needs_priority} == {"priority", "aging"}


def test_run_tags_display_metadata():
    outcome = run("fcfs", _procs())
    assert outcome.ok
    assert outcome.result.algorithm == "First Come First Serve"
    assert outcome.result.abbreviation == "FCFS"
    assert outcome.result.quantum is None


def test_run_accepts_aliases_and_case():
    assert run_algorithm(" SRTF ", _procs()).abbreviation == "SRT"
    assert get_policy("FB").key == "feedback"


def test_quantum_is_ignored_by_non_quantum_policies():
    res = run_algorithm("sjf", _procs(), quantum=-5)
    assert res.quantum is None


def test_unknown_policy_is_reported():
    outcome = run("lottery", _procs())
    assert not outcome.ok
    assert isinstance(outcome.error, UnknownPolicy)
    assert outcome.error.kind == "UnknownPolicy"
    assert "fcfs" in str(outcome.error)


def test_empty_input_is_reported():
    outcome = run("fcfs", [])
    assert isinstance(outcome.error, EmptyInput)
    assert outcome.result is None


@pytest.mark.parametrize(
    "quantum, error",
    [
        (None, MissingQuantum),
        (0, InvalidQuantum),
        (-2, InvalidQuantum),
        (1.5, InvalidQuantum),
        (True, InvalidQuantum),
    ],
)
def test_rr_quantum_rejection(quantum, error):
    outcome = run("rr", _procs(), quantum=quantum)
    assert not outcome.ok
    assert isinstance(outcome.error, error)
    assert "positive integer" in str(outcome.error)


@pytest.mark.parametrize(
    "process",
    [
        Process(0, 0, 1),
        Process(1, -1, 1),
        Process(1, 0, 0),
        Process(1, "0", 3),
        Process(1, 0, 2.5),
        Process(1, 0, 2, None),
        Process(1, True, 2),
    ],
)
def test_invalid_process_is_reported(process):
    outcome = run("fcfs", [process])
    assert isinstance(outcome.error, InvalidProcess)


@pytest.mark.parametrize("key", ["srt", "priority", "aging"])
def test_badly_typed_process_is_rejected_before_simulating(key):
    outcome = run(key, [Process(1, 0, 2, None), Process(2, 0, 2.5, 1)])
    assert isinstance(outcome.error, InvalidProcess)
    assert "must be an integer" in str(outcome.error)


def test_compare_skips_everything_on_badly_typed_workload(caplog):
    with caplog.at_level(logging.WARNING, logger="schedsim.registry"):
        results = compare([Process(1, "0", 3)])
    assert results == {}
    assert "Skipping FCFS" in caplog.text


def test_run_algorithm_raises():
    with pytest.raises(UnknownPolicy):
        run_algorithm("nope", _procs())
    with pytest.raises(MissingQuantum):
        run_algorithm("rr", _procs())


def test_duplicate_pids_warn_but_run(caplog):
    procs = [Process(1, 0, 2), Process(1, 1, 2)]
    with caplog.at_level(logging.WARNING, logger="schedsim.validation"):
        res = run_algorithm("fcfs", procs)
    assert len(res.processes) == 2
    assert "Duplicate pids" in caplog.text


def test_simulation_fault_is_returned_and_logged(monkeypatch, caplog):
    def broken(processes, quantum=None):
        raise SimulationFault("clock ran backwards")

    info = POLICIES["fcfs"]
    monkeypatch.setitem(POLICIES, "fcfs", replace(info, simulate=broken))

    with caplog.at_level(logging.ERROR, logger="schedsim.registry"):
        outcome = run("fcfs", _procs())

    assert isinstance(outcome.error, SimulationFault)
    assert "clock ran backwards" in caplog.text


def test_compare_runs_every_policy():
    results = compare(_procs())
    assert set(results) == set(POLICIES)
    assert results["rr"].quantum == DEFAULT_QUANTUM
    for res in results.values():
        assert [p.pid for p in res.processes] == [1, 2, 3]


def test_compare_skips_failing_policies(monkeypatch, caplog):
    def broken(processes, quantum=None):
        raise SimulationFault("boom")

    info = POLICIES["hrrn"]
    monkeypatch.setitem(POLICIES, "hrrn", replace(info, simulate=broken))

    with caplog.at_level(logging.WARNING, logger="schedsim.registry"):
        results = compare(_procs())

    assert "hrrn" not in results
    assert len(results) == len(POLICIES) - 1
    assert "Skipping HRRN" in caplog.text


def test_compare_rejected_quantum_only_drops_rr():
    results = compare(_procs(), quantum=0)
    assert "rr" not in results
    assert "fcfs" in results


def test_compare_on_empty_workload_is_empty():
    assert compare([]) == {}


def test_list_algorithms_hides_simulators():
    rows = list_algorithms()
    assert len(rows) == 10
    assert rows[0]["key"] == "fcfs"
    assert rows[0]["type"] == "Non-preemptive"
    assert all("simulate" not in row for row in rows)


def test_every_policy_lists_pros_and_cons():
    for row in list_algorithms():
        assert row["pros"], row["key"]
        assert row["cons"], row["key"]
    assert "Convoy effect" in list_algorithms()[0]["cons"]
    assert POLICIES["rr"].pros[1] == "No starvation"

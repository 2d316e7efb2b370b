from pathlib import Path

import pytest

from schedsim.cli import build_parser, main


@pytest.fixture
def workload(tmp_path: Path) -> Path:
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time,priority\n1,0,5,2\n2,1,3,1\n3,6,4,3\n")
    return p


def test_run_prints_metrics(workload, capsys):
    assert main(["run", "-a", "fcfs", "-w", str(workload)]) == 0
    out = capsys.readouterr().out
    assert "First Come First Serve" in out
    assert "Per-process metrics" in out


def test_run_rr_needs_quantum(workload, capsys):
    assert main(["run", "-a", "rr", "-w", str(workload)]) == 2
    assert "quantum" in capsys.readouterr().out


def test_run_unknown_algorithm(workload, capsys):
    assert main(["run", "-a", "lottery", "-w", str(workload)]) == 2
    assert "Unknown scheduling policy" in capsys.readouterr().out


def test_compare_prints_table(workload, capsys):
    assert main(["compare", "-w", str(workload), "-a", "fcfs", "rr", "mlfq"]) == 0
    out = capsys.readouterr().out
    assert "Algorithm comparison" in out
    assert "MLFQ" in out


def test_compare_skips_unknown_algorithm(workload, capsys):
    assert main(["compare", "-w", str(workload), "-a", "fcfs", "lottery", "mlfq"]) == 0
    out = capsys.readouterr().out
    assert "Skipped lottery" in out
    assert "FCFS" in out
    assert "MLFQ" in out


def test_missing_workload_file(tmp_path, capsys):
    assert main(["run", "-a", "fcfs", "-w", str(tmp_path / "none.json")]) == 2


def test_list(capsys):
    assert main(["list"]) == 0
    assert "aging" in capsys.readouterr().out


def test_compare_default_quantum():
    args = build_parser().parse_args(["compare", "-w", "x.json"])
    assert args.quantum == 2
    assert len(args.algorithms) == 10

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .errors import SchedulingError, UnknownPolicy
from .gantt import build_rich_gantt
from .models import ScheduleResult
from .registry import DEFAULT_QUANTUM, POLICIES, get_policy, list_algorithms, run, run_algorithm
from .workload_io import load_workload

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, SJF, SRT, RR, HRRN, Priority, FB, FBV, Aging, MLFQ).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help=f"Algorithm to use ({', '.join(POLICIES)}).",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Time quantum for round robin (ignored by every other algorithm).",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=list(POLICIES),
        help="Algorithms to compare (default: all).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum used for RR when included (default: {DEFAULT_QUANTUM}).",
    )

    subparsers.add_parser("list", help="List the available algorithms.")

    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _print_result(result: ScheduleResult, console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm} ({result.abbreviation})")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    panel, time_marks = build_rich_gantt(result.timeline)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    headers = [
        "PID",
        "Arrive",
        "Burst",
        "Priority",
        "Start",
        "Complete",
        "Turnaround",
        "Wait",
        "Response",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        proc_table.add_column(h, justify="center" if h == "PID" else "right")

    for p in result.processes:
        proc_table.add_row(
            f"P{p.pid}",
            str(p.arrival_time),
            str(p.burst_time),
            str(p.priority),
            str(p.start_time),
            str(p.completion_time),
            str(p.turnaround_time),
            str(p.waiting_time),
            str(p.response_time),
        )

    console.print(proc_table)
    console.print()

    avg = result.averages
    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg turnaround", f"{avg.avg_turnaround:.2f}")
    sys_table.add_row("Avg waiting", f"{avg.avg_waiting:.2f}")
    sys_table.add_row("Avg response", f"{avg.avg_response:.2f}")
    if result.system:
        sys = result.system
        sys_table.add_row("Makespan", str(sys.makespan))
        sys_table.add_row("Throughput (proc/time)", f"{sys.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{sys.cpu_utilization*100:.1f}%")
        sys_table.add_row("Starvation count", str(sys.starvation_count))

    console.print(sys_table)

    idle = [s for s in result.timeline if s.is_idle]
    if idle:
        spans = ", ".join(f"{s.start_time}-{s.end_time}" for s in idle)
        console.print(f"[dim]Idle periods: {spans}[/dim]")


def _run_compare(processes, algorithms: List[str], quantum: int, console: Console) -> None:
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg response", justify="right")

    for name in algorithms:
        try:
            info = get_policy(name)
        except UnknownPolicy as exc:
            console.print(f"[yellow]Skipped {name}: {exc}[/yellow]")
            continue

        outcome = run(info.key, processes, quantum=quantum if info.needs_quantum else None)
        if not outcome.ok:
            console.print(f"[yellow]Skipped {name}: {outcome.error}[/yellow]")
            continue

        result = outcome.result
        avg = result.averages
        summary_table.add_row(
            result.abbreviation,
            "" if result.quantum is None else str(result.quantum),
            f"{avg.avg_turnaround:.2f}",
            f"{avg.avg_waiting:.2f}",
            f"{avg.avg_response:.2f}",
        )

    console.print(summary_table)


def _print_algorithms(console: Console) -> None:
    table = Table(title="Scheduling algorithms", box=box.SIMPLE_HEAVY)
    table.add_column("Key")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Quantum", justify="center")
    table.add_column("Priority", justify="center")

    for row in list_algorithms():
        table.add_row(
            row["key"],
            row["name"],
            row["type"],
            "yes" if row["needs_quantum"] else "",
            "yes" if row["needs_priority"] else "",
        )

    console.print(table)


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    console = Console()

    try:
        if args.command == "run":
            processes = load_workload(Path(args.workload))
            result = run_algorithm(args.algorithm, processes, quantum=args.quantum)
            _print_result(result, console)
            return 0

        if args.command == "compare":
            processes = load_workload(Path(args.workload))
            _run_compare(processes, args.algorithms, args.quantum, console)
            return 0

        if args.command == "list":
            _print_algorithms(console)
            return 0
    except (SchedulingError, ValueError, OSError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        console.print(f"[red]Error: {exc}[/red]")
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())

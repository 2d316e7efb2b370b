from __future__ import annotations

from typing import Dict, List

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice

PALETTE = ["red", "green", "yellow", "blue", "magenta", "cyan"]
IDLE_LABEL = "idle"


def slice_label(sl: ScheduledSlice) -> str:
    return IDLE_LABEL if sl.is_idle else f"P{sl.pid}"


def build_rich_gantt(slices: List[ScheduledSlice]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.

    Idle stretches are drawn dim; every process keeps one color for the whole
    chart, assigned in order of first appearance.
    """
    if not slices:
        return Panel("No execution", title="Gantt Chart"), ""

    pid_to_color: Dict[int, str] = {}

    def color_for(pid: int) -> str:
        if pid not in pid_to_color:
            pid_to_color[pid] = PALETTE[len(pid_to_color) % len(PALETTE)]
        return pid_to_color[pid]

    bar = Text()
    labels = Text()
    time_marks = f"{slices[0].start_time}"

    for sl in slices:
        label = slice_label(sl)
        # A label needs room to be readable; short slices are widened to fit.
        width = max(sl.duration, len(label) + 1)

        if sl.is_idle:
            bar.append("·" * width, style="dim")
            labels.append(label[:width].ljust(width), style="dim")
        else:
            bar.append(" " * width, style=f"on {color_for(sl.pid)}")
            labels.append(label[:width].ljust(width), style="bold")

        time_marks += str(sl.end_time).rjust(width)

    table = Table.grid(padding=(0, 0))
    table.add_row(bar)
    table.add_row(labels)

    return Panel.fit(table, title="Gantt Chart"), time_marks

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice

CELL_WIDTH = 8
IDLE_LABEL = "idle"
COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]


def _cells(slices: List[ScheduledSlice]) -> List[Tuple[Optional[int], int, int]]:
    """
    Slices in start order as ``(pid, start, stop)``, with ``pid=None``
    cells filling any gap where the CPU sat idle.
    """
    cells: List[Tuple[Optional[int], int, int]] = []
    last_time = 0
    for sl in sorted(slices, key=lambda s: (s.start_time, s.end_time)):
        if sl.start_time > last_time:
            cells.append((None, last_time, sl.start_time))
        cells.append((sl.pid, sl.start_time, sl.end_time))
        last_time = sl.end_time
    return cells


def time_marks(slices: List[ScheduledSlice]) -> str:
    """Start of every cell followed by the final stop time, tab separated."""
    cells = _cells(slices)
    if not cells:
        return ""
    return "\t".join([str(start) for _, start, _ in cells] + [str(cells[-1][2])])


def _label(pid: Optional[int]) -> str:
    return IDLE_LABEL if pid is None else str(pid)


def render_gantt(slices: List[ScheduledSlice]) -> str:
    """
    Plain-text Gantt chart: one fixed-width cell per slice, with the slice
    start times underneath and the final stop time at the end.
    """
    if not slices:
        return "Gantt schedule\n(no execution)"

    row = "|"
    for pid, _, _ in _cells(slices):
        label = _label(pid)
        row += label.center(max(CELL_WIDTH, len(label) + 2)) + "|"

    return "\n".join(["Gantt schedule", row, time_marks(slices)])


def build_rich_gantt(slices: List[ScheduledSlice]) -> tuple[Panel, str]:
    """
    Same cells as :func:`render_gantt`, one coloured column per cell (a
    colour per process, dim for idle), returned with the time marks line.
    """
    if not slices:
        return Panel("No execution", title="Gantt Chart"), ""

    pid_to_color: Dict[int, str] = {}
    row = Table.grid(padding=(0, 1))
    cells = []

    for pid, _, _ in _cells(slices):
        label = _label(pid).center(max(CELL_WIDTH, len(_label(pid)) + 2))
        if pid is None:
            cells.append(Text(label, style="dim"))
            continue
        color = pid_to_color.setdefault(pid, COLORS[len(pid_to_color) % len(COLORS)])
        cells.append(Text(label, style=f"bold on {color}"))

    for _ in cells:
        row.add_column(no_wrap=True)
    row.add_row(*cells)

    return Panel.fit(row, title="Gantt Chart"), time_marks(slices)

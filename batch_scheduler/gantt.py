from __future__ import annotations

from typing import Dict, List

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice

COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]


def render_gantt(slices: List[ScheduledSlice]) -> str:
    """
    Plain-text Gantt chart, one ``P<id> [start - end]`` entry per dispatch.

    Idle gaps show up as ``idle [start - end]``. Used when output is not a
    terminal (pipes, files).
    """
    if not slices:
        return "Gantt Chart:\n(no execution)"

    entries = []
    last_time = 0
    for sl in sorted(slices, key=lambda s: (s.start_time, s.end_time)):
        if sl.start_time > last_time:
            entries.append(f"idle [{last_time} - {sl.start_time}]")
        entries.append(f"{sl.label} [{sl.start_time} - {sl.end_time}]")
        last_time = sl.end_time

    return "Gantt Chart:\n" + " ".join(entries)


def build_rich_gantt(slices: List[ScheduledSlice]) -> Panel:
    """
    One lane per process over a shared time axis; each time unit is one cell.
    """
    if not slices:
        return Panel("No execution", title="Gantt Chart")

    makespan = max(s.end_time for s in slices)

    lanes: Dict[int, List[ScheduledSlice]] = {}
    for sl in sorted(slices, key=lambda s: (s.pid, s.start_time)):
        lanes.setdefault(sl.pid, []).append(sl)

    busy = [False] * makespan
    for sl in slices:
        for t in range(sl.start_time, sl.end_time):
            busy[t] = True

    grid = Table.grid(padding=(0, 1))
    grid.add_column(justify="right", style="bold")
    grid.add_column(no_wrap=True)

    for n, (pid, lane) in enumerate(lanes.items()):
        color = COLORS[n % len(COLORS)]
        row = Text()
        cursor = 0
        for sl in lane:
            row.append(" " * (sl.start_time - cursor))
            row.append(" " * (sl.end_time - sl.start_time), style=f"on {color}")
            cursor = sl.end_time
        row.append(" " * (makespan - cursor))
        grid.add_row(f"P{pid}", row)

    idle = Text("".join("." if not b else " " for b in busy), style="dim")
    grid.add_row("idle", idle)
    grid.add_row("t", _time_axis(slices, makespan))

    return Panel.fit(grid, title="Gantt Chart")


def _time_axis(slices: List[ScheduledSlice], makespan: int) -> Text:
    """
    Axis with every slice boundary labelled at its column, skipping labels
    that would overlap the previous one.
    """
    marks = sorted({0, makespan} | {s.start_time for s in slices} | {s.end_time for s in slices})
    axis = [" "] * (makespan + len(str(makespan)))
    next_free = 0
    for mark in marks:
        label = str(mark)
        if mark < next_free:
            continue
        axis[mark:mark + len(label)] = label
        next_free = mark + len(label) + 1
    return Text("".join(axis).rstrip())

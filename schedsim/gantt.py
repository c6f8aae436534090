from __future__ import annotations

from typing import Iterable, List

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import IDLE, GanttBlock

IDLE_STYLE = "on grey23"


def merge_timeline(blocks: Iterable[GanttBlock]) -> List[GanttBlock]:
    """
    Coalesce adjacent blocks with the same occupant into a single block.

    The input must be chronological. Zero-length blocks are dropped. Merging an
    already merged timeline returns an equal timeline.
    """
    merged: List[GanttBlock] = []
    for block in blocks:
        if block.end <= block.start:
            continue
        if merged and merged[-1].occupant == block.occupant and merged[-1].end == block.start:
            merged[-1] = GanttBlock(occupant=block.occupant, start=merged[-1].start, end=block.end)
        else:
            merged.append(block)
    return merged


def pid_color(pid: str) -> str:
    """
    Derive a stable ``#rrggbb`` colour from a process id.
    """
    h = 0
    for ch in pid:
        h = (ord(ch) + ((h << 5) - h)) & 0xFFFFFFFF
    return "#" + "".join(f"{(h >> (i * 8)) & 0xFF:02x}" for i in range(3))


def render_gantt(blocks: List[GanttBlock]) -> str:
    """
    Plain-text Gantt chart, one character per time unit.
    """
    if not blocks:
        return "(no execution)"

    line = "|"
    labels = ""
    time_marks = str(blocks[0].start)

    for block in blocks:
        width = block.duration
        if block.is_idle:
            line += "." * width
            labels += " " * width
        else:
            line += "=" * width
            labels += block.occupant[:width].ljust(width)
        time_marks += f"{block.end:>{max(width, len(str(block.end)) + 1)}}"

    line += "|"

    return "\n".join(
        [
            "Gantt Chart:",
            line,
            " " + labels,
            time_marks,
        ]
    )


def build_rich_gantt(blocks: List[GanttBlock], title: str = "Gantt Chart") -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a coloured Gantt chart and a string with time marks.
    """
    if not blocks:
        panel = Panel("No execution", title=title)
        return panel, ""

    timeline = Text()
    labels = Text()
    time_marks = str(blocks[0].start)

    for block in blocks:
        width = max(1, block.duration)
        if block.is_idle:
            timeline.append(" " * width, style=IDLE_STYLE)
            labels.append(IDLE[:width].ljust(width), style="dim")
        else:
            timeline.append(" " * width, style=f"on {pid_color(block.occupant)}")
            labels.append(block.occupant[:width].ljust(width), style="bold")
        time_marks += f"{block.end:>{max(width, len(str(block.end)) + 1)}}"

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    panel = Panel.fit(table, title=title)
    return panel, time_marks

from schedsim.gantt import build_rich_gantt, merge_timeline, pid_color, render_gantt
from schedsim.models import IDLE, GanttBlock


def test_merge_collapses_adjacent_same_occupant():
    blocks = [
        GanttBlock("A", 0, 1),
        GanttBlock("A", 1, 2),
        GanttBlock("B", 2, 4),
        GanttBlock("A", 4, 5),
        GanttBlock(IDLE, 5, 6),
        GanttBlock(IDLE, 6, 8),
    ]
    assert merge_timeline(blocks) == [
        GanttBlock("A", 0, 2),
        GanttBlock("B", 2, 4),
        GanttBlock("A", 4, 5),
        GanttBlock(IDLE, 5, 8),
    ]


def test_merge_is_idempotent():
    blocks = [GanttBlock("A", 0, 1), GanttBlock("A", 1, 3), GanttBlock("B", 3, 4)]
    once = merge_timeline(blocks)
    assert merge_timeline(once) == once


def test_merge_drops_empty_blocks_and_keeps_input():
    blocks = [GanttBlock("A", 0, 2), GanttBlock("B", 2, 2), GanttBlock("A", 2, 3)]
    assert merge_timeline(blocks) == [GanttBlock("A", 0, 3)]
    assert len(blocks) == 3


def test_merge_empty():
    assert merge_timeline([]) == []


def test_pid_color_is_stable_hex():
    color = pid_color("P1")
    assert color == pid_color("P1")
    assert color.startswith("#") and len(color) == 7
    int(color[1:], 16)
    assert pid_color("P1") != pid_color("P2")


def test_render_gantt_text():
    text = render_gantt([GanttBlock(IDLE, 0, 2), GanttBlock("P1", 2, 5)])
    lines = text.splitlines()
    assert lines[0] == "Gantt Chart:"
    assert lines[1] == "|..===|"
    assert "P1" in lines[2]
    assert lines[3].startswith("0")
    assert lines[3].endswith("5")


def test_render_empty():
    assert render_gantt([]) == "(no execution)"
    _, marks = build_rich_gantt([])
    assert marks == ""


def test_build_rich_gantt_marks():
    _, marks = build_rich_gantt([GanttBlock("P1", 0, 3), GanttBlock(IDLE, 3, 4)])
    assert marks.split() == ["0", "3", "4"]

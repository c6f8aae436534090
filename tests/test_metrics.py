import pytest

from schedsim.metrics import average, compute_averages, compute_system_metrics, round_half_up
from schedsim.models import IDLE, GanttBlock, ProcessResult


def _result(pid, waiting, turnaround):
    return ProcessResult(
        pid=pid,
        arrival_time=0,
        burst_time=turnaround - waiting,
        priority=1,
        start_time=waiting,
        completion_time=turnaround,
        turnaround_time=turnaround,
        waiting_time=waiting,
        response_time=waiting,
    )


@pytest.mark.parametrize(
    "value, expected",
    [(2.675, 2.68), (2.665, 2.67), (10 / 3, 3.33), (26 / 3, 8.67), (0.005, 0.01), (4.0, 4.0)],
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_average_empty_is_zero():
    assert average([]) == 0.0


def test_compute_averages():
    results = [_result("A", 0, 5), _result("B", 4, 7), _result("C", 6, 14)]
    assert compute_averages(results) == (3.33, 8.67)
    assert compute_averages([]) == (0.0, 0.0)


def test_system_metrics():
    timeline = [GanttBlock(IDLE, 0, 2), GanttBlock("A", 2, 6), GanttBlock(IDLE, 6, 8), GanttBlock("B", 8, 10)]
    system = compute_system_metrics(timeline, process_count=2)
    assert system.makespan == 10
    assert system.cpu_busy_time == 6
    assert system.idle_time == 4
    assert system.throughput == pytest.approx(0.2)
    assert system.cpu_utilization == pytest.approx(0.6)


def test_system_metrics_empty():
    system = compute_system_metrics([], process_count=0)
    assert system.makespan == 0
    assert system.throughput == 0.0

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Sequence, Tuple

from .models import GanttBlock, ProcessResult, SystemMetrics


def round_half_up(value: float, places: int = 2) -> float:
    """
    Round ``value`` to ``places`` decimals, halves away from zero (2.675 -> 2.68).
    """
    quant = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quant, rounding=ROUND_HALF_UP))


def average(values: Iterable[int]) -> float:
    values = list(values)
    if not values:
        return 0.0
    return round_half_up(sum(values) / len(values))


def compute_averages(processes: Sequence[ProcessResult]) -> Tuple[float, float]:
    """
    Return ``(avg_waiting_time, avg_turnaround_time)`` rounded to 2 decimals.
    """
    return (
        average(p.waiting_time for p in processes),
        average(p.turnaround_time for p in processes),
    )


def compute_system_metrics(timeline: List[GanttBlock], process_count: int) -> SystemMetrics:
    """
    Compute throughput and CPU utilization from a merged timeline.
    """
    if not timeline:
        return SystemMetrics(cpu_busy_time=0, idle_time=0, makespan=0, throughput=0.0, cpu_utilization=0.0)

    makespan = timeline[-1].end
    cpu_busy_time = sum(block.duration for block in timeline if not block.is_idle)
    idle_time = makespan - cpu_busy_time

    throughput = process_count / makespan if makespan > 0 else 0.0
    cpu_utilization = cpu_busy_time / makespan if makespan > 0 else 0.0

    return SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        idle_time=idle_time,
        makespan=makespan,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
    )

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

IDLE = "IDLE"


@dataclass(frozen=True)
class Process:
    pid: str
    arrival_time: int
    burst_time: int
    priority: int


@dataclass
class SimProcess:
    """
    Working copy of a process owned by a single simulator run.

    ``index`` is the position of the record in the caller's input. ``order``
    is its position in the arrival scan (arrival time, then ``index``) and is
    the secondary key of every selection.
    """

    pid: str
    arrival_time: int
    burst_time: int
    priority: int
    index: int
    order: int
    remaining_time: int = field(init=False, default=0)
    completed: bool = False
    start_time: Optional[int] = None

    def __post_init__(self) -> None:
        self.remaining_time = self.burst_time


@dataclass(frozen=True)
class GanttBlock:
    """
    One contiguous slice ``[start, end)`` of CPU occupancy in the Gantt chart.
    """

    occupant: str
    start: int
    end: int

    @property
    def duration(self) -> int:
        return self.end - self.start

    @property
    def is_idle(self) -> bool:
        return self.occupant == IDLE


@dataclass
class ProcessResult:
    pid: str
    arrival_time: int
    burst_time: int
    priority: int
    start_time: int
    completion_time: int
    turnaround_time: int
    waiting_time: int
    response_time: int


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    idle_time: int
    makespan: int
    throughput: float
    cpu_utilization: float


@dataclass
class SimulationResult:
    algorithm: str
    quantum: Optional[int] = None
    processes: List[ProcessResult] = field(default_factory=list)
    timeline: List[GanttBlock] = field(default_factory=list)
    avg_waiting_time: float = 0.0
    avg_turnaround_time: float = 0.0
    system: Optional[SystemMetrics] = None

"""
CPU scheduling simulator package.

Simulates classical process-scheduling policies (FCFS, SJF, SRTF, Priority,
Round Robin) over a fixed batch of processes and reports a Gantt timeline and
per-process metrics for each policy.
"""

from .algorithms import (
    ALGORITHMS,
    run_algorithm,
    simulate_all,
    simulate_fcfs,
    simulate_priority,
    simulate_rr,
    simulate_sjf,
    simulate_srtf,
)
from .errors import SchedulerError, SimulationInvariantError, ValidationError
from .models import IDLE, GanttBlock, Process, ProcessResult, SimulationResult

__all__ = [
    "ALGORITHMS",
    "IDLE",
    "GanttBlock",
    "Process",
    "ProcessResult",
    "SchedulerError",
    "SimulationInvariantError",
    "SimulationResult",
    "ValidationError",
    "run_algorithm",
    "simulate_all",
    "simulate_fcfs",
    "simulate_priority",
    "simulate_rr",
    "simulate_sjf",
    "simulate_srtf",
]

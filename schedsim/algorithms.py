from __future__ import annotations

import logging
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Deque, Dict, Iterable, List, Optional, Sequence

from .errors import SimulationInvariantError, ValidationError
from .gantt import merge_timeline
from .metrics import compute_averages, compute_system_metrics
from .models import IDLE, GanttBlock, ProcessResult, SimProcess, SimulationResult
from .normalize import ProcessLike, normalize_processes, validate_quantum

logger = logging.getLogger(__name__)


def _complete(p: SimProcess, completion_time: int) -> ProcessResult:
    p.completed = True
    turnaround_time = completion_time - p.arrival_time
    waiting_time = turnaround_time - p.burst_time
    if waiting_time < 0 or p.start_time is None:
        raise SimulationInvariantError(f"Process {p.pid!r} completed at {completion_time} without enough CPU time")
    logger.debug("%s completes at t=%d (waiting %d)", p.pid, completion_time, waiting_time)
    return ProcessResult(
        pid=p.pid,
        arrival_time=p.arrival_time,
        burst_time=p.burst_time,
        priority=p.priority,
        start_time=p.start_time,
        completion_time=completion_time,
        turnaround_time=turnaround_time,
        waiting_time=waiting_time,
        response_time=p.start_time - p.arrival_time,
    )


def _next_arrival(procs: Sequence[SimProcess], time: int) -> int:
    """
    Earliest arrival among unfinished processes that have not arrived by ``time``.
    """
    future = [p.arrival_time for p in procs if not p.completed and p.arrival_time > time]
    if not future:
        raise SimulationInvariantError(f"No ready process and no future arrival at t={time}")
    return min(future)


def _extend_or_append(timeline: List[GanttBlock], occupant: str, start: int, end: int) -> None:
    if timeline and timeline[-1].occupant == occupant and timeline[-1].end == start:
        timeline[-1] = GanttBlock(occupant=occupant, start=timeline[-1].start, end=end)
    else:
        timeline.append(GanttBlock(occupant=occupant, start=start, end=end))


def assemble_result(
    algorithm: str,
    results: Iterable[ProcessResult],
    timeline: Iterable[GanttBlock],
    quantum: Optional[int] = None,
) -> SimulationResult:
    """
    Package per-process results and the raw timeline into a SimulationResult.

    Results are sorted by pid for display, the timeline is merged and the
    averages are rounded to 2 decimals.
    """
    processes = sorted(results, key=lambda r: r.pid)
    merged = merge_timeline(timeline)
    avg_waiting, avg_turnaround = compute_averages(processes)
    return SimulationResult(
        algorithm=algorithm,
        quantum=quantum,
        processes=processes,
        timeline=merged,
        avg_waiting_time=avg_waiting,
        avg_turnaround_time=avg_turnaround,
        system=compute_system_metrics(merged, len(processes)),
    )


def simulate_fcfs(processes: Iterable[ProcessLike]) -> SimulationResult:
    """
    First-Come First-Served (non-preemptive) scheduling.
    """
    procs = normalize_processes(processes)

    time = 0
    timeline: List[GanttBlock] = []
    results: List[ProcessResult] = []

    for p in procs:
        if time < p.arrival_time:
            timeline.append(GanttBlock(occupant=IDLE, start=time, end=p.arrival_time))
            time = p.arrival_time

        p.start_time = time
        end_time = time + p.burst_time
        timeline.append(GanttBlock(occupant=p.pid, start=time, end=end_time))
        p.remaining_time = 0
        results.append(_complete(p, end_time))
        time = end_time

    return assemble_result("FCFS", results, timeline)


def _simulate_non_preemptive(
    processes: Iterable[ProcessLike],
    algorithm: str,
    key: Callable[[SimProcess], int],
) -> SimulationResult:
    """
    Shared loop of the non-preemptive selection policies.

    At each decision point, among processes that have arrived and are not yet
    completed, run the one with the smallest ``key`` to completion. Ties go to
    the process that comes first in the arrival scan.
    """
    procs = normalize_processes(processes)

    time = 0
    timeline: List[GanttBlock] = []
    results: List[ProcessResult] = []

    while len(results) < len(procs):
        ready = [p for p in procs if p.arrival_time <= time and not p.completed]

        if not ready:
            next_arrival = _next_arrival(procs, time)
            timeline.append(GanttBlock(occupant=IDLE, start=time, end=next_arrival))
            time = next_arrival
            continue

        job = min(ready, key=lambda p: (key(p), p.order))
        logger.debug("%s: t=%d picks %s from %s", algorithm, time, job.pid, [p.pid for p in ready])

        job.start_time = time
        end_time = time + job.burst_time
        timeline.append(GanttBlock(occupant=job.pid, start=time, end=end_time))
        job.remaining_time = 0
        results.append(_complete(job, end_time))
        time = end_time

    return assemble_result(algorithm, results, timeline)


def simulate_sjf(processes: Iterable[ProcessLike]) -> SimulationResult:
    """
    Shortest Job First (non-preemptive).
    """
    return _simulate_non_preemptive(processes, "SJF", key=lambda p: p.burst_time)


def simulate_priority(processes: Iterable[ProcessLike]) -> SimulationResult:
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority. A running process is
    never interrupted by a higher-priority arrival.
    """
    return _simulate_non_preemptive(processes, "Priority", key=lambda p: p.priority)


def simulate_srtf(processes: Iterable[ProcessLike]) -> SimulationResult:
    """
    Shortest Remaining Time First (preemptive SJF).

    Time advances one unit per tick and the shortest remaining job is picked
    again on every tick; empty stretches jump straight to the next arrival.
    """
    procs = normalize_processes(processes)

    time = 0
    timeline: List[GanttBlock] = []
    results: List[ProcessResult] = []
    running: Optional[str] = None

    while len(results) < len(procs):
        ready = [p for p in procs if p.arrival_time <= time and not p.completed]

        if not ready:
            next_arrival = _next_arrival(procs, time)
            _extend_or_append(timeline, IDLE, time, next_arrival)
            time = next_arrival
            running = None
            continue

        current = min(ready, key=lambda p: (p.remaining_time, p.order))
        if current.pid != running:
            logger.debug("SRTF: t=%d dispatches %s (remaining %d)", time, current.pid, current.remaining_time)
            running = current.pid
        if current.start_time is None:
            current.start_time = time

        current.remaining_time -= 1
        _extend_or_append(timeline, current.pid, time, time + 1)
        time += 1

        if current.remaining_time == 0:
            results.append(_complete(current, time))

    return assemble_result("SRTF", results, timeline)


def simulate_rr(processes: Iterable[ProcessLike], quantum: int) -> SimulationResult:
    """
    Round Robin scheduling with a fixed time quantum.

    Processes that arrive while a slice is running join the ready queue
    before the preempted process is put back at its tail.
    """
    quantum = validate_quantum(quantum)
    procs = normalize_processes(processes)

    time = 0
    timeline: List[GanttBlock] = []
    finished: Dict[str, ProcessResult] = {}
    ready: Deque[SimProcess] = deque()
    cursor = 0

    def enqueue_arrivals(current_time: int) -> None:
        nonlocal cursor
        while cursor < len(procs) and procs[cursor].arrival_time <= current_time:
            ready.append(procs[cursor])
            cursor += 1

    while len(finished) < len(procs):
        enqueue_arrivals(time)

        if not ready:
            if cursor >= len(procs):
                raise SimulationInvariantError(f"Ready queue empty with no future arrival at t={time}")
            next_arrival = procs[cursor].arrival_time
            timeline.append(GanttBlock(occupant=IDLE, start=time, end=next_arrival))
            time = next_arrival
            continue

        p = ready.popleft()
        if p.start_time is None:
            p.start_time = time

        run_time = min(quantum, p.remaining_time)
        timeline.append(GanttBlock(occupant=p.pid, start=time, end=time + run_time))
        time += run_time
        p.remaining_time -= run_time

        enqueue_arrivals(time)

        if p.remaining_time > 0:
            logger.debug("RR: t=%d requeues %s (remaining %d)", time, p.pid, p.remaining_time)
            ready.append(p)
        else:
            finished[p.pid] = _complete(p, time)

    results = [finished[p.pid] for p in sorted(procs, key=lambda p: p.index)]
    return assemble_result("Round Robin", results, timeline, quantum=quantum)


ALGORITHMS: Dict[str, Callable[..., SimulationResult]] = {
    "fcfs": simulate_fcfs,
    "sjf": simulate_sjf,
    "srtf": simulate_srtf,
    "priority": simulate_priority,
    "rr": simulate_rr,
}

QUANTUM_ALGORITHMS = {"rr"}


def run_algorithm(name: str, processes: Iterable[ProcessLike], quantum: Optional[int] = None) -> SimulationResult:
    """
    Dispatch to the requested algorithm. Quantum is only used by round-robin.
    """
    key = name.lower()
    if key not in ALGORITHMS:
        raise ValidationError(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")

    func = ALGORITHMS[key]
    if key in QUANTUM_ALGORITHMS:
        return func(processes, quantum)
    return func(processes)


def simulate_all(
    processes: Iterable[ProcessLike],
    quantum: Optional[int] = None,
    names: Optional[Sequence[str]] = None,
    parallel: bool = False,
) -> Dict[str, SimulationResult]:
    """
    Run several algorithms on the same batch.

    Returns a dict keyed by algorithm name in the requested order. Every run
    works on its own copy of the batch, so ``parallel=True`` gives the same
    output as running them one after another.
    """
    batch = list(processes)
    names = [n.lower() for n in (names or list(ALGORITHMS))]
    for name in names:
        if name not in ALGORITHMS:
            raise ValidationError(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")

    if not parallel:
        return {name: run_algorithm(name, batch, quantum=quantum) for name in names}

    with ThreadPoolExecutor(max_workers=len(names) or 1) as pool:
        futures = {name: pool.submit(run_algorithm, name, batch, quantum) for name in names}
        return {name: futures[name].result() for name in names}

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Union

from .errors import ValidationError
from .models import IDLE, Process, SimProcess

# Accepted spellings for each field when a record arrives as a mapping.
_FIELD_ALIASES = {
    "pid": ("pid",),
    "arrival_time": ("arrival_time", "arrivalTime", "arrival"),
    "burst_time": ("burst_time", "burstTime", "burst"),
    "priority": ("priority",),
}

# Every spelling of the integer fields.
INT_FIELD_KEYS = frozenset(
    key for name in ("arrival_time", "burst_time", "priority") for key in _FIELD_ALIASES[name]
)

ProcessLike = Union[Process, Mapping[str, Any]]


def _require_int(value: Any, name: str, pid: str) -> int:
    # bool is an int subclass; True/False are never valid times.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Process {pid!r}: {name} must be an integer, got {value!r}")
    return value


def _lookup(mapping: Mapping[str, Any], name: str) -> Any:
    for key in _FIELD_ALIASES[name]:
        if key in mapping:
            return mapping[key]
    raise ValidationError(f"Invalid process entry {dict(mapping)!r}: missing '{name}'")


def to_process(record: ProcessLike) -> Process:
    """
    Validate a single record and return it as an immutable :class:`Process`.
    """
    if isinstance(record, Process):
        pid, arrival, burst, priority = record.pid, record.arrival_time, record.burst_time, record.priority
    elif isinstance(record, Mapping):
        pid = _lookup(record, "pid")
        arrival = _lookup(record, "arrival_time")
        burst = _lookup(record, "burst_time")
        priority = _lookup(record, "priority")
    else:
        raise ValidationError(f"Unsupported process record: {record!r}")

    if not isinstance(pid, str) or not pid.strip():
        raise ValidationError(f"Process id must be a non-empty string, got {pid!r}")
    if pid == IDLE:
        raise ValidationError(f"Process id {IDLE!r} is reserved for idle CPU time")

    arrival = _require_int(arrival, "arrival_time", pid)
    burst = _require_int(burst, "burst_time", pid)
    priority = _require_int(priority, "priority", pid)

    if arrival < 0:
        raise ValidationError(f"Process {pid!r}: arrival_time must be >= 0, got {arrival}")
    if burst <= 0:
        raise ValidationError(f"Process {pid!r}: burst_time must be > 0, got {burst}")

    return Process(pid=pid, arrival_time=arrival, burst_time=burst, priority=priority)


def validate_processes(processes: Iterable[ProcessLike]) -> List[Process]:
    """
    Validate a batch and return it as a list of :class:`Process` in input order.

    Duplicate pids are rejected.
    """
    validated: List[Process] = []
    seen: set[str] = set()
    for record in processes:
        proc = to_process(record)
        if proc.pid in seen:
            raise ValidationError(f"Duplicate process id {proc.pid!r}")
        seen.add(proc.pid)
        validated.append(proc)
    return validated


def normalize_processes(processes: Iterable[ProcessLike]) -> List[SimProcess]:
    """
    Build the working set for one simulator run.

    The returned :class:`SimProcess` objects are fresh copies sorted by arrival
    time (ties keep input order), each tagged with its position in that scan.
    The caller's records are never touched again.
    """
    validated = validate_processes(processes)
    indexed = sorted(enumerate(validated), key=lambda item: (item[1].arrival_time, item[0]))
    return [
        SimProcess(
            pid=p.pid,
            arrival_time=p.arrival_time,
            burst_time=p.burst_time,
            priority=p.priority,
            index=index,
            order=order,
        )
        for order, (index, p) in enumerate(indexed)
    ]


def validate_quantum(quantum: Any) -> int:
    if quantum is None:
        raise ValidationError("Round Robin requires a time quantum (use --quantum)")
    if isinstance(quantum, bool) or not isinstance(quantum, int):
        raise ValidationError(f"Time quantum must be an integer, got {quantum!r}")
    if quantum <= 0:
        raise ValidationError(f"Time quantum must be > 0, got {quantum}")
    return quantum

from __future__ import annotations

import copy
from typing import Dict, List

from .errors import ValidationError
from .models import Process
from .normalize import to_process


class ProcessTable:
    """
    Editable batch of processes for interactive use.

    The table owns its records; ``snapshot()`` hands out copies so a
    simulation can never change what the user entered.
    """

    def __init__(self) -> None:
        self._processes: Dict[str, Process] = {}
        self._counter = 1

    def __len__(self) -> int:
        return len(self._processes)

    def __contains__(self, pid: object) -> bool:
        return pid in self._processes

    @property
    def next_pid(self) -> str:
        """Suggested id for the next process (``P1``, ``P2``, ...)."""
        while f"P{self._counter}" in self._processes:
            self._counter += 1
        return f"P{self._counter}"

    def add(self, pid: str, arrival_time: int, burst_time: int, priority: int) -> Process:
        proc = to_process(
            {"pid": pid, "arrival_time": arrival_time, "burst_time": burst_time, "priority": priority}
        )
        if proc.pid in self._processes:
            raise ValidationError(f"Process ID {proc.pid!r} already exists. Please use a unique ID.")
        self._processes[proc.pid] = proc
        return proc

    def remove(self, pid: str) -> None:
        try:
            del self._processes[pid]
        except KeyError:
            raise ValidationError(f"No process with ID {pid!r}") from None

    def reset(self) -> None:
        self._processes.clear()
        self._counter = 1

    def snapshot(self) -> List[Process]:
        return copy.deepcopy(list(self._processes.values()))

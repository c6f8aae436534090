from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from .models import SimulationResult


@dataclass(frozen=True)
class Recommendation:
    best_waiting: Optional[str]
    best_turnaround: Optional[str]


def _best(results: Mapping[str, SimulationResult], attr: str) -> Optional[str]:
    best_name: Optional[str] = None
    best_value = 0.0
    for name, result in results.items():
        value = getattr(result, attr)
        # Strict comparison: the earliest algorithm wins a tie.
        if best_name is None or value < best_value:
            best_name, best_value = name, value
    return best_name


def recommend(results: Mapping[str, SimulationResult]) -> Recommendation:
    """
    Pick the algorithms with the lowest average waiting and turnaround times.
    """
    return Recommendation(
        best_waiting=_best(results, "avg_waiting_time"),
        best_turnaround=_best(results, "avg_turnaround_time"),
    )

from __future__ import annotations

import csv
import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import IO, Any, Dict, List, Mapping, Optional, Union

from .errors import ValidationError
from .models import Process, SimulationResult
from .normalize import INT_FIELD_KEYS, validate_processes, validate_quantum


@dataclass
class Workload:
    processes: List[Process]
    quantum: Optional[int] = None


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.
    """
    return read_workload(path).processes


def read_workload(path: str | Path) -> Workload:
    """
    Load a workload file, including the default quantum a JSON file may carry.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        return _load_json(path)
    if suffix == ".csv":
        return Workload(processes=_load_csv(path))

    raise ValidationError(f"Unsupported workload format: {suffix} (use .json or .csv)")


def _load_json(path: Path) -> Workload:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"{path}: invalid JSON ({exc})") from exc
        except UnicodeDecodeError as exc:
            raise ValidationError(f"{path}: not UTF-8 text ({exc})") from exc

    quantum = None
    if isinstance(raw, Mapping):
        if raw.get("quantum") is not None:
            quantum = validate_quantum(raw["quantum"])
        raw = raw.get("processes")

    if not isinstance(raw, list):
        raise ValidationError("JSON workload must be a list of process objects")

    return Workload(processes=validate_processes(raw), quantum=quantum)


def _load_csv(path: Path) -> List[Process]:
    entries: List[Dict[str, Any]] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        try:
            for row in reader:
                entries.append(_parse_csv_row(row))
        except UnicodeDecodeError as exc:
            raise ValidationError(f"{path}: not UTF-8 text ({exc})") from exc
    return validate_processes(entries)


def _parse_csv_row(row: Mapping[str, Optional[str]]) -> Dict[str, Any]:
    parsed: Dict[str, Any] = {}
    for key, value in row.items():
        if key is None:
            raise ValidationError(f"Invalid process entry {dict(row)!r}: too many columns")
        key = key.strip()
        value = (value or "").strip()
        if key == "pid":
            parsed[key] = value
        elif key not in INT_FIELD_KEYS:
            # Extra columns (labels, notes) are ignored.
            continue
        elif value == "":
            # Missing cells are reported by validation as missing fields.
            continue
        else:
            try:
                parsed[key] = int(value)
            except ValueError as exc:
                raise ValidationError(f"Invalid process entry {dict(row)!r}: {key} is not an integer") from exc
    return parsed


def result_to_dict(result: SimulationResult) -> Dict[str, Any]:
    return asdict(result)


def dump_results(results: Mapping[str, SimulationResult], dest: Union[str, Path, IO[str]]) -> None:
    """
    Write simulation results as JSON, keyed by algorithm name.
    """
    payload = {name: result_to_dict(result) for name, result in results.items()}
    if isinstance(dest, (str, Path)):
        with Path(dest).open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
            f.write("\n")
    else:
        json.dump(payload, dest, indent=2)
        dest.write("\n")

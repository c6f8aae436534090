import io
import json
from pathlib import Path

import pytest

from schedsim.algorithms import simulate_fcfs
from schedsim.errors import ValidationError
from schedsim.models import Process
from schedsim.workload_io import dump_results, load_workload, read_workload


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":"A","arrival_time":0,"burst_time":3,"priority":1},'
                 '{"pid":"B","arrival_time":1,"burst_time":2,"priority":2}]')
    procs = load_workload(p)
    assert isinstance(procs[0], Process)
    assert procs[1].priority == 2
    assert procs[1].arrival_time == 1


def test_load_json_camel_case_with_quantum(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text(json.dumps({
        "quantum": 4,
        "processes": [{"pid": "P1", "arrivalTime": 0, "burstTime": 5, "priority": 1}],
    }))
    workload = read_workload(p)
    assert workload.quantum == 4
    assert workload.processes == [Process("P1", 0, 5, 1)]


def test_load_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time,priority\nA,0,3,1\nB,1,2,4\n")
    procs = load_workload(p)
    assert procs[0].pid == "A"
    assert procs[1].priority == 4


@pytest.mark.parametrize(
    "content",
    [
        "pid,arrival_time,burst_time,priority\nA,0,3,\n",
        "pid,arrival_time,burst_time,priority\nA,zero,3,1\n",
        "pid,arrival_time,burst_time,priority\nA,0,3,1\nA,1,2,1\n",
        "pid,arrival_time,burst_time,priority\nA,0,0,1\n",
    ],
)
def test_invalid_csv_rejected(tmp_path: Path, content):
    p = tmp_path / "w.csv"
    p.write_text(content)
    with pytest.raises(ValidationError):
        load_workload(p)


def test_json_rejects_non_integer(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":"A","arrival_time":"0","burst_time":3,"priority":1}]')
    with pytest.raises(ValidationError):
        load_workload(p)


def test_unsupported_suffix(tmp_path: Path):
    with pytest.raises(ValidationError):
        load_workload(tmp_path / "w.txt")


def test_dump_results():
    result = simulate_fcfs([Process("P1", 0, 5, 1)])
    out = io.StringIO()
    dump_results({"fcfs": result}, out)
    data = json.loads(out.getvalue())
    assert data["fcfs"]["algorithm"] == "FCFS"
    assert data["fcfs"]["timeline"] == [{"occupant": "P1", "start": 0, "end": 5}]
    assert data["fcfs"]["avg_turnaround_time"] == 5.0


def test_csv_extra_columns_are_ignored(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time,priority,name\nA,0,3,1,editor\nB,2,1,2,\n")
    procs = load_workload(p)
    assert procs == [Process("A", 0, 3, 1), Process("B", 2, 1, 2)]


@pytest.mark.parametrize("suffix", [".json", ".csv"])
def test_non_utf8_file_rejected(tmp_path: Path, suffix):
    p = tmp_path / f"w{suffix}"
    p.write_bytes(b"pid,arrival_time,burst_time,priority\n\xff\xfe,0,3,1\n")
    with pytest.raises(ValidationError, match="UTF-8"):
        load_workload(p)

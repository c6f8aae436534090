from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import Dict, List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import ALGORITHMS, QUANTUM_ALGORITHMS, run_algorithm, simulate_all
from .compare import recommend
from .errors import SchedulerError
from .gantt import build_rich_gantt
from .models import SimulationResult
from .session import ProcessTable
from .workload_io import dump_results, read_workload

DEFAULT_QUANTUM = 2

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, SJF, SRTF, Priority, RR).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING). DEBUG traces every scheduling decision.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help=f"Algorithm to use ({', '.join(ALGORITHMS)}).",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Time quantum for round-robin (ignored by the other algorithms).",
    )
    run_parser.add_argument(
        "--step",
        action="store_true",
        help="Show a simple time-stepped simulation in the terminal.",
    )
    run_parser.add_argument(
        "--step-delay",
        type=float,
        default=0.3,
        help="Seconds to wait between steps when --step is used (default: 0.3).",
    )
    run_parser.add_argument("--json", dest="json_out", default=None, help="Also write the result as JSON to this path.")

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=list(ALGORITHMS),
        help=f"Algorithms to compare (default: {' '.join(ALGORITHMS)}).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help=f"Time quantum used for RR (default: the workload's quantum, else {DEFAULT_QUANTUM}).",
    )
    compare_parser.add_argument(
        "--parallel",
        action="store_true",
        help="Run the algorithms on a thread pool.",
    )
    compare_parser.add_argument("--json", dest="json_out", default=None, help="Also write the results as JSON to this path.")

    menu_parser = subparsers.add_parser(
        "menu",
        help="Interactive process table: add processes, then compare all algorithms.",
    )
    menu_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Default quantum to prefill for RR (default: {DEFAULT_QUANTUM}).",
    )

    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _print_result(result: SimulationResult, console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    panel, time_marks = build_rich_gantt(result.timeline)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    headers = [
        "PID",
        "Arrive",
        "Burst",
        "Priority",
        "Complete",
        "Turnaround",
        "Wait",
        "Response",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    for p in result.processes:
        proc_table.add_row(
            p.pid,
            str(p.arrival_time),
            str(p.burst_time),
            str(p.priority),
            str(p.completion_time),
            str(p.turnaround_time),
            str(p.waiting_time),
            str(p.response_time),
        )

    console.print(proc_table)
    console.print()

    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg waiting", f"{result.avg_waiting_time:.2f}")
    sys_table.add_row("Avg turnaround", f"{result.avg_turnaround_time:.2f}")
    if result.system:
        sys_table.add_row("Makespan", str(result.system.makespan))
        sys_table.add_row("Idle time", str(result.system.idle_time))
        sys_table.add_row("Throughput (proc/time)", f"{result.system.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{result.system.cpu_utilization*100:.1f}%")

    console.print(sys_table)


def _print_comparison(results: Dict[str, SimulationResult], console: Console, title: str = "Algorithm comparison") -> None:
    summary_table = Table(title=title, box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Makespan", justify="right")

    for result in results.values():
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{result.avg_waiting_time:.2f}",
            f"{result.avg_turnaround_time:.2f}",
            str(result.system.makespan if result.system else 0),
        )

    console.print(summary_table)

    best = recommend(results)
    if best.best_waiting is None:
        return
    wait = results[best.best_waiting]
    turnaround = results[best.best_turnaround]
    console.print(f"[bold green]Best average waiting time:[/bold green] {wait.algorithm} (Avg: {wait.avg_waiting_time:.2f})")
    console.print(
        f"[bold green]Best average turnaround time:[/bold green] {turnaround.algorithm} "
        f"(Avg: {turnaround.avg_turnaround_time:.2f})"
    )


def _animate_result(result: SimulationResult, delay: float, console: Console) -> None:
    """
    Simple time-stepped textual simulation using the computed schedule.
    """
    if not result.timeline:
        console.print("[red]No execution to animate.[/red]")
        return

    makespan = result.timeline[-1].end
    console.print(f"[bold]Simulating {result.algorithm}[/bold] (duration {makespan} time units)")
    console.print("[dim]Press Ctrl+C to skip animation.[/dim]")

    for t in range(makespan):
        block = next(b for b in result.timeline if b.start <= t < b.end)
        if block.is_idle:
            msg = f"t={t:2d}: [dim]idle[/dim]"
        else:
            msg = f"t={t:2d}: {block.occupant} [green]{'#' * (t - block.start + 1)}[/green]"
        console.print(msg)
        time.sleep(delay)


def _prompt_int(prompt: str, default: Optional[int] = None) -> Optional[int]:
    raw = input(prompt).strip()
    if raw == "" and default is not None:
        return default
    try:
        return int(raw)
    except ValueError:
        return None


def _print_table(table: ProcessTable, console: Console) -> None:
    proc_table = Table(title="Processes", box=box.SIMPLE_HEAVY)
    for h in ["PID", "Arrive", "Burst", "Priority"]:
        proc_table.add_column(h, justify="right")
    for p in table.snapshot():
        proc_table.add_row(p.pid, str(p.arrival_time), str(p.burst_time), str(p.priority))
    console.print(proc_table)


def _interactive_menu(default_quantum: int, console: Console) -> None:
    table = ProcessTable()
    actions = ["Add process", "Remove process", "List processes", "Compare all algorithms", "Reset"]

    while True:
        console.print("\n[bold cyan]Scheduler Menu[/bold cyan] [dim](q to quit)[/dim]")
        for idx, action in enumerate(actions, start=1):
            console.print(f"  [yellow]{idx}[/yellow]. [white]{action}[/white]")

        choice = input(f"Choice [1-{len(actions)} or q]: ").strip().lower()
        if choice in {"q", "quit", "exit"}:
            return

        try:
            if choice == "1":
                pid = input(f"Process ID [{table.next_pid}]: ").strip() or table.next_pid
                arrival = _prompt_int("Arrival time [0]: ", default=0)
                burst = _prompt_int("Burst time [1]: ", default=1)
                priority = _prompt_int("Priority [1]: ", default=1)
                if arrival is None or burst is None or priority is None:
                    console.print("[red]Please fill in all fields with valid numbers.[/red]")
                    continue
                table.add(pid, arrival, burst, priority)
            elif choice == "2":
                table.remove(input("Process ID to remove: ").strip())
            elif choice == "3":
                _print_table(table, console)
            elif choice == "4":
                if not len(table):
                    console.print("[red]Please add at least one process.[/red]")
                    continue
                quantum = _prompt_int(f"Time quantum for RR [{default_quantum}]: ", default=default_quantum)
                if quantum is None:
                    console.print("[red]Please enter a valid time quantum (>= 1).[/red]")
                    continue
                results = simulate_all(table.snapshot(), quantum=quantum)
                for result in results.values():
                    _print_result(result, console)
                    console.print()
                _print_comparison(results, console)
            elif choice == "5":
                table.reset()
                console.print("[yellow]Process table cleared.[/yellow]")
            else:
                console.print("[red]Invalid selection.[/red]")
        except SchedulerError as exc:
            console.print(f"[red]Error: {escape(str(exc))}[/red]")


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    console = Console()

    try:
        if args.command == "run":
            workload = read_workload(Path(args.workload))
            quantum = args.quantum if args.quantum is not None else workload.quantum
            logger.info("Running %s on %d processes", args.algorithm, len(workload.processes))
            result = run_algorithm(args.algorithm, workload.processes, quantum=quantum)
            if args.step:
                try:
                    _animate_result(result, delay=args.step_delay, console=console)
                except KeyboardInterrupt:
                    console.print("[yellow]Animation skipped.[/yellow]")
            _print_result(result, console)
            if args.json_out:
                dump_results({args.algorithm.lower(): result}, args.json_out)
            return 0

        if args.command == "compare":
            workload = read_workload(Path(args.workload))
            quantum = args.quantum
            if quantum is None:
                quantum = workload.quantum if workload.quantum is not None else DEFAULT_QUANTUM
            if not QUANTUM_ALGORITHMS.intersection(a.lower() for a in args.algorithms):
                quantum = None
            logger.info("Comparing %s on %d processes", ", ".join(args.algorithms), len(workload.processes))
            results = simulate_all(workload.processes, quantum=quantum, names=args.algorithms, parallel=args.parallel)
            _print_comparison(results, console, title=f"Algorithm comparison: {args.workload}")
            if args.json_out:
                dump_results(results, args.json_out)
            return 0

        if args.command == "menu":
            _interactive_menu(args.quantum, console)
            return 0
    except (SchedulerError, OSError) as exc:
        Console(stderr=True).print(f"[red]Error: {escape(str(exc))}[/red]")
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())

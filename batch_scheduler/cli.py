from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import ALGORITHMS, run_algorithm
from .errors import SchedulerError
from .gantt import build_rich_gantt, render_gantt
from .metrics import summarize_process_metrics
from .models import ProcessRecord, ScheduleResult
from .workload_io import load_workload

logger = logging.getLogger(__name__)

DEFAULT_WORKLOAD = "examples/processes.txt"
DEFAULT_QUANTUM = 2
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="batch-scheduler",
        description="Single-CPU batch scheduling simulator (FCFS, SRT, RR).",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="WARNING",
        help="Logging verbosity; DEBUG traces every dispatch (default: WARNING).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help="Algorithm to use (fcfs, srt, rr).",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to a workload file (.txt arrival/burst pairs, .json or .csv).",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Time quantum for round-robin (ignored by FCFS and SRT).",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run several algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to a workload file (.txt arrival/burst pairs, .json or .csv).",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=list(ALGORITHMS),
        help="Algorithms to compare (default: fcfs srt rr).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum used for RR when included (default: {DEFAULT_QUANTUM}).",
    )

    menu_parser = subparsers.add_parser(
        "menu",
        help="Interactive menu to pick an algorithm at runtime.",
    )
    menu_parser.add_argument(
        "--workload",
        "-w",
        default=DEFAULT_WORKLOAD,
        help=f"Workload file to schedule (default: {DEFAULT_WORKLOAD}).",
    )
    menu_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Default quantum offered for RR (default: {DEFAULT_QUANTUM}).",
    )

    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


def _print_result(result: ScheduleResult, console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    if console.is_terminal:
        console.print(build_rich_gantt(result.timeline))
    else:
        console.print(render_gantt(result.timeline), markup=False, highlight=False)

    console.print()

    headers = ["PID", "Arrive", "Burst", "Start", "Finish", "Wait", "Turnaround", "Response"]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        proc_table.add_column(h, justify="center" if h == "PID" else "right")

    for p in result.processes:
        proc_table.add_row(
            str(p.id),
            str(p.arrival_time),
            str(p.burst_time),
            str(p.start_time),
            str(p.finish_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.response_time),
        )

    console.print(proc_table)
    console.print()

    summary = summarize_process_metrics(result.processes)
    if result.system:
        sys = result.system
        sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
        sys_table.add_column("Metric")
        sys_table.add_column("Value", justify="right")

        sys_table.add_row("Avg waiting", f"{summary['avg_waiting']:.2f}")
        sys_table.add_row("Avg turnaround", f"{summary['avg_turnaround']:.2f}")
        sys_table.add_row("Avg response", f"{summary['avg_response']:.2f}")
        sys_table.add_row("Throughput (proc/time)", f"{sys.throughput:.3f}")
        sys_table.add_row("Idle time", str(sys.idle_time))
        sys_table.add_row("CPU utilization", f"{sys.cpu_utilization:.2f}%")

        console.print(sys_table)


def _print_comparison(
    processes: Sequence[ProcessRecord], algorithms: List[str], quantum: int, console: Console
) -> None:
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")
    summary_table.add_column("CPU util.", justify="right")

    for alg in algorithms:
        result = run_algorithm(alg, processes, quantum=quantum)
        summary = summarize_process_metrics(result.processes)
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{summary['avg_waiting']:.2f}",
            f"{summary['avg_turnaround']:.2f}",
            f"{summary['avg_response']:.2f}",
            f"{result.system.cpu_utilization:.2f}%",
        )

    console.print(summary_table)


def _interactive_menu(processes: Sequence[ProcessRecord], default_quantum: int, console: Console) -> None:
    choices = list(ALGORITHMS)

    while True:
        console.print("\n[bold cyan]Select the scheduling algorithm[/bold cyan] [dim](q to quit)[/dim]")
        for idx, alg in enumerate(choices, start=1):
            console.print(f"  [yellow]{idx}[/yellow]. [white]{ALGORITHMS[alg]}[/white]")

        choice = input(f"Choice [1-{len(choices)} or q]: ").strip().lower()
        if choice in {"q", "quit", "exit"}:
            return

        if not choice.isdigit() or not 1 <= int(choice) <= len(choices):
            console.print("[red]Invalid selection.[/red]")
            continue
        alg = choices[int(choice) - 1]

        quantum: Optional[int] = None
        if alg == "rr":
            q_in = input(f"Time quantum [{default_quantum}]: ").strip()
            try:
                quantum = int(q_in) if q_in else default_quantum
            except ValueError:
                console.print("[red]Invalid quantum.[/red]")
                continue

        try:
            result = run_algorithm(alg, processes, quantum=quantum)
        except SchedulerError as exc:
            console.print(f"[red]Error: {escape(str(exc))}[/red]")
            continue

        _print_result(result, console)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    console = Console()

    try:
        processes = load_workload(Path(args.workload))

        if args.command == "run":
            result = run_algorithm(args.algorithm, processes, quantum=args.quantum)
            _print_result(result, console)
            return 0

        if args.command == "compare":
            _print_comparison(processes, args.algorithms, args.quantum, console)
            return 0

        if args.command == "menu":
            _interactive_menu(processes, args.quantum, console)
            return 0
    except (SchedulerError, OSError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())

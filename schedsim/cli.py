from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import ALGORITHMS, run_algorithm
from .gantt import build_rich_gantt, render_gantt
from .metrics import summarize_process_metrics
from .models import ScheduleResult
from .report import DEFAULT_ALGORITHMS, DEFAULT_QUANTUM, ReportConfig, run_report
from .workload_io import load_workload

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, SJF, SJF-Priority, RR).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Increase log output (-v for info, -vv for scheduler decisions).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    report_parser = subparsers.add_parser(
        "report",
        help="Run every discipline on a workload and print each schedule.",
    )
    report_parser.add_argument("workload", help="Path to CSV or JSON workload file.")
    report_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum for round-robin (default: {DEFAULT_QUANTUM}).",
    )
    report_parser.add_argument(
        "--plain",
        action="store_true",
        help="Print a plain-text Gantt chart instead of the colored one.",
    )

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
        help="Path to CSV or JSON workload file.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum for round-robin, ignored by the others (default: {DEFAULT_QUANTUM}).",
    )
    run_parser.add_argument(
        "--plain",
        action="store_true",
        help="Print a plain-text Gantt chart instead of the colored one.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to CSV or JSON workload file.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=list(DEFAULT_ALGORITHMS),
        help=f"Algorithms to compare (default: {' '.join(DEFAULT_ALGORITHMS)}).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum used for RR when included (default: {DEFAULT_QUANTUM}).",
    )

    return parser


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _schedule_table(result: ScheduleResult) -> Table:
    """
    Per-process table with averages and throughput in the footer.
    """
    summary = summarize_process_metrics(result.processes)

    footers = {
        "Wait": f"Average\n{summary['avg_waiting']:.2f}",
        "Turnaround": f"Average\n{summary['avg_turnaround']:.2f}",
        "Exit": f"Throughput\n{summary['throughput']:.2f}/t",
    }

    table = Table(title="Schedule table", box=box.SIMPLE_HEAVY, show_footer=True)
    for h in ["ID", "Priority", "Burst", "Arrival", "Wait", "Turnaround", "Exit"]:
        justify = "center" if h in {"ID", "Priority"} else "right"
        table.add_column(h, justify=justify, footer=footers.get(h, ""))

    for p in result.processes:
        table.add_row(
            str(p.pid),
            str(p.priority),
            str(p.burst_time),
            str(p.arrival_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.completion_time),
        )

    return table


def _print_result(result: ScheduleResult, console: Console, plain: bool = False) -> None:
    console.rule(f"[bold]{result.algorithm}[/bold]")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    if plain:
        console.print(render_gantt(result.timeline), highlight=False)
    else:
        panel, time_marks = build_rich_gantt(result.timeline)
        console.print(panel)
        if time_marks:
            console.print(time_marks)

    console.print()
    console.print(_schedule_table(result))

    if result.system:
        system = result.system
        console.print(
            f"Makespan {system.makespan}, CPU busy {system.cpu_busy_time}, "
            f"utilization {system.cpu_utilization * 100:.1f}%"
        )
    console.print()


def _compare_table(results: List[ScheduleResult]) -> Table:
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")
    summary_table.add_column("Throughput", justify="right")

    for result in results:
        summary = summarize_process_metrics(result.processes)
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{summary['avg_waiting']:.2f}",
            f"{summary['avg_turnaround']:.2f}",
            f"{summary['avg_response']:.2f}",
            f"{summary['throughput']:.3f}",
        )
    return summary_table


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    console = Console()

    try:
        if args.command == "report":
            processes = load_workload(Path(args.workload))
            for result in run_report(processes, ReportConfig(quantum=args.quantum)):
                _print_result(result, console, plain=args.plain)
            return 0

        if args.command == "run":
            processes = load_workload(Path(args.workload))
            result = run_algorithm(args.algorithm, processes, quantum=args.quantum)
            _print_result(result, console, plain=args.plain)
            return 0

        if args.command == "compare":
            processes = load_workload(Path(args.workload))
            config = ReportConfig(quantum=args.quantum, algorithms=tuple(args.algorithms))
            console.print(_compare_table(run_report(processes, config)))
            return 0
    except (OSError, ValueError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())

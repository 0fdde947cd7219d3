from __future__ import annotations

from typing import Dict, List

from .models import ProcessMetrics, ScheduleResult, SystemMetrics


class MetricsAccumulator:
    """
    Running totals for one scheduler run.

    Averages and throughput fall back to 0.0 when there is nothing to divide
    by (no processes, or nothing ever completed).
    """

    def __init__(self) -> None:
        self.count = 0
        self.total_waiting = 0
        self.total_turnaround = 0
        self.last_completion = 0

    def add(self, waiting_time: int, turnaround_time: int, completion_time: int) -> None:
        self.count += 1
        self.total_waiting += waiting_time
        self.total_turnaround += turnaround_time
        self.last_completion = max(self.last_completion, completion_time)

    def add_process(self, p: ProcessMetrics) -> None:
        self.add(p.waiting_time, p.turnaround_time, p.completion_time)

    @property
    def average_waiting(self) -> float:
        return self.total_waiting / self.count if self.count else 0.0

    @property
    def average_turnaround(self) -> float:
        return self.total_turnaround / self.count if self.count else 0.0

    @property
    def throughput(self) -> float:
        return self.count / self.last_completion if self.last_completion > 0 else 0.0


def compute_system_metrics(result: ScheduleResult) -> SystemMetrics:
    """
    Compute the averages, throughput and CPU utilization given populated
    per-process metrics and timeline slices.
    """
    acc = MetricsAccumulator()
    for p in result.processes:
        acc.add_process(p)

    makespan = acc.last_completion
    cpu_busy_time = sum(slice_.duration for slice_ in result.timeline)

    system = SystemMetrics(
        avg_waiting=acc.average_waiting,
        avg_turnaround=acc.average_turnaround,
        throughput=acc.throughput,
        makespan=makespan,
        cpu_busy_time=cpu_busy_time,
        cpu_utilization=cpu_busy_time / makespan if makespan > 0 else 0.0,
    )
    result.system = system
    return system


def summarize_process_metrics(processes: List[ProcessMetrics]) -> Dict[str, float]:
    """
    Averages over a run's per-process rows, plus throughput, keyed for the
    comparison and schedule tables.
    """
    acc = MetricsAccumulator()
    total_response = 0
    for p in processes:
        acc.add_process(p)
        total_response += p.response_time

    return {
        "avg_waiting": acc.average_waiting,
        "avg_turnaround": acc.average_turnaround,
        "avg_response": total_response / acc.count if acc.count else 0.0,
        "throughput": acc.throughput,
    }

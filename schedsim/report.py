from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .algorithms import run_algorithm
from .models import Process, ScheduleResult, clone_processes

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 2
DEFAULT_ALGORITHMS: Tuple[str, ...] = ("fcfs", "sjf", "sjf-priority", "rr")


@dataclass
class ReportConfig:
    quantum: int = DEFAULT_QUANTUM
    algorithms: Tuple[str, ...] = DEFAULT_ALGORITHMS


def run_report(processes: List[Process], config: Optional[ReportConfig] = None) -> List[ScheduleResult]:
    """
    Run every configured discipline over the same workload.

    Each run gets its own copy of the process list, so no discipline sees
    another's bookkeeping.
    """
    config = config or ReportConfig()
    results: List[ScheduleResult] = []
    for alg in config.algorithms:
        result = run_algorithm(alg, clone_processes(processes), quantum=config.quantum)
        logger.info(
            "%s: avg wait %.2f, avg turnaround %.2f",
            result.algorithm,
            result.system.avg_waiting if result.system else 0.0,
            result.system.avg_turnaround if result.system else 0.0,
        )
        results.append(result)
    return results

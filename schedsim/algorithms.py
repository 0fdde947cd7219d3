from __future__ import annotations

import logging
from collections import deque
from typing import Deque, List, Optional

from .metrics import compute_system_metrics
from .models import (
    Process,
    ProcessMetrics,
    ReadyQueue,
    ScheduledSlice,
    ScheduleResult,
    clone_processes,
)

logger = logging.getLogger(__name__)


def _by_arrival(processes: List[Process]) -> List[Process]:
    # sorted() is stable: equal arrivals keep the caller's order.
    return sorted(processes, key=lambda p: p.arrival_time)


def _complete(p: Process, completion_time: int) -> None:
    p.completed = True
    p.remaining_time = 0
    p.completion_time = completion_time
    p.turnaround_time = completion_time - p.arrival_time


def schedule_fcfs(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    Processes are served in the order given; the caller presents them in
    arrival order. A service-time cursor advances by each burst; waiting time
    is the cursor minus the arrival, never below zero, and the CPU idles
    forward to an arrival that is still in the future.
    """
    procs = clone_processes(processes)

    service_time = 0
    timeline: List[ScheduledSlice] = []
    metrics: List[ProcessMetrics] = []

    for p in procs:
        p.waiting_time = max(0, service_time - p.arrival_time)
        start_time = p.arrival_time + p.waiting_time
        if start_time > service_time:
            logger.debug("FCFS: CPU idle %d..%d", service_time, start_time)

        p.start_time = start_time
        service_time = start_time + p.burst_time
        _complete(p, service_time)

        timeline.append(ScheduledSlice(pid=p.pid, start_time=start_time, end_time=service_time))
        metrics.append(ProcessMetrics.from_process(p))

    result = ScheduleResult(algorithm="FCFS", quantum=quantum, processes=metrics, timeline=timeline)
    compute_system_metrics(result)
    return result


def _find_shortest_job(remaining: List[Process], service_time: int) -> Optional[Process]:
    # ``remaining`` is arrival-sorted, so stop at the first process still to come.
    shortest: Optional[Process] = None
    for p in remaining:
        if p.arrival_time > service_time:
            break
        if shortest is None or p.burst_time < shortest.burst_time:
            shortest = p
    return shortest


def schedule_sjf(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Job First (non-preemptive).

    At each decision point, among processes that have arrived and not yet
    run, choose the one with the smallest burst time. Equal bursts go to the
    earliest arrival. When nothing has arrived the CPU idles one time unit.
    """
    order = {p.pid: i for i, p in enumerate(processes)}
    remaining = _by_arrival(clone_processes(processes))

    service_time = 0
    timeline: List[ScheduledSlice] = []
    finished: List[Process] = []

    while remaining:
        p = _find_shortest_job(remaining, service_time)
        if p is None:
            service_time += 1
            continue

        remaining.remove(p)

        p.waiting_time = max(0, service_time - p.arrival_time)
        p.start_time = service_time
        _complete(p, service_time + p.burst_time)

        timeline.append(ScheduledSlice(pid=p.pid, start_time=service_time, end_time=p.completion_time))
        finished.append(p)
        service_time = p.completion_time

    # Report rows follow the caller's order; the timeline keeps run order.
    finished.sort(key=lambda p: order[p.pid])
    metrics = [ProcessMetrics.from_process(p) for p in finished]

    result = ScheduleResult(algorithm="SJF (non-preemptive)", quantum=quantum, processes=metrics, timeline=timeline)
    compute_system_metrics(result)
    return result


def schedule_sjf_priority(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Preemptive shortest-remaining-time scheduling, simulated one tick at a time.

    Every tick the arrived, unfinished processes are re-sorted by remaining
    burst. The CPU is not only handed out when idle: a ready process with
    strictly less remaining time displaces the running one at the tick
    boundary. On a tie the running process keeps the CPU.

    Priority does not influence selection. It is an offset in the waiting
    time: ``waiting = turnaround - priority``.
    """
    procs = clone_processes(processes)

    time = 0
    completed = 0
    ready: List[Process] = []
    queued: set[int] = set()
    running: Optional[Process] = None
    timeline: List[ScheduledSlice] = []
    finished: List[Process] = []

    while completed < len(procs):
        for p in procs:
            if not p.completed and p.arrival_time <= time and p.pid not in queued and p is not running:
                ready.append(p)
                queued.add(p.pid)

        ready.sort(key=lambda p: p.remaining_time)

        if running is not None and ready and ready[0].remaining_time < running.remaining_time:
            logger.debug(
                "SJF-Priority: t=%d process %d preempts %d", time, ready[0].pid, running.pid
            )
            ready.append(running)
            queued.add(running.pid)
            running = None
            ready.sort(key=lambda p: p.remaining_time)

        if running is None and ready:
            running = ready.pop(0)
            queued.discard(running.pid)
            if running.start_time is None:
                running.start_time = time

        if running is not None:
            last = timeline[-1] if timeline else None
            if last is not None and last.pid == running.pid and last.end_time == time:
                last.end_time = time + 1
            else:
                timeline.append(ScheduledSlice(pid=running.pid, start_time=time, end_time=time + 1))

            running.remaining_time -= 1
            if running.remaining_time == 0:
                _complete(running, time + 1)
                running.waiting_time = running.turnaround_time - running.priority
                logger.debug("SJF-Priority: process %d finished at %d", running.pid, time + 1)
                finished.append(running)
                completed += 1
                running = None
        else:
            logger.debug("SJF-Priority: t=%d CPU idle", time)

        time += 1

    metrics = [ProcessMetrics.from_process(p) for p in finished]
    result = ScheduleResult(algorithm="SJF-Priority (preemptive)", quantum=quantum, processes=metrics, timeline=timeline)
    compute_system_metrics(result)
    return result


def schedule_rr(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.

    The process under the rotation pointer runs for at most one quantum;
    every other queued process accrues that time as waiting. If it is not
    finished the pointer moves on, and arrivals during the slice join the
    end of the ring, ahead of the preempted process's next turn.
    ``result.processes`` is the completion log, in finish order.
    """
    if quantum is None or quantum <= 0:
        raise ValueError("Round Robin requires a positive quantum (use --quantum)")

    incoming: Deque[Process] = deque(_by_arrival(clone_processes(processes)))
    ready = ReadyQueue(quantum)

    time = 0
    timeline: List[ScheduledSlice] = []
    metrics: List[ProcessMetrics] = []

    while incoming or ready:
        while incoming and incoming[0].arrival_time <= time:
            p = incoming.popleft()
            # Arrived part-way through the previous slice.
            p.waiting_time += time - p.arrival_time
            ready.enqueue(p)

        if not ready:
            time += 1
            continue

        p = ready.current()
        if p.start_time is None:
            p.start_time = time

        executed = min(p.remaining_time, ready.quantum)
        timeline.append(ScheduledSlice(pid=p.pid, start_time=time, end_time=time + executed))
        time += executed
        p.remaining_time -= executed

        for other in ready.others():
            other.waiting_time += executed

        if p.remaining_time == 0:
            ready.finish()
            _complete(p, time)
            logger.debug(
                "RR: process %d finished at time %d (turnaround time %d, waiting time %d)",
                p.pid,
                time,
                p.turnaround_time,
                p.waiting_time,
            )
            metrics.append(ProcessMetrics.from_process(p))
        else:
            ready.rotate()

    result = ScheduleResult(algorithm="Round Robin", quantum=quantum, processes=metrics, timeline=timeline)
    compute_system_metrics(result)
    return result


ALGORITHMS = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "sjf-priority": schedule_sjf_priority,
    "rr": schedule_rr,
}

QUANTUM_ALGORITHMS = {"rr"}


def run_algorithm(name: str, processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum is only used by round-robin.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")

    func = ALGORITHMS[name]
    logger.info("Running %s on %d processes", name, len(processes))
    return func(processes, quantum=quantum if name in QUANTUM_ALGORITHMS else None)

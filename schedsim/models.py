from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Iterator, List, Optional


@dataclass
class Process:
    pid: int
    arrival_time: int
    burst_time: int
    priority: int = 0

    # Scheduling-derived state, mutated by the schedulers.
    remaining_time: int = field(init=False)
    completed: bool = field(default=False, init=False)
    waiting_time: int = field(default=0, init=False)
    turnaround_time: int = field(default=0, init=False)
    completion_time: int = field(default=0, init=False)
    start_time: Optional[int] = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.remaining_time = self.burst_time


def clone_processes(processes: List[Process]) -> List[Process]:
    """
    Return an independent deep copy of a process list.

    Every scheduler mutates remaining/waiting/completed state, so each run
    must start from its own copy.
    """
    return deepcopy(list(processes))


@dataclass
class ScheduledSlice:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    """

    pid: int
    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass
class ProcessMetrics:
    pid: int
    arrival_time: int
    burst_time: int
    start_time: int
    completion_time: int
    waiting_time: int
    turnaround_time: int
    response_time: int
    priority: int = 0

    @classmethod
    def from_process(cls, p: Process) -> "ProcessMetrics":
        start_time = p.start_time if p.start_time is not None else p.arrival_time
        return cls(
            pid=p.pid,
            arrival_time=p.arrival_time,
            burst_time=p.burst_time,
            start_time=start_time,
            completion_time=p.completion_time,
            waiting_time=p.waiting_time,
            turnaround_time=p.turnaround_time,
            response_time=start_time - p.arrival_time,
            priority=p.priority,
        )


@dataclass
class SystemMetrics:
    avg_waiting: float
    avg_turnaround: float
    throughput: float
    makespan: int = 0
    cpu_busy_time: int = 0
    cpu_utilization: float = 0.0


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    processes: List[ProcessMetrics] = field(default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)
    system: Optional[SystemMetrics] = None


class ReadyQueue:
    """
    Round-robin ready set: a ring of processes that have arrived and not yet
    finished, with a pointer at the process whose turn it is.

    ``rotate`` moves the pointer to the next member. New arrivals are
    appended at the end of the ring, so after a rotation they run before the
    process that was just preempted comes round again. ``finish`` drops the
    current process and leaves the pointer on its successor.
    """

    def __init__(self, quantum: int):
        if quantum <= 0:
            raise ValueError(f"Round Robin requires a positive quantum, got {quantum}")
        self.quantum = quantum
        self._ring: List[Process] = []
        self._index = 0
        self._pids: set[int] = set()

    def __len__(self) -> int:
        return len(self._ring)

    def __iter__(self) -> Iterator[Process]:
        """Members in turn order, starting with the current one."""
        return iter(self._ring[self._index:] + self._ring[:self._index])

    def __contains__(self, process: Process) -> bool:
        return process.pid in self._pids

    def enqueue(self, process: Process) -> None:
        if process.completed:
            raise ValueError(f"Process {process.pid} has already finished")
        if process.pid in self._pids:
            raise ValueError(f"Process {process.pid} is already queued")
        self._ring.append(process)
        self._pids.add(process.pid)

    def current(self) -> Process:
        return self._ring[self._index]

    def others(self) -> Iterator[Process]:
        """Every queued process except the one whose turn it is."""
        return (p for i, p in enumerate(self._ring) if i != self._index)

    def rotate(self) -> None:
        self._index = (self._index + 1) % len(self._ring)

    def finish(self) -> Process:
        process = self._ring.pop(self._index)
        self._pids.discard(process.pid)
        if self._index >= len(self._ring):
            self._index = 0
        return process

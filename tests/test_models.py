import pytest

from schedsim.metrics import MetricsAccumulator, compute_system_metrics, summarize_process_metrics
from schedsim.models import (
    Process,
    ProcessMetrics,
    ReadyQueue,
    ScheduledSlice,
    ScheduleResult,
    clone_processes,
)


def test_process_starts_with_full_remaining_burst():
    p = Process(1, arrival_time=0, burst_time=4)
    assert p.remaining_time == 4
    assert p.priority == 0
    assert not p.completed
    assert p.start_time is None


def test_clone_is_independent():
    procs = [Process(1, arrival_time=0, burst_time=4)]
    copies = clone_processes(procs)
    copies[0].remaining_time = 0
    copies[0].completed = True
    assert procs[0].remaining_time == 4
    assert not procs[0].completed


def test_ready_queue_rotation():
    q = ReadyQueue(quantum=2)
    a, b, c = (Process(i, arrival_time=0, burst_time=1) for i in (1, 2, 3))
    for p in (a, b, c):
        q.enqueue(p)

    assert q.current() is a
    assert list(q.others()) == [b, c]

    q.rotate()
    assert [p.pid for p in q] == [2, 3, 1]

    assert q.finish() is b
    assert len(q) == 2
    assert b not in q
    assert a in q


def test_ready_queue_rejects_duplicates_and_finished():
    q = ReadyQueue(quantum=1)
    p = Process(1, arrival_time=0, burst_time=1)
    q.enqueue(p)
    with pytest.raises(ValueError, match="already queued"):
        q.enqueue(p)

    done = Process(2, arrival_time=0, burst_time=1)
    done.completed = True
    with pytest.raises(ValueError, match="already finished"):
        q.enqueue(done)


def test_ready_queue_requires_positive_quantum():
    with pytest.raises(ValueError):
        ReadyQueue(quantum=0)


def test_accumulator_averages():
    acc = MetricsAccumulator()
    acc.add(waiting_time=0, turnaround_time=5, completion_time=5)
    acc.add(waiting_time=4, turnaround_time=7, completion_time=8)
    assert acc.average_waiting == 2.0
    assert acc.average_turnaround == 6.0
    assert acc.throughput == 2 / 8


def test_accumulator_empty_is_zero():
    acc = MetricsAccumulator()
    assert acc.average_waiting == 0.0
    assert acc.average_turnaround == 0.0
    assert acc.throughput == 0.0


def test_compute_system_metrics_utilization():
    result = ScheduleResult(
        algorithm="test",
        quantum=None,
        timeline=[ScheduledSlice(1, 2, 4)],
    )
    assert compute_system_metrics(result).cpu_utilization == 0.0

    p = Process(1, arrival_time=2, burst_time=2)
    p.completion_time, p.turnaround_time, p.start_time = 4, 2, 2
    result.processes = [ProcessMetrics.from_process(p)]
    system = compute_system_metrics(result)
    assert result.system is system
    assert system.makespan == 4
    assert system.cpu_busy_time == 2
    assert system.cpu_utilization == 0.5
    assert summarize_process_metrics(result.processes)["avg_response"] == 0.0


def test_ready_queue_new_arrival_joins_ring_ahead_of_preempted():
    q = ReadyQueue(quantum=2)
    a, b, c = (Process(i, arrival_time=0, burst_time=4) for i in (1, 2, 3))
    q.enqueue(a)
    q.enqueue(b)

    q.rotate()
    q.enqueue(c)
    assert [p.pid for p in q] == [2, 3, 1]
    assert [p.pid for p in q.others()] == [1, 3]


def test_ready_queue_finish_last_member_wraps_to_first():
    q = ReadyQueue(quantum=1)
    a, b = (Process(i, arrival_time=0, burst_time=1) for i in (1, 2))
    q.enqueue(a)
    q.enqueue(b)
    q.rotate()
    assert q.finish() is b
    assert q.current() is a


def test_summarize_includes_throughput():
    rows = []
    for pid, completion, waiting in [(1, 5, 0), (2, 8, 4)]:
        p = Process(pid, arrival_time=0, burst_time=completion - waiting)
        p.completion_time, p.turnaround_time, p.waiting_time, p.start_time = completion, completion, waiting, waiting
        rows.append(ProcessMetrics.from_process(p))

    summary = summarize_process_metrics(rows)
    assert summary["avg_waiting"] == 2.0
    assert summary["avg_turnaround"] == 6.5
    assert summary["avg_response"] == 2.0
    assert summary["throughput"] == 2 / 8
    assert summarize_process_metrics([])["throughput"] == 0.0

from pathlib import Path

from schedsim.cli import main
from schedsim.gantt import build_rich_gantt, render_gantt
from schedsim.models import Process, ScheduledSlice
from schedsim.report import ReportConfig, run_report


def _procs():
    return [
        Process(1, arrival_time=0, burst_time=5, priority=2),
        Process(2, arrival_time=1, burst_time=3, priority=1),
        Process(3, arrival_time=2, burst_time=8, priority=3),
    ]


def test_report_runs_every_discipline():
    procs = _procs()
    results = run_report(procs)
    assert [r.algorithm for r in results] == [
        "FCFS",
        "SJF (non-preemptive)",
        "SJF-Priority (preemptive)",
        "Round Robin",
    ]
    assert results[-1].quantum == 2
    assert all(r.quantum is None for r in results[:-1])
    # runs do not leak state into each other or into the caller's list
    assert all(p.remaining_time == p.burst_time and not p.completed for p in procs)
    assert results[0].processes[2].waiting_time == results[1].processes[2].waiting_time == 6


def test_report_config_subset():
    results = run_report(_procs(), ReportConfig(quantum=100, algorithms=("rr",)))
    assert len(results) == 1
    assert [s.pid for s in results[0].timeline] == [1, 2, 3]


def test_report_empty_workload():
    for result in run_report([]):
        assert result.timeline == []
        assert result.system.throughput == 0.0


def test_render_gantt_plain():
    text = render_gantt([ScheduledSlice(2, 5, 8), ScheduledSlice(1, 0, 5)])
    lines = text.splitlines()
    assert lines[0] == "Gantt schedule"
    assert lines[1] == "|   1    |   2    |"
    assert lines[2] == "0\t5\t8"


def test_render_gantt_empty():
    assert "(no execution)" in render_gantt([])
    panel, marks = build_rich_gantt([])
    assert marks == ""


def test_rich_gantt_time_marks_include_idle():
    _, marks = build_rich_gantt([ScheduledSlice(1, 0, 2), ScheduledSlice(2, 4, 5)])
    assert marks == "0\t2\t4\t5"


def test_render_gantt_marks_idle_gap():
    lines = render_gantt([ScheduledSlice(1, 0, 2), ScheduledSlice(2, 4, 5)]).splitlines()
    assert lines[1] == "|   1    |  idle  |   2    |"
    assert lines[2] == "0\t2\t4\t5"


def test_cli_report(tmp_path: Path, capsys):
    workload = tmp_path / "procs.csv"
    workload.write_text("1,5,0,2\n2,3,1,1\n3,8,2,3\n")
    assert main(["report", str(workload), "--plain"]) == 0
    out = capsys.readouterr().out
    for title in ("FCFS", "SJF (non-preemptive)", "SJF-Priority (preemptive)", "Round Robin"):
        assert title in out
    assert "Schedule table" in out
    assert "Throughput" in out


def test_cli_run_and_compare(tmp_path: Path, capsys):
    workload = tmp_path / "procs.json"
    workload.write_text('[{"pid":1,"arrival_time":0,"burst_time":2}]')
    assert main(["run", "-a", "rr", "-w", str(workload), "-q", "1"]) == 0
    assert "Round Robin" in capsys.readouterr().out

    assert main(["compare", "-w", str(workload), "-a", "fcfs", "sjf"]) == 0
    assert "Algorithm comparison" in capsys.readouterr().out


def test_cli_reports_errors(tmp_path: Path, capsys):
    assert main(["report", str(tmp_path / "missing.csv")]) == 1
    assert "Error" in capsys.readouterr().out

    workload = tmp_path / "procs.csv"
    workload.write_text("1,5,0\n")
    assert main(["run", "-a", "lottery", "-w", str(workload)]) == 1
    assert "Unknown algorithm" in capsys.readouterr().out

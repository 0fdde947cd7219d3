"""
Batch CPU scheduling simulator.

Runs a fixed set of processes through FCFS, SJF, preemptive SJF-Priority and
Round-Robin, and reports each discipline's Gantt timeline together with
waiting, turnaround and throughput figures.
"""

__version__ = "0.1.0"

__all__ = ["cli"]

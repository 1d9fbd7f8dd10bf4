"""
Batch scheduler package.

Simulates FCFS, Shortest Remaining Time and Round-Robin dispatch of a fixed
batch of processes on a single CPU and reports per-process and CPU
utilization statistics.
"""

from .algorithms import fcfs, round_robin, run_algorithm, srt
from .models import ProcessRecord

__all__ = ["ProcessRecord", "fcfs", "round_robin", "run_algorithm", "srt"]

from __future__ import annotations

from typing import Sequence

from .errors import EmptyInputError, SchedulerError
from .models import ProcessRecord, ScheduleResult, SystemMetrics


def _require_finished(processes: Sequence[ProcessRecord]) -> None:
    if not processes:
        raise EmptyInputError("No processes to report on")
    for p in processes:
        if not p.finished:
            raise SchedulerError(f"{p.label} has not finished; run a policy first")


def cpu_utilization(processes: Sequence[ProcessRecord]) -> float:
    """
    Percentage of time the CPU was busy, measured from t=0 to the last finish.
    """
    _require_finished(processes)
    busy = sum(p.burst_time for p in processes)
    makespan = max(p.finish_time for p in processes)
    return busy / makespan * 100 if makespan > 0 else 0.0


def compute_system_metrics(result: ScheduleResult) -> SystemMetrics:
    """
    Compute throughput, idle time and CPU utilization from finished records.
    """
    _require_finished(result.processes)

    makespan = max(p.finish_time for p in result.processes)
    cpu_busy_time = sum(p.burst_time for p in result.processes)

    system = SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        makespan=makespan,
        idle_time=makespan - cpu_busy_time,
        throughput=len(result.processes) / makespan if makespan > 0 else 0.0,
        cpu_utilization=cpu_utilization(result.processes),
    )
    result.system = system
    return system


def summarize_process_metrics(processes: Sequence[ProcessRecord]) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    if not processes:
        return {"avg_waiting": 0.0, "avg_turnaround": 0.0, "avg_response": 0.0}

    n = len(processes)
    return {
        "avg_waiting": sum(p.waiting_time for p in processes) / n,
        "avg_turnaround": sum(p.turnaround_time for p in processes) / n,
        "avg_response": sum(p.response_time for p in processes) / n,
    }

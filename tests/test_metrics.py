import pytest

from batch_scheduler.algorithms import fcfs, run_algorithm
from batch_scheduler.errors import EmptyInputError, SchedulerError
from batch_scheduler.metrics import cpu_utilization, summarize_process_metrics
from batch_scheduler.models import ProcessRecord


def test_single_late_process_utilization():
    procs = [ProcessRecord(1, arrival_time=10, burst_time=4)]
    fcfs(procs)
    assert cpu_utilization(procs) == pytest.approx(28.5714, rel=1e-4)


def test_system_metrics_with_idle_gap():
    res = run_algorithm("fcfs", [ProcessRecord(1, 0, 2), ProcessRecord(2, 5, 3)])
    assert res.system.cpu_busy_time == 5
    assert res.system.makespan == 8
    assert res.system.idle_time == 3
    assert res.system.throughput == pytest.approx(2 / 8)
    assert res.system.cpu_utilization == pytest.approx(62.5)


def test_utilization_requires_finished_records():
    with pytest.raises(EmptyInputError):
        cpu_utilization([])
    with pytest.raises(SchedulerError):
        cpu_utilization([ProcessRecord(1, 0, 3)])


def test_summarize_process_metrics():
    res = run_algorithm("srt", [ProcessRecord(1, 0, 5), ProcessRecord(2, 0, 3)])
    summary = summarize_process_metrics(res.processes)
    assert summary["avg_waiting"] == pytest.approx(1.5)
    assert summary["avg_turnaround"] == pytest.approx(5.5)
    assert summary["avg_response"] == pytest.approx(1.5)
    assert summarize_process_metrics([])["avg_waiting"] == 0.0

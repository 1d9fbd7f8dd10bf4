"""
Invariants that must hold for every policy on arbitrary arrival-ordered
workloads. Workloads come from a seeded generator so runs are repeatable.
"""

import random

import pytest

from batch_scheduler.algorithms import fcfs, round_robin, srt
from batch_scheduler.metrics import cpu_utilization
from batch_scheduler.models import ProcessRecord, copy_records

QUANTA = [1, 2, 3, 5]


def _workload(seed, n=12):
    rng = random.Random(seed)
    arrival = 0
    procs = []
    for pid in range(1, n + 1):
        arrival += rng.choice([0, 0, 1, 2, 3, 7])
        procs.append(ProcessRecord(pid, arrival, rng.randint(1, 9)))
    return procs


def _run(name, procs, quantum=2):
    timeline = []
    if name == "fcfs":
        fcfs(procs, timeline)
    elif name == "srt":
        srt(procs, timeline)
    else:
        round_robin(procs, quantum, timeline)
    return timeline


CASES = [(name, seed) for name in ("fcfs", "srt", "rr") for seed in range(8)]


@pytest.mark.parametrize("name,seed", CASES)
def test_completion_fields_are_consistent(name, seed):
    procs = _workload(seed)
    _run(name, procs)
    for p in procs:
        assert p.remaining_time == 0
        assert p.finish_time >= p.arrival_time + p.burst_time
        assert p.turnaround_time == p.finish_time - p.arrival_time
        assert p.turnaround_time == p.waiting_time + p.burst_time
        assert p.start_time >= p.arrival_time


@pytest.mark.parametrize("name,seed", CASES)
def test_timeline_is_exclusive_and_complete(name, seed):
    procs = _workload(seed)
    timeline = _run(name, procs)

    for a, b in zip(timeline, timeline[1:]):
        assert a.end_time <= b.start_time

    by_pid = {p.id: p for p in procs}
    granted = {p.id: 0 for p in procs}
    for s in timeline:
        assert s.start_time >= by_pid[s.pid].arrival_time
        granted[s.pid] += s.end_time - s.start_time
    assert granted == {p.id: p.burst_time for p in procs}

    last = {}
    for s in timeline:
        last[s.pid] = s.end_time
    assert last == {p.id: p.finish_time for p in procs}


@pytest.mark.parametrize("name,seed", CASES)
def test_utilization_bounded_and_full_without_idle(name, seed):
    procs = _workload(seed)
    timeline = _run(name, procs)
    util = cpu_utilization(procs)
    assert 0 < util <= 100 + 1e-9

    busy_from_zero = timeline[0].start_time == 0 and all(
        a.end_time == b.start_time for a, b in zip(timeline, timeline[1:])
    )
    assert (util == pytest.approx(100.0)) == busy_from_zero


@pytest.mark.parametrize("seed", range(8))
def test_fcfs_dispatch_order_matches_arrival_order(seed):
    procs = _workload(seed)
    timeline = _run("fcfs", procs)
    assert [s.pid for s in timeline] == [p.id for p in procs]


@pytest.mark.parametrize("seed", range(8))
def test_srt_never_runs_longer_job_over_shorter_ready_one(seed):
    procs = _workload(seed)
    timeline = _run("srt", procs)

    remaining = {p.id: p.burst_time for p in procs}
    arrival = {p.id: p.arrival_time for p in procs}
    for s in timeline:
        # Check at slice start and at every arrival inside the slice.
        points = [s.start_time] + sorted(
            {a for a in arrival.values() if s.start_time < a < s.end_time}
        )
        for t in points:
            ran = t - s.start_time
            ready = {
                pid: rem - (ran if pid == s.pid else 0)
                for pid, rem in remaining.items()
                if arrival[pid] <= t and rem > 0
            }
            assert ready[s.pid] == min(ready.values())
        remaining[s.pid] -= s.end_time - s.start_time


@pytest.mark.parametrize("quantum", QUANTA)
@pytest.mark.parametrize("seed", range(4))
def test_rr_slices_never_exceed_quantum(quantum, seed):
    procs = _workload(seed)
    timeline = _run("rr", procs, quantum=quantum)
    for s in timeline:
        assert s.end_time - s.start_time <= quantum


@pytest.mark.parametrize("name", ["fcfs", "srt", "rr"])
def test_runs_on_independent_copies_are_identical(name):
    original = _workload(42)
    first, second = copy_records(original), copy_records(original)
    t1 = _run(name, first)
    t2 = _run(name, second)
    assert t1 == t2
    assert first == second
    assert all(p.finish_time is None for p in original)

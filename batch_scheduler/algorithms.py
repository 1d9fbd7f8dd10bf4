from __future__ import annotations

import heapq
import logging
from collections import deque
from typing import Deque, List, Optional, Sequence, Tuple

from .engine import ArrivalCursor, advance_clock, validate_processes
from .errors import InvalidConfigurationError
from .metrics import compute_system_metrics
from .models import ProcessRecord, ScheduleResult, ScheduledSlice, copy_records

logger = logging.getLogger(__name__)


def _record_slice(
    timeline: Optional[List[ScheduledSlice]], pid: int, start: int, end: int, merge: bool = False
) -> None:
    if timeline is None:
        return
    if merge and timeline and timeline[-1].pid == pid and timeline[-1].end_time == start:
        timeline[-1].end_time = end
        return
    timeline.append(ScheduledSlice(pid=pid, start_time=start, end_time=end))


def fcfs(processes: Sequence[ProcessRecord], timeline: Optional[List[ScheduledSlice]] = None) -> None:
    """
    First-Come First-Served (non-preemptive) scheduling.

    Runs each process to completion in input order. Mutates ``processes``.
    """
    validate_processes(processes)

    time = 0
    for p in processes:
        if time < p.arrival_time:
            logger.debug("t=%d: CPU idle until t=%d", time, p.arrival_time)
            time = p.arrival_time

        start_time = time
        p.run(p.burst_time, start_time)
        time = start_time + p.burst_time
        p.mark_finished(time)

        _record_slice(timeline, p.id, start_time, time)
        logger.debug("t=%d: %s finished", time, p.label)


def srt(processes: Sequence[ProcessRecord], timeline: Optional[List[ScheduledSlice]] = None) -> None:
    """
    Shortest Remaining Time (preemptive SJF).

    The ready process with the least remaining time runs until it finishes or
    the next arrival, whichever comes first, and the choice is then made
    again. Ties go to the earliest arrival, then the lowest id.
    Mutates ``processes``.
    """
    validate_processes(processes)

    cursor = ArrivalCursor(processes)
    # (remaining_time, arrival_time, id, index)
    ready: List[Tuple[int, int, int, int]] = []
    time = 0

    def push(idx: int) -> None:
        p = processes[idx]
        heapq.heappush(ready, (p.remaining_time, p.arrival_time, p.id, idx))

    while ready or not cursor.exhausted:
        for idx in cursor.admit(time):
            push(idx)

        if not ready:
            nxt = advance_clock(time, cursor)
            logger.debug("t=%d: CPU idle until t=%d", time, nxt)
            time = nxt
            continue

        idx = heapq.heappop(ready)[3]
        current = processes[idx]

        # Run until completion or next arrival, whichever comes first.
        next_arrival = cursor.next_arrival
        if next_arrival is None:
            run_time = current.remaining_time
        else:
            run_time = min(current.remaining_time, next_arrival - time)

        current.run(run_time, time)
        _record_slice(timeline, current.id, time, time + run_time, merge=True)
        time += run_time

        if current.remaining_time > 0:
            push(idx)
        else:
            current.mark_finished(time)
            logger.debug("t=%d: %s finished", time, current.label)


def round_robin(
    processes: Sequence[ProcessRecord],
    quantum: int,
    timeline: Optional[List[ScheduledSlice]] = None,
) -> None:
    """
    Round Robin scheduling with a fixed time quantum.

    Processes that arrive while a slice runs, or exactly when it ends, join
    the tail of the queue ahead of the process that was just preempted.
    Mutates ``processes``.
    """
    if isinstance(quantum, bool) or not isinstance(quantum, int) or quantum <= 0:
        raise InvalidConfigurationError(f"Round Robin requires a positive integer quantum, got {quantum!r}")
    validate_processes(processes)

    cursor = ArrivalCursor(processes)
    ready: Deque[int] = deque()
    time = 0

    while ready or not cursor.exhausted:
        ready.extend(cursor.admit(time))

        if not ready:
            nxt = advance_clock(time, cursor)
            logger.debug("t=%d: CPU idle until t=%d", time, nxt)
            time = nxt
            continue

        idx = ready.popleft()
        current = processes[idx]

        run_time = min(quantum, current.remaining_time)
        current.run(run_time, time)
        _record_slice(timeline, current.id, time, time + run_time)
        time += run_time

        ready.extend(cursor.admit(time))

        if current.remaining_time > 0:
            logger.debug("t=%d: %s preempted with %d remaining", time, current.label, current.remaining_time)
            ready.append(idx)
        else:
            current.mark_finished(time)
            logger.debug("t=%d: %s finished", time, current.label)


ALGORITHMS = {
    "fcfs": "FCFS",
    "srt": "SRT",
    "rr": "Round Robin",
}

_ALIASES = {
    "srtf": "srt",
    "round_robin": "rr",
}


def run_algorithm(name: str, processes: Sequence[ProcessRecord], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Run the named policy on a private copy of ``processes`` and collect the
    finished records, the timeline and system metrics. The caller's records
    are left untouched.
    """
    key = name.lower()
    key = _ALIASES.get(key, key)
    if key not in ALGORITHMS:
        raise InvalidConfigurationError(
            f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})"
        )

    records = copy_records(processes)
    timeline: List[ScheduledSlice] = []

    logger.info("Running %s on %d processes", ALGORITHMS[key], len(records))
    if key == "fcfs":
        fcfs(records, timeline)
    elif key == "srt":
        srt(records, timeline)
    else:
        round_robin(records, quantum, timeline)

    result = ScheduleResult(
        algorithm=ALGORITHMS[key],
        quantum=quantum if key == "rr" else None,
        processes=records,
        timeline=timeline,
    )
    compute_system_metrics(result)
    return result

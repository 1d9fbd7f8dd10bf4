"""
Simulated-time bookkeeping shared by the scheduling policies.

Policies never hold references to records inside their ready structures;
they work with indices into the arrival-ordered sequence handed out by
:class:`ArrivalCursor`.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from .errors import EmptyInputError, InvalidProcessError, SchedulerError, UnsortedInputError
from .models import ProcessRecord


def validate_processes(processes: Sequence[ProcessRecord]) -> None:
    if not processes:
        raise EmptyInputError("No processes to schedule")

    for p in processes:
        if p.arrival_time < 0:
            raise InvalidProcessError(f"{p.label}: arrival time must be >= 0, got {p.arrival_time}")
        if p.burst_time <= 0:
            raise InvalidProcessError(f"{p.label}: burst time must be > 0, got {p.burst_time}")

    for prev, cur in zip(processes, processes[1:]):
        if cur.arrival_time < prev.arrival_time:
            raise UnsortedInputError(
                f"{cur.label} arrives at t={cur.arrival_time}, before "
                f"{prev.label} at t={prev.arrival_time}; input must be sorted by arrival"
            )


class ArrivalCursor:
    """
    Walks an arrival-ordered process sequence, admitting records as simulated
    time reaches their arrival.
    """

    def __init__(self, processes: Sequence[ProcessRecord]):
        self._processes = processes
        self._index = 0

    @property
    def exhausted(self) -> bool:
        return self._index >= len(self._processes)

    @property
    def next_arrival(self) -> Optional[int]:
        if self.exhausted:
            return None
        return self._processes[self._index].arrival_time

    def admit(self, now: int) -> List[int]:
        """
        Indices of every not-yet-admitted record with ``arrival_time <= now``,
        in input order.
        """
        admitted: List[int] = []
        while not self.exhausted and self._processes[self._index].arrival_time <= now:
            admitted.append(self._index)
            self._index += 1
        return admitted


def advance_clock(now: int, cursor: ArrivalCursor) -> int:
    """
    Idle gap: nothing is ready, so jump to the next arrival.
    """
    nxt = cursor.next_arrival
    if nxt is None:
        raise SchedulerError(f"CPU idle at t={now} with no arrivals left")
    return max(now, nxt)

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .errors import SchedulerError


@dataclass
class ProcessRecord:
    """
    One simulated process.

    Only ``id``, ``arrival_time`` and ``burst_time`` are supplied by the loader;
    the remaining fields are filled in by a scheduling policy.
    """

    id: int
    arrival_time: int
    burst_time: int
    remaining_time: int = field(init=False)
    start_time: Optional[int] = field(default=None, init=False)
    finish_time: Optional[int] = field(default=None, init=False)
    waiting_time: Optional[int] = field(default=None, init=False)
    turnaround_time: Optional[int] = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.remaining_time = self.burst_time

    @property
    def label(self) -> str:
        return f"P{self.id}"

    @property
    def finished(self) -> bool:
        return self.finish_time is not None

    @property
    def response_time(self) -> Optional[int]:
        if self.start_time is None:
            return None
        return self.start_time - self.arrival_time

    def run(self, amount: int, now: int) -> None:
        """
        Grant ``amount`` units of CPU starting at simulated time ``now``.
        """
        if amount <= 0 or amount > self.remaining_time:
            raise SchedulerError(
                f"{self.label}: cannot run {amount} units with {self.remaining_time} remaining"
            )
        if self.start_time is None:
            self.start_time = now
        self.remaining_time -= amount

    def mark_finished(self, now: int) -> None:
        if self.remaining_time != 0:
            raise SchedulerError(f"{self.label} still has {self.remaining_time} units remaining")
        if self.finished:
            raise SchedulerError(f"{self.label} already finished at t={self.finish_time}")

        self.finish_time = now
        self.turnaround_time = now - self.arrival_time
        self.waiting_time = self.turnaround_time - self.burst_time


def copy_records(records: Iterable[ProcessRecord]) -> List[ProcessRecord]:
    """
    Fresh, unsimulated copies so several policies can run on the same input.
    """
    return [ProcessRecord(r.id, r.arrival_time, r.burst_time) for r in records]


@dataclass
class ScheduledSlice:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    """

    pid: int
    start_time: int
    end_time: int

    @property
    def label(self) -> str:
        return f"P{self.pid}"


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    makespan: int
    idle_time: int
    throughput: float
    cpu_utilization: float


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    processes: List[ProcessRecord] = field(default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)
    system: Optional[SystemMetrics] = None

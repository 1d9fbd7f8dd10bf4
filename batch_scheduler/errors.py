"""
Exceptions raised by the simulator.

Everything derives from ``ValueError`` so callers that only care about bad
input can keep catching that.
"""


class SchedulerError(ValueError):
    """Base class for all simulator failures."""


class EmptyInputError(SchedulerError):
    """No processes were supplied."""


class InvalidConfigurationError(SchedulerError):
    """A policy was configured with an unusable parameter (e.g. quantum <= 0)."""


class MalformedSourceError(SchedulerError):
    """A workload file could not be turned into process records."""


class UnsortedInputError(SchedulerError):
    """Process records are not ordered by non-decreasing arrival time."""


class InvalidProcessError(SchedulerError):
    """A process record has a negative arrival time or a non-positive burst."""

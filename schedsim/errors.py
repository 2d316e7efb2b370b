"""
Error taxonomy for the scheduling engine.

Input problems derive from ValueError so callers that already guard against
bad values keep working; SimulationFault marks a broken engine invariant.
"""

from __future__ import annotations


class SchedulingError(Exception):
    """Base class for every condition the engine reports."""

    @property
    def kind(self) -> str:
        return type(self).__name__


class UnknownPolicy(SchedulingError, ValueError):
    pass


class EmptyInput(SchedulingError, ValueError):
    pass


class MissingQuantum(SchedulingError, ValueError):
    pass


class InvalidQuantum(SchedulingError, ValueError):
    pass


class InvalidProcess(SchedulingError, ValueError):
    pass


class SimulationFault(SchedulingError, RuntimeError):
    pass

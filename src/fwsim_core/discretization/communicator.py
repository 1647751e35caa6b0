# src/fwsim_core/discretization/communicator.py
"""
Global scalar reductions across spatial partitions.

Only the discretization talks to the communicator (energies, stability bound);
the integrator never does.
"""
import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

REDUCTION_OPS = ("sum", "max", "min")


@runtime_checkable
class Communicator(Protocol):
    def allreduce(self, value: float, op: str) -> float:
        """Combines `value` across all partitions with `op` in {'sum', 'max', 'min'}."""
        ...


class SerialCommunicator:
    """The single-partition communicator: every reduction is the identity."""

    def allreduce(self, value: float, op: str) -> float:
        if op not in REDUCTION_OPS:
            raise ValueError(f"Unknown reduction '{op}'. Must be one of {REDUCTION_OPS}.")
        return float(value)

# src/fwsim_core/integration/field_system.py
"""
The contract between the symplectic integrator and a discretized field system.
"""
from typing import Optional, Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class FieldSystem(Protocol):
    """
    A discretized (B, E) system that the integrator can drive.

    The integrator owns the stage sequence; the system owns everything spatial:
    material weighting, sources, boundary conditions and auxiliary fields.
    """

    def e_rate(self, b: np.ndarray, t: float, out: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Returns dE/dt for the given B at time `t`, including source and
        time-dependent boundary contributions. `b` must not be modified.
        """
        ...

    def advance_b(self, b: np.ndarray, increment: np.ndarray, fraction: float) -> None:
        """In place: b += fraction * increment, honouring constrained dofs."""
        ...

    def advance_e(self, e: np.ndarray, increment: np.ndarray, fraction: float) -> None:
        """In place: e += fraction * increment, honouring constrained dofs."""
        ...

    def sync(self) -> None:
        """Re-synchronizes auxiliary/derived fields after a full step."""
        ...

# src/fwsim_core/simulation/results.py
"""
Defines the `SimulationResult`, the public contract for the output of a run.
"""
from dataclasses import dataclass

import numpy as np

from ..timestep import TimeStepPlan


@dataclass(frozen=True)
class SimulationResult:
    """
    The outcome of one time-domain run.

    Attributes:
        plan: The step count and step size actually used.
        final_time: Simulation time after the last step, in seconds.
        times: Time of every energy sample, shape (num_steps + 1,).
        energies: Total field energy after each step, starting with the initial state.
        b: Final magnetic field dofs (copy).
        e: Final electric field dofs (copy).
    """
    plan: TimeStepPlan
    final_time: float
    times: np.ndarray
    energies: np.ndarray
    b: np.ndarray
    e: np.ndarray

    @property
    def num_steps(self) -> int:
        return self.plan.num_steps

    @property
    def dt(self) -> float:
        return self.plan.dt

    @property
    def initial_energy(self) -> float:
        return float(self.energies[0])

    @property
    def final_energy(self) -> float:
        return float(self.energies[-1])

    def max_relative_energy_drift(self) -> float:
        """max_k |E_k - E_0| / E_0, or 0.0 for a run that starts with zero energy."""
        e0 = self.initial_energy
        if e0 == 0.0:
            return 0.0
        return float(np.max(np.abs(self.energies - e0)) / e0)

# src/fwsim_core/simulation/engine.py
"""
Defines the `SimulationEngine`, the service that drives one time-domain run.

The engine holds no state of its own beyond the context it was created with:
it reads the stability bound from the system, quantizes the step, applies the
iteration budget, and then advances the system step by step through a
`SymplecticIntegrator`, logging the field energy after every step.
"""
import logging

import numpy as np

from ..discretization import YeeMaxwellSystem
from ..integration import SymplecticIntegrator
from ..timestep import TimeStepPlan, apply_iteration_budget, quantize_time_step
from .config import SimulationConfig
from .context import SimulationContext
from .exceptions import FieldDivergenceError
from .results import SimulationResult

logger = logging.getLogger(__name__)


class SimulationEngine:
    """
    Orchestrates a run of the configured system. It operates on a given
    `SimulationContext` and owns no field data itself.
    """
    def __init__(self, context: SimulationContext):
        self.context: SimulationContext = context
        self.config: SimulationConfig = context.config
        self.system: YeeMaxwellSystem = context.system

    def plan_time_steps(self, integrator: SymplecticIntegrator) -> TimeStepPlan:
        """
        Derives the step plan. The system reports the leapfrog bound; higher-order
        schemes rescale it by their own stability interval relative to leapfrog's.
        """
        leapfrog_dt_max = self.system.maximum_time_step()
        dt_max = leapfrog_dt_max * integrator.coefficients.stability_limit / 2.0
        logger.info(f"Maximum Time Step: {dt_max:.4e} s (order {integrator.order}).")

        plan = quantize_time_step(self.config.duration, dt_max)
        return apply_iteration_budget(plan, self.config.max_steps, self.config.budget_policy)

    def execute(self) -> SimulationResult:
        integrator = SymplecticIntegrator(self.config.integration_order)
        plan = self.plan_time_steps(integrator)
        logger.info(f"Number of Time Steps: {plan.num_steps}")
        logger.info(f"Time Step Size: {plan.dt:.4e} s")

        integrator.init(self.system.coupling_operator, self.system)

        system = self.system
        t = system.time
        times = np.empty(plan.num_steps + 1)
        energies = np.empty(plan.num_steps + 1)
        times[0] = t
        energies[0] = system.energy()
        logger.info(f"Initial Energy: {energies[0]:.6e} J")

        for step in range(1, plan.num_steps + 1):
            t = integrator.step(system.b, system.e, t, plan.dt)
            system.set_time(t)
            energy = system.energy()
            if not np.isfinite(energy):
                raise FieldDivergenceError(step=step, time=t, dt=plan.dt, dt_max=plan.dt_max)
            times[step] = t
            energies[step] = energy
            logger.info(f"step {step:5d}, time = {t:6.3e} s, energy = {energy:6.3e} J")

        logger.info(f"Run complete: {plan.num_steps} steps, final time {t:.4e} s.")
        return SimulationResult(
            plan=plan,
            final_time=t,
            times=times,
            energies=energies,
            b=system.b.copy(),
            e=system.e.copy(),
        )

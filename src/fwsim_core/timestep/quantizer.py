# src/fwsim_core/timestep/quantizer.py
"""
Converts a physical duration and a stability-bounded maximum step into a
"round" step count and the exact step size, and applies the iteration budget.
"""
import logging
import math
from dataclasses import dataclass, replace
from enum import Enum

from .exceptions import StabilityBoundExceededError, TimeStepError

logger = logging.getLogger(__name__)


class BudgetPolicy(Enum):
    """What to do when the quantized step count exceeds the iteration budget."""
    COARSEN = "coarsen"   # truncate N, dt = T/N, warn (twice if dt > dt_max)
    STRICT = "strict"     # as COARSEN, but fail if dt > dt_max
    SHORTEN = "shorten"   # keep dt, simulate only max_steps steps


@dataclass(frozen=True)
class TimeStepPlan:
    """
    The step count and exact step size for a run.

    Attributes:
        num_steps: Number of macro steps to take.
        dt: Exact step size in seconds.
        duration: Simulated time covered by `num_steps * dt`.
        dt_max: The stability bound the plan was derived from.
        truncated: True if the iteration budget reduced `num_steps`.
    """
    num_steps: int
    dt: float
    duration: float
    dt_max: float
    truncated: bool = False

    @property
    def is_stable(self) -> bool:
        return self.dt <= self.dt_max


def _check_positive(name: str, value: float) -> None:
    if not (math.isfinite(value) and value > 0.0):
        raise TimeStepError(f"{name} must be a positive finite number, got {value!r}.")


def quantize_time_step(duration: float, dt_max: float) -> TimeStepPlan:
    """
    Picks the smallest round step count N (10^k or 5^i * 10^a) with T/N <= dt_max.

    Args:
        duration: Simulated duration T in seconds.
        dt_max: Maximum stable step size in seconds.

    Returns:
        A `TimeStepPlan` with `dt = T / N`.

    Example:
        >>> quantize_time_step(40e-9, 4.1e-13).num_steps
        100000
    """
    _check_positive("duration", duration)
    _check_positive("dt_max", dt_max)

    ratio = duration / dt_max
    if not math.isfinite(ratio):
        raise TimeStepError(f"duration / dt_max overflows ({duration!r} / {dt_max!r}); no step count can represent it.")
    num_steps = 10 ** math.ceil(math.log10(ratio))

    for i in range(1, 6):
        a = math.ceil(math.log10(ratio / 5 ** i))
        # Negative exponents truncate to zero, hence the floor of one.
        candidate = 5 ** i * max(1, int(10.0 ** a))
        num_steps = min(num_steps, candidate)

    num_steps = max(1, int(num_steps))
    dt = duration / num_steps
    logger.debug(f"Quantized T={duration:.4e} s with dt_max={dt_max:.4e} s to N={num_steps}, dt={dt:.4e} s.")
    return TimeStepPlan(num_steps=num_steps, dt=dt, duration=duration, dt_max=dt_max)


def apply_iteration_budget(
    plan: TimeStepPlan,
    max_steps: int,
    policy: BudgetPolicy = BudgetPolicy.COARSEN,
) -> TimeStepPlan:
    """
    Enforces the iteration budget on a quantized plan.

    Plans within budget are returned unchanged. Otherwise the policy decides:
    COARSEN and STRICT keep the duration and enlarge dt, SHORTEN keeps dt and
    reduces the duration. The truncation is always logged as a warning.

    Raises:
        TimeStepError: if `max_steps` is not a positive integer.
        StabilityBoundExceededError: under STRICT, if the enlarged dt exceeds dt_max.
    """
    if int(max_steps) != max_steps or max_steps < 1:
        raise TimeStepError(f"max_steps must be a positive integer, got {max_steps!r}.")
    max_steps = int(max_steps)
    if plan.num_steps <= max_steps:
        return plan

    logger.warning(
        f"Computed number of time steps ({plan.num_steps}) exceeds the iteration budget "
        f"({max_steps}); applying '{policy.value}' policy."
    )

    if policy is BudgetPolicy.SHORTEN:
        shortened = replace(plan, num_steps=max_steps, duration=max_steps * plan.dt, truncated=True)
        logger.warning(f"Simulated duration reduced from {plan.duration:.4e} s to {shortened.duration:.4e} s.")
        return shortened

    coarsened = replace(plan, num_steps=max_steps, dt=plan.duration / max_steps, truncated=True)
    if not coarsened.is_stable:
        if policy is BudgetPolicy.STRICT:
            raise StabilityBoundExceededError(dt=coarsened.dt, dt_max=plan.dt_max, max_steps=max_steps)
        logger.warning(
            f"Coarsened step size {coarsened.dt:.4e} s exceeds the stability bound "
            f"{plan.dt_max:.4e} s; the run may become numerically unstable."
        )
    return coarsened

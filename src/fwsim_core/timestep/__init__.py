# src/fwsim_core/timestep/__init__.py
from .quantizer import BudgetPolicy, TimeStepPlan, apply_iteration_budget, quantize_time_step
from .exceptions import StabilityBoundExceededError, TimeStepError

__all__ = [
    "BudgetPolicy", "TimeStepPlan", "quantize_time_step", "apply_iteration_budget",
    "TimeStepError", "StabilityBoundExceededError",
]

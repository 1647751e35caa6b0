# src/fwsim_core/timestep/exceptions.py
from dataclasses import dataclass

from ..errors import DiagnosableError, format_diagnostic_report


@dataclass()
class TimeStepError(DiagnosableError, ValueError):
    """Raised for a non-positive or non-finite duration, step bound or budget."""
    details: str

    def __str__(self):
        return f"Invalid time-step input: {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Invalid Time-Step Input",
            details=self.details,
            suggestion="The simulated duration and the stability bound must both be positive, finite numbers of seconds.",
            context={}
        )


@dataclass()
class StabilityBoundExceededError(DiagnosableError):
    """
    Raised under the STRICT budget policy when truncating the step count to the
    iteration budget would push the step size above the stability bound.
    """
    dt: float
    dt_max: float
    max_steps: int

    def __str__(self):
        return (f"Step size {self.dt:.4e} s after truncation to {self.max_steps} steps "
                f"exceeds the stability bound {self.dt_max:.4e} s.")

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Stability Bound Exceeded",
            details=str(self),
            suggestion="Raise max_steps, shorten the duration, or use the 'shorten' budget policy.",
            context={'user_input': f"max_steps={self.max_steps}"}
        )

# src/fwsim_core/simulation/exceptions.py
"""
Defines the diagnosable exceptions raised while assembling and running a simulation.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..errors import DiagnosableError, FwSimError, format_diagnostic_report


@dataclass()
class ConfigurationError(DiagnosableError, FwSimError):
    """
    Raised when a run configuration is structurally valid but semantically
    unusable: a source vector with the wrong layout, driven walls without a
    boundary drive, or an unknown policy name.
    """
    details: str
    source_file: Optional[Path] = None
    user_input: Optional[str] = None

    def __str__(self):
        return f"Invalid run configuration: {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Invalid Run Configuration",
            details=self.details,
            suggestion="Review the named field against the documented configuration format.",
            context={'source_file': self.source_file, 'user_input': self.user_input}
        )


@dataclass()
class FieldDivergenceError(DiagnosableError):
    """Raised when the field energy stops being finite during a run."""
    step: int
    time: float
    dt: float
    dt_max: float

    def __str__(self):
        return f"Field energy became non-finite at step {self.step} (t = {self.time:.4e} s)."

    def get_diagnostic_report(self) -> str:
        details = (
            f"{self}\n"
            f"The step size was {self.dt:.4e} s against a stability bound of {self.dt_max:.4e} s."
        )
        return format_diagnostic_report(
            error_type="Field Divergence",
            details=details,
            suggestion="Increase max_steps or use the 'strict' budget policy so that dt stays within the stability bound.",
            context={'time': f"{self.time:.4e} s"}
        )

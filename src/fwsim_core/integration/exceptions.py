# src/fwsim_core/integration/exceptions.py
"""
Defines the diagnosable exceptions of the symplectic time integrator.
"""
from dataclasses import dataclass
from typing import Tuple

from ..errors import DiagnosableError, format_diagnostic_report


@dataclass()
class IntegratorStateError(DiagnosableError):
    """
    Raised when the integrator is used out of order: `step()` before `init()`,
    or `init()` a second time. Always a programming error.
    """
    details: str

    def __str__(self):
        return f"Invalid integrator state: {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Invalid Integrator State",
            details=self.details,
            suggestion="Call init(coupling_operator, field_system) exactly once before the first step().",
            context={'component': "SymplecticIntegrator"}
        )


@dataclass()
class UnsupportedOrderError(DiagnosableError, ValueError):
    """Raised when no coefficient table exists for the requested integration order."""
    order: int
    supported: Tuple[int, ...]

    def __str__(self):
        return f"Integration order {self.order} is not supported; available orders: {list(self.supported)}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Unsupported Integration Order",
            details=str(self),
            suggestion="Set 'integration_order' to one of the available orders.",
            context={'user_input': str(self.order)}
        )

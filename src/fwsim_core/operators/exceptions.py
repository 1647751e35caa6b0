# src/fwsim_core/operators/exceptions.py
"""
Defines the diagnosable exceptions raised by the operator algebra.

All of them derive from `DiagnosableError`, so callers can catch them
individually or as a family, and every one of them can render a report.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ..errors import DiagnosableError, format_diagnostic_report


@dataclass()
class OperatorStateError(DiagnosableError):
    """
    Raised when an operator is used out of its lifecycle order, e.g. applying a
    sparse matrix before `finalize()` or inserting elements after it.
    """
    operator_name: str
    details: str

    def __str__(self):
        return f"Operator '{self.operator_name}' used in an invalid state: {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Invalid Operator State",
            details=self.details,
            suggestion="Call finalize() after all insertions and before any apply, row access or inverse.",
            context={'component': self.operator_name}
        )


@dataclass()
class DimensionMismatchError(DiagnosableError, ValueError):
    """Raised when a vector does not match the operator's row or column count."""
    operator_name: str
    expected: Tuple[int, ...]
    received: Tuple[int, ...]

    def __str__(self):
        return (f"Dimension mismatch for operator '{self.operator_name}': "
                f"expected {self.expected}, got {self.received}")

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Operator Dimension Mismatch",
            details=f"Expected shape {self.expected} but received {self.received}.",
            suggestion="Check that the field vectors were allocated from the same discretization as the operator.",
            context={'component': self.operator_name}
        )


@dataclass()
class SingularOperatorError(DiagnosableError, np.linalg.LinAlgError):
    """
    Raised when an operator cannot be inverted.

    Catchable both as a `DiagnosableError` and as a standard `LinAlgError`.
    """
    details: str
    operator_name: Optional[str] = None

    def __str__(self):
        name = f" '{self.operator_name}'" if self.operator_name else ""
        return f"Singular operator{name}: {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Singular Operator Encountered",
            details=self.details,
            suggestion="A zero material constant or an empty row usually causes this. Check material parameters and boundary elimination.",
            context={'component': self.operator_name or "N/A"}
        )

# src/fwsim_core/sources/exceptions.py
"""
Defines the diagnosable exceptions for the analytic source and material generators.
"""
from dataclasses import dataclass
from typing import Tuple

from ..errors import DiagnosableError, format_diagnostic_report


@dataclass()
class SourceDimensionError(DiagnosableError, ValueError):
    """
    Raised when a generator is evaluated in a spatial dimension it does not
    support (e.g. the current ring outside 3D space). This is a configuration
    mismatch and must not be suppressed.
    """
    source_name: str
    expected_dims: Tuple[int, ...]
    received_dim: int

    def __str__(self):
        return (f"Source '{self.source_name}' requires a spatial dimension in {self.expected_dims}, "
                f"got {self.received_dim}.")

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Source Dimension Mismatch",
            details=str(self),
            suggestion="Use a source that supports the mesh dimension, or remove it from the configuration.",
            context={'component': self.source_name}
        )


@dataclass()
class SourceParameterError(DiagnosableError, ValueError):
    """Raised when a flat parameter vector does not match its source layout."""
    source_name: str
    details: str

    def __str__(self):
        return f"Invalid parameters for source '{self.source_name}': {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Invalid Source Parameters",
            details=self.details,
            suggestion="Check the length and order of the flat parameter vector against the documented layout.",
            context={'component': self.source_name}
        )

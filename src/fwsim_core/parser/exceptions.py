# src/fwsim_core/parser/exceptions.py
"""
Defines the diagnosable exceptions for loading and validating run configuration files.

`ParsingError` covers file-level problems (missing file, invalid YAML syntax) and
values that cannot be read as physical quantities. `SchemaValidationError` covers
structurally valid YAML that does not match the run-configuration schema.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from ..errors import DiagnosableError, format_diagnostic_report


class BaseParsingError(DiagnosableError):
    """Common base for every configuration parsing and schema validation error."""
    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Generic Parsing Error",
            details=str(self),
            suggestion="Please check the format and content of the run configuration file.",
            context={}
        )


@dataclass()
class ParsingError(BaseParsingError):
    """
    Raised when the file cannot be read, is not valid YAML, or holds a value
    that cannot be interpreted as a quantity of the required dimension.
    """
    details: str
    file_path: Path

    def __str__(self):
        return f"Parsing error in file '{self.file_path}': {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="YAML Parsing or File Error",
            details=self.details,
            suggestion="Ensure the file exists, is valid YAML, and that quantities carry units of the right kind (e.g. '40 ns', '750 MHz', '1 cm').",
            context={'source_file': self.file_path}
        )


@dataclass()
class SchemaValidationError(BaseParsingError):
    """Raised when the YAML loads but does not conform to the run-configuration schema."""
    errors: Dict[str, Any]
    file_path: Path

    def _error_lines(self, prefix: str):
        return [
            f"  - {prefix} '{k}': {v[0] if isinstance(v, list) and v else v}"
            for k, v in sorted(self.errors.items(), key=lambda kv: str(kv[0]))
        ]

    def __str__(self):
        return (
            f"YAML schema validation failed for file '{self.file_path}':\n"
            + "\n".join(self._error_lines("In field"))
        )

    def get_diagnostic_report(self) -> str:
        details = (
            "The structure of the YAML file does not conform to the run-configuration schema.\n"
            f"See details for {len(self.errors)} issue(s) below:\n\n" + "\n".join(self._error_lines("Field"))
        )
        return format_diagnostic_report(
            error_type="YAML Schema Validation Error",
            details=details,
            suggestion="Correct the listed fields. 'duration' and 'grid' are required; wall names are 'x-', 'x+', 'y-', 'y+', 'z-' and 'z+'.",
            context={'source_file': self.file_path}
        )

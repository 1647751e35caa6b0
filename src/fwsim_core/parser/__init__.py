# src/fwsim_core/parser/__init__.py
from .raw_data import ParsedGrid, ParsedRunConfig
from .parser import RunConfigParser
from .exceptions import ParsingError, SchemaValidationError

__all__ = [
    # IR Data Structures
    "ParsedGrid",
    "ParsedRunConfig",
    # Parser and Exceptions
    "RunConfigParser",
    "ParsingError",
    "SchemaValidationError",
]

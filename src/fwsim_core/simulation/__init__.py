# src/fwsim_core/simulation/__init__.py
from .exceptions import ConfigurationError, FieldDivergenceError
from .config import SimulationConfig
from .context import SimulationContext
from .engine import SimulationEngine
from .results import SimulationResult
from .execution import load_config, run_simulation

__all__ = [
    # Exceptions
    "ConfigurationError",
    "FieldDivergenceError",
    # Core Classes
    "SimulationConfig",
    "SimulationContext",
    "SimulationEngine",
    "SimulationResult",
    "load_config",
    "run_simulation",
]

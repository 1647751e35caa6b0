# src/fwsim_core/__init__.py
import logging
from .log_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)
logger.info("FWSim Core package initialized.")

from .units import ureg, Quantity, TIME_DIMENSIONALITY, FREQUENCY_DIMENSIONALITY, LENGTH_DIMENSIONALITY
from .parser import RunConfigParser
from .integration import SymplecticIntegrator
from .discretization import YeeGrid, YeeMaxwellSystem
from .simulation import SimulationConfig, SimulationResult, load_config, run_simulation
from .errors import FwSimError, SimulationRunError
from .simulation import ConfigurationError

__all__ = [
    # Units
    "ureg", "Quantity",
    # Canonical dimensionalities
    "TIME_DIMENSIONALITY", "FREQUENCY_DIMENSIONALITY", "LENGTH_DIMENSIONALITY",
    # Parser
    "RunConfigParser",
    # Core Services
    "SymplecticIntegrator", "YeeGrid", "YeeMaxwellSystem",
    # Simulation
    "SimulationConfig", "SimulationResult", "load_config", "run_simulation",
    # Top-Level Errors (Actionable Diagnostics)
    "FwSimError", "SimulationRunError", "ConfigurationError",
]

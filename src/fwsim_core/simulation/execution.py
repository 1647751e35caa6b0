# src/fwsim_core/simulation/execution.py
"""
Provides the public API functions for running a simulation.

`run_simulation` is a thin facade over `SimulationContext` and
`SimulationEngine`: it accepts a configuration file path or a ready
`SimulationConfig`, assembles the reference Yee system, runs the engine and
turns any diagnosable failure into a single `SimulationRunError` whose message
is the formatted diagnostic report.
"""
import logging
from pathlib import Path
from typing import Optional, Union

from ..discretization import Communicator
from ..errors import DiagnosableError, SimulationRunError, format_diagnostic_report
from ..parser import RunConfigParser
from .config import SimulationConfig
from .context import SimulationContext
from .engine import SimulationEngine
from .results import SimulationResult

logger = logging.getLogger(__name__)


def load_config(yaml_path: Union[str, Path]) -> SimulationConfig:
    """Parses a run configuration file into a `SimulationConfig`."""
    parsed = RunConfigParser().parse(yaml_path)
    return SimulationConfig.from_parsed(parsed)


def run_simulation(
    config: Union[str, Path, SimulationConfig],
    communicator: Optional[Communicator] = None,
) -> SimulationResult:
    """
    Runs one time-domain simulation.

    Args:
        config: A `SimulationConfig`, or the path of a run configuration YAML file.
        communicator: Optional cross-partition reducer; serial by default.

    Returns:
        The `SimulationResult` of the run.

    Raises:
        SimulationRunError: A user-friendly, diagnosable error if the run fails at
                            any stage (parsing, assembly or time stepping). The
                            original exception is chained for debugging.
    """
    try:
        if not isinstance(config, SimulationConfig):
            config = load_config(config)
        logger.info(f"--- Starting time-domain run: T = {config.duration:.4e} s, order {config.integration_order} ---")

        context = SimulationContext(config=config, system=config.build_system(communicator))
        result = SimulationEngine(context).execute()

        logger.info(f"Run successful. Final energy: {result.final_energy:.6e} J")
        return result

    except DiagnosableError as e:
        logger.error(f"A diagnosable error occurred during simulation: {e}")
        raise SimulationRunError(e.get_diagnostic_report()) from e

    except Exception as e:
        logger.critical(f"An unexpected internal error occurred during simulation: {e}", exc_info=True)
        report = format_diagnostic_report(
            error_type=f"An Unexpected Simulation Error Occurred ({type(e).__name__})",
            details=f"The simulator encountered an unexpected internal error: {e}",
            suggestion="This may be a bug. Review the traceback and consider filing a bug report.",
            context={}
        )
        raise SimulationRunError(report) from e

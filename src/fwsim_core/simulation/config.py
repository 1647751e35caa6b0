# src/fwsim_core/simulation/config.py
"""
Defines `SimulationConfig`, the explicit, validated description of one run, and
the assembly of the reference Yee system from it.
"""
import logging
from dataclasses import dataclass
from functools import partial
from typing import Optional, Tuple

from ..constants import DEFAULT_DRIVE_FREQUENCY_HZ, DEFAULT_MAX_STEPS
from ..discretization import Communicator, YeeGrid, YeeMaxwellSystem
from ..parser import ParsedRunConfig
from ..sources import (
    BOUNDARY_DRIVES,
    CompositeSource,
    CurrentRingParams,
    DielectricSphereParams,
    MagneticShellParams,
    SourceParameterError,
    VoltaicPileParams,
    permeability_profile,
    permittivity_profile,
)
from ..timestep import BudgetPolicy
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationConfig:
    """
    Everything a run needs, in SI units. Sources that are `None` are disabled.

    Attributes:
        duration: Simulated time T in seconds.
        cells: Yee grid cell counts (nx, ny, nz).
        spacing: Yee grid cell edge in metres.
        origin: Lower corner of the grid in metres.
        max_steps: Iteration budget.
        integration_order: Symplectic integrator order (1-4).
        budget_policy: What to do when the step count exceeds `max_steps`.
        frequency: Boundary drive frequency in Hz.
        boundary_drive: 'sinusoidal', 'gaussian' or None.
        driven_walls: Walls whose tangential E follows the boundary drive.
    """
    duration: float
    cells: Tuple[int, int, int]
    spacing: float
    origin: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    max_steps: int = DEFAULT_MAX_STEPS
    integration_order: int = 1
    budget_policy: BudgetPolicy = BudgetPolicy.COARSEN
    frequency: float = DEFAULT_DRIVE_FREQUENCY_HZ
    boundary_drive: Optional[str] = None
    driven_walls: Tuple[str, ...] = ()
    dielectric_sphere: Optional[DielectricSphereParams] = None
    magnetic_shell: Optional[MagneticShellParams] = None
    voltaic_pile: Optional[VoltaicPileParams] = None
    current_ring: Optional[CurrentRingParams] = None

    def __post_init__(self):
        if self.boundary_drive is not None and self.boundary_drive not in BOUNDARY_DRIVES:
            raise ConfigurationError(
                f"Unknown boundary drive '{self.boundary_drive}'. Must be one of {sorted(BOUNDARY_DRIVES)} or None.",
                user_input=self.boundary_drive,
            )
        if self.driven_walls and self.boundary_drive is None:
            raise ConfigurationError(
                f"Driven walls {list(self.driven_walls)} were given without a boundary drive.",
                user_input="boundary_drive: none",
            )

    @classmethod
    def from_parsed(cls, parsed: ParsedRunConfig) -> "SimulationConfig":
        """Builds the source records from their flat vectors and checks cross-field rules."""
        raw = parsed.raw_sources
        try:
            sources = {
                "dielectric_sphere": DielectricSphereParams.from_vector(raw.get("dielectric_sphere", ())),
                "magnetic_shell": MagneticShellParams.from_vector(raw.get("magnetic_shell", ())),
                "voltaic_pile": VoltaicPileParams.from_vector(raw.get("voltaic_pile", ())),
                "current_ring": CurrentRingParams.from_vector(raw.get("current_ring", ())),
            }
        except SourceParameterError as e:
            raise ConfigurationError(
                details=str(e),
                source_file=parsed.source_yaml_path,
                user_input=f"sources.{e.source_name}",
            ) from e

        try:
            policy = BudgetPolicy(parsed.budget_policy)
        except ValueError as e:
            raise ConfigurationError(
                details=f"Unknown budget policy '{parsed.budget_policy}'.",
                source_file=parsed.source_yaml_path,
                user_input=parsed.budget_policy,
            ) from e

        try:
            return cls(
                duration=parsed.duration_s,
                cells=parsed.grid.cells,
                spacing=parsed.grid.spacing_m,
                origin=parsed.grid.origin_m,
                max_steps=parsed.max_steps,
                integration_order=parsed.integration_order,
                budget_policy=policy,
                frequency=parsed.frequency_hz,
                boundary_drive=parsed.boundary_drive,
                driven_walls=parsed.driven_walls,
                **sources,
            )
        except ConfigurationError as e:
            # Re-raise with the file attached.
            raise ConfigurationError(e.details, source_file=parsed.source_yaml_path, user_input=e.user_input) from e

    @property
    def source(self) -> CompositeSource:
        return CompositeSource(voltaic_pile=self.voltaic_pile, current_ring=self.current_ring)

    def build_grid(self) -> YeeGrid:
        return YeeGrid(self.cells, self.spacing, self.origin)

    def build_system(self, communicator: Optional[Communicator] = None) -> YeeMaxwellSystem:
        """Assembles the reference Yee system: materials, sources, walls and boundary drive."""
        boundary_drive = None
        if self.boundary_drive is not None:
            boundary_drive = partial(BOUNDARY_DRIVES[self.boundary_drive], frequency=self.frequency)
        logger.debug(f"Building Yee system for {self.cells} cells, h = {self.spacing:g} m.")
        return YeeMaxwellSystem(
            self.build_grid(),
            permittivity=permittivity_profile(self.dielectric_sphere),
            permeability=permeability_profile(self.magnetic_shell),
            source=self.source,
            driven_walls=self.driven_walls,
            boundary_drive=boundary_drive,
            communicator=communicator,
        )

# src/fwsim_core/sources/__init__.py
from .params import (
    CurrentRingParams,
    DielectricSphereParams,
    MagneticShellParams,
    VoltaicPileParams,
)
from .generators import (
    BOUNDARY_DRIVES,
    CompositeSource,
    current_ring,
    current_ring_field,
    dielectric_sphere,
    dielectric_sphere_field,
    gaussian_drive_rate,
    magnetic_shell,
    magnetic_shell_field,
    permeability_profile,
    permittivity_profile,
    sinusoidal_drive_rate,
    voltaic_pile,
    voltaic_pile_field,
)
from .exceptions import SourceDimensionError, SourceParameterError

__all__ = [
    # Parameter Records
    "VoltaicPileParams", "CurrentRingParams", "DielectricSphereParams", "MagneticShellParams",
    # Generators
    "voltaic_pile", "voltaic_pile_field", "current_ring", "current_ring_field", "CompositeSource",
    # Materials
    "dielectric_sphere", "dielectric_sphere_field", "magnetic_shell", "magnetic_shell_field",
    "permittivity_profile", "permeability_profile",
    # Boundary Drives
    "sinusoidal_drive_rate", "gaussian_drive_rate", "BOUNDARY_DRIVES",
    # Exceptions
    "SourceDimensionError", "SourceParameterError",
]

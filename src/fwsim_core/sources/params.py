# src/fwsim_core/sources/params.py
"""
Explicit, immutable parameter records for the analytic sources and materials.

Each record is built once from a flat numeric vector whose layout is fixed per
source type. An empty vector means "feature disabled" and produces `None`.

Layouts, with `d` the spatial dimension:

- VoltaicPileParams:      axis start (d), axis end (d), radius, magnitude, frequency
- CurrentRingParams:      axis start (3), axis end (3), inner radius, outer radius,
                          total current, frequency
- DielectricSphereParams: center (d), radius, relative permittivity
- MagneticShellParams:    center (d), inner radius, outer radius, relative permeability
"""
import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .exceptions import SourceParameterError

logger = logging.getLogger(__name__)


def _as_floats(vector: Sequence[float], source_name: str) -> Tuple[float, ...]:
    try:
        return tuple(float(v) for v in vector)
    except (TypeError, ValueError) as e:
        raise SourceParameterError(source_name, f"Parameter vector must be numeric: {e}") from e


def _check_length(values: Tuple[float, ...], expected: int, source_name: str, layout: str) -> None:
    if len(values) != expected:
        raise SourceParameterError(
            source_name,
            f"Expected {expected} values ({layout}), got {len(values)}.",
        )


@dataclass(frozen=True)
class VoltaicPileParams:
    """A cylindrical rod of constant polarization oriented along its axis."""
    axis_start: Tuple[float, ...]
    axis_end: Tuple[float, ...]
    radius: float
    magnitude: float
    frequency: float

    @property
    def dim(self) -> int:
        return len(self.axis_start)

    @classmethod
    def from_vector(cls, vector: Sequence[float], dim: int = 3) -> Optional["VoltaicPileParams"]:
        values = _as_floats(vector, "voltaic_pile")
        if not values:
            return None
        _check_length(values, 2 * dim + 3, "voltaic_pile", "axis start, axis end, radius, magnitude, frequency")
        return cls(
            axis_start=values[:dim],
            axis_end=values[dim:2 * dim],
            radius=values[2 * dim],
            magnitude=values[2 * dim + 1],
            frequency=values[2 * dim + 2],
        )


@dataclass(frozen=True)
class CurrentRingParams:
    """An annulus of azimuthal current. Only meaningful in 3D space."""
    axis_start: Tuple[float, float, float]
    axis_end: Tuple[float, float, float]
    inner_radius: float
    outer_radius: float
    current: float
    frequency: float

    @classmethod
    def from_vector(cls, vector: Sequence[float]) -> Optional["CurrentRingParams"]:
        values = _as_floats(vector, "current_ring")
        if not values:
            return None
        _check_length(values, 10, "current_ring",
                      "axis start (3), axis end (3), inner radius, outer radius, current, frequency")
        return cls(
            axis_start=values[0:3],
            axis_end=values[3:6],
            inner_radius=values[6],
            outer_radius=values[7],
            current=values[8],
            frequency=values[9],
        )


@dataclass(frozen=True)
class DielectricSphereParams:
    center: Tuple[float, ...]
    radius: float
    relative_permittivity: float

    @property
    def dim(self) -> int:
        return len(self.center)

    @classmethod
    def from_vector(cls, vector: Sequence[float], dim: int = 3) -> Optional["DielectricSphereParams"]:
        values = _as_floats(vector, "dielectric_sphere")
        if not values:
            return None
        _check_length(values, dim + 2, "dielectric_sphere", "center, radius, relative permittivity")
        return cls(center=values[:dim], radius=values[dim], relative_permittivity=values[dim + 1])


@dataclass(frozen=True)
class MagneticShellParams:
    center: Tuple[float, ...]
    inner_radius: float
    outer_radius: float
    relative_permeability: float

    @property
    def dim(self) -> int:
        return len(self.center)

    @classmethod
    def from_vector(cls, vector: Sequence[float], dim: int = 3) -> Optional["MagneticShellParams"]:
        values = _as_floats(vector, "magnetic_shell")
        if not values:
            return None
        _check_length(values, dim + 3, "magnetic_shell", "center, inner radius, outer radius, relative permeability")
        return cls(
            center=values[:dim],
            inner_radius=values[dim],
            outer_radius=values[dim + 1],
            relative_permeability=values[dim + 2],
        )

# src/fwsim_core/sources/generators.py
"""
Closed-form source and material evaluators.

Every generator is a pure function of (parameters, query points, time). The
`*_field` variants are vectorized over an `(n, d)` array of points and are what
the discretization samples on grid edges; the single-point variants wrap them
for a `(d,)` query point.
"""
import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from ..constants import EPSILON0, MU0
from .exceptions import SourceDimensionError
from .params import (
    CurrentRingParams,
    DielectricSphereParams,
    MagneticShellParams,
    VoltaicPileParams,
)

logger = logging.getLogger(__name__)

ScalarField = Callable[[np.ndarray], np.ndarray]


def _points(points: np.ndarray) -> np.ndarray:
    pts = np.asarray(points, dtype=float)
    if pts.ndim == 1:
        pts = pts[np.newaxis, :]
    return pts


def _oscillation(frequency: float, t: float) -> float:
    return math.sin(2.0 * math.pi * frequency * t)


def _axial_decomposition(pts: np.ndarray, start: np.ndarray, axis: np.ndarray, h2: float):
    """Projection of each point onto the (unnormalized) axis and its perpendicular offset."""
    rel = pts - start
    xa = rel @ axis
    perp = rel - np.outer(xa / h2, axis)
    return xa, perp


# --- Current / polarization sources ---

def voltaic_pile_field(params: VoltaicPileParams, points: np.ndarray, t: float) -> np.ndarray:
    """
    Polarization of a cylindrical rod, oriented along its axis, scaled by
    magnitude / axis length and modulated by sin(2*pi*f*t).
    A zero-length axis makes the source inactive.
    """
    pts = _points(points)
    if pts.shape[1] != params.dim:
        raise SourceDimensionError("voltaic_pile", (params.dim,), pts.shape[1])

    out = np.zeros_like(pts)
    start = np.asarray(params.axis_start)
    axis = np.asarray(params.axis_end) - start
    h = float(np.linalg.norm(axis))
    if h == 0.0:
        return out

    xa, perp = _axial_decomposition(pts, start, axis, h * h)
    xp = np.linalg.norm(perp, axis=1)
    hit = (xa >= 0.0) & (xa <= h * h) & (xp <= params.radius)
    out[hit] = (params.magnitude / h) * axis
    return out * _oscillation(params.frequency, t)


def voltaic_pile(params: VoltaicPileParams, x: np.ndarray, t: float) -> np.ndarray:
    return voltaic_pile_field(params, x, t)[0]


def current_ring_field(params: CurrentRingParams, points: np.ndarray, t: float) -> np.ndarray:
    """
    Azimuthal current density of an annulus. Both radius bounds are inclusive
    and the radii may be given in either order.

    Raises:
        SourceDimensionError: if the points are not 3D.
    """
    pts = _points(points)
    if pts.shape[1] != 3:
        raise SourceDimensionError("current_ring", (3,), pts.shape[1])

    out = np.zeros_like(pts)
    start = np.asarray(params.axis_start)
    axis = np.asarray(params.axis_end) - start
    h = float(np.linalg.norm(axis))
    ra, rb = sorted((params.inner_radius, params.outer_radius))
    # Zero-length axis or zero-thickness annulus: nothing to inject.
    if h == 0.0 or rb == ra:
        return out

    xa, perp = _axial_decomposition(pts, start, axis, h * h)
    xp = np.linalg.norm(perp, axis=1)
    hit = (xa >= 0.0) & (xa <= h * h) & (xp >= ra) & (xp <= rb)
    azimuthal = np.cross(axis, perp[hit]) / h
    out[hit] = (params.current / (h * (rb - ra))) * azimuthal
    return out * _oscillation(params.frequency, t)


def current_ring(params: CurrentRingParams, x: np.ndarray, t: float) -> np.ndarray:
    return current_ring_field(params, x, t)[0]


@dataclass(frozen=True)
class CompositeSource:
    """
    The total current density of the configured pile and ring.

    With a single active generator the composite delegates to it. With both
    active, each one is evaluated into its own buffer and the results are summed.
    """
    voltaic_pile: Optional[VoltaicPileParams] = None
    current_ring: Optional[CurrentRingParams] = None

    @property
    def is_active(self) -> bool:
        return self.voltaic_pile is not None or self.current_ring is not None

    def field(self, points: np.ndarray, t: float) -> np.ndarray:
        if self.voltaic_pile is not None and self.current_ring is not None:
            j = voltaic_pile_field(self.voltaic_pile, points, t)
            j_cr = current_ring_field(self.current_ring, points, t)
            return j + j_cr
        if self.voltaic_pile is not None:
            return voltaic_pile_field(self.voltaic_pile, points, t)
        if self.current_ring is not None:
            return current_ring_field(self.current_ring, points, t)
        return np.zeros_like(_points(points))

    def __call__(self, x: np.ndarray, t: float) -> np.ndarray:
        return self.field(x, t)[0]


# --- Material profiles ---

def _radial_distance(pts: np.ndarray, center, source_name: str) -> np.ndarray:
    center = np.asarray(center, dtype=float)
    if pts.shape[1] != center.shape[0]:
        raise SourceDimensionError(source_name, (center.shape[0],), pts.shape[1])
    return np.linalg.norm(pts - center, axis=1)


def dielectric_sphere_field(params: DielectricSphereParams, points: np.ndarray, base: float = EPSILON0) -> np.ndarray:
    """Permittivity: `relative * base` inside the sphere (boundary included), `base` elsewhere."""
    pts = _points(points)
    r = _radial_distance(pts, params.center, "dielectric_sphere")
    return np.where(r <= params.radius, params.relative_permittivity * base, base)


def dielectric_sphere(params: DielectricSphereParams, x: np.ndarray, base: float = EPSILON0) -> float:
    return float(dielectric_sphere_field(params, x, base)[0])


def magnetic_shell_field(params: MagneticShellParams, points: np.ndarray, base: float = MU0) -> np.ndarray:
    """Permeability: `relative * base` within the shell annulus (both radii inclusive), `base` elsewhere."""
    pts = _points(points)
    r = _radial_distance(pts, params.center, "magnetic_shell")
    inside = (r >= params.inner_radius) & (r <= params.outer_radius)
    return np.where(inside, params.relative_permeability * base, base)


def magnetic_shell(params: MagneticShellParams, x: np.ndarray, base: float = MU0) -> float:
    return float(magnetic_shell_field(params, x, base)[0])


def permittivity_profile(params: Optional[DielectricSphereParams]) -> ScalarField:
    """Binds the dielectric sphere, or returns vacuum permittivity everywhere when absent."""
    if params is None:
        return lambda points: np.full(_points(points).shape[0], EPSILON0)
    return lambda points: dielectric_sphere_field(params, points)


def permeability_profile(params: Optional[MagneticShellParams]) -> ScalarField:
    """Binds the magnetic shell, or returns vacuum permeability everywhere when absent."""
    if params is None:
        return lambda points: np.full(_points(points).shape[0], MU0)
    return lambda points: magnetic_shell_field(params, points)


# --- Plane-wave boundary drive (time derivative of E on driven walls) ---

def _retarded_phase(pts: np.ndarray, t: float, frequency: float) -> np.ndarray:
    return 2.0 * math.pi * frequency * (t - pts[:, 0] * math.sqrt(EPSILON0 * MU0))


def sinusoidal_drive_rate(points: np.ndarray, t: float, frequency: float) -> np.ndarray:
    """dE/dt of a z-polarized sinusoidal plane wave travelling along +x."""
    pts = _points(points)
    out = np.zeros((pts.shape[0], 3))
    out[:, 2] = 2.0 * math.pi * frequency * np.cos(_retarded_phase(pts, t, frequency))
    return out


def gaussian_drive_rate(points: np.ndarray, t: float, frequency: float) -> np.ndarray:
    """dE/dt of a z-polarized, Gaussian-modulated plane-wave pulse travelling along +x."""
    pts = _points(points)
    arg = _retarded_phase(pts, t, frequency)
    out = np.zeros((pts.shape[0], 3))
    out[:, 2] = (2.0 * math.pi * frequency * np.exp(-0.25 * arg ** 2)
                 * (np.cos(arg) + 0.25 * arg * np.sin(arg)))
    return out


BOUNDARY_DRIVES = {
    "sinusoidal": sinusoidal_drive_rate,
    "gaussian": gaussian_drive_rate,
}

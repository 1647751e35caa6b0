# src/fwsim_core/discretization/system.py
"""
Defines `YeeMaxwellSystem`, the reference `FieldSystem` on a Yee grid.

Semi-discrete equations, with C the discrete curl, M_e the edge permittivity
mass and M_f the face inverse-permeability mass:

    dB/dt = -C E
    dE/dt = M_e^-1 (C^T M_f B - h^3 J(t))

Tangential E on PEC walls is held at zero. On driven walls it follows a
prescribed boundary rate dE/dt(x, t) instead of the curl equation.
"""
import logging
from typing import Callable, Iterable, Optional

import numpy as np
import scipy.linalg
import scipy.sparse as sp
import scipy.sparse.linalg as splinalg

from ..constants import EPSILON0, MU0
from ..operators import DiagonalOperator, ScaledOperator
from ..sources import CompositeSource
from .communicator import Communicator, SerialCommunicator
from .yee import YeeGrid

logger = logging.getLogger(__name__)

ScalarField = Callable[[np.ndarray], np.ndarray]
VectorField = Callable[[np.ndarray], np.ndarray]
BoundaryDrive = Callable[[np.ndarray, float], np.ndarray]

# Below this many free E dofs the spectrum is computed densely.
_DENSE_SPECTRUM_LIMIT = 256


def _project(field_values: np.ndarray, directions: np.ndarray) -> np.ndarray:
    return np.einsum("ij,ij->i", field_values, directions)


class YeeMaxwellSystem:
    """
    Full-wave Maxwell system on a `YeeGrid`, driven through the `FieldSystem`
    protocol. The system owns the field vectors `b` and `e`; the driver hands
    them to the integrator, which updates them in place.
    """

    def __init__(
        self,
        grid: YeeGrid,
        permittivity: Optional[ScalarField] = None,
        permeability: Optional[ScalarField] = None,
        source: Optional[CompositeSource] = None,
        driven_walls: Iterable[str] = (),
        boundary_drive: Optional[BoundaryDrive] = None,
        communicator: Optional[Communicator] = None,
    ):
        self.grid = grid
        self.source = source if source is not None and source.is_active else None
        self.communicator: Communicator = communicator or SerialCommunicator()
        self.boundary_drive = boundary_drive
        self.driven_walls = tuple(driven_walls)
        self.time: float = 0.0

        eps = permittivity(grid.edge_points) if permittivity else np.full(grid.num_edges, EPSILON0)
        mu = permeability(grid.face_points) if permeability else np.full(grid.num_faces, MU0)
        if np.any(eps <= 0.0) or np.any(mu <= 0.0):
            raise ValueError("Permittivity and permeability must be strictly positive everywhere.")

        self.edge_mass = DiagonalOperator(eps * grid.cell_volume, name="M_eps")
        self.face_mass = DiagonalOperator(grid.cell_volume / mu, name="M_muinv")
        self._edge_mass_inv = self.edge_mass.inverse()
        self.curl = grid.curl()
        self.coupling_operator = ScaledOperator(self.curl, -1.0, name="-curl")

        self._driven = np.zeros(grid.num_edges, dtype=bool)
        for wall in self.driven_walls:
            self._driven |= grid.wall_edge_mask(wall)
        if self._driven.any() and boundary_drive is None:
            raise ValueError(f"Driven walls {self.driven_walls} require a boundary drive function.")
        self._pec = grid.boundary_edge_mask() & ~self._driven
        self._free = ~(self._pec | self._driven)
        self._evolving = ~self._pec

        self.b = np.zeros(grid.num_faces)
        self.e = np.zeros(grid.num_edges)
        self.electric_energy: float = 0.0
        self.magnetic_energy: float = 0.0
        self.sync()

        logger.info(
            f"YeeMaxwellSystem ready: {grid.num_edges} E dofs ({int(self._free.sum())} free, "
            f"{int(self._driven.sum())} driven, {int(self._pec.sum())} PEC), {grid.num_faces} B dofs."
        )

    # --- FieldSystem ---

    def e_rate(self, b: np.ndarray, t: float, out: Optional[np.ndarray] = None) -> np.ndarray:
        rhs = self.curl.mult_transpose(self.face_mass.mult(b))
        if self.source is not None:
            j = _project(self.source.field(self.grid.edge_points, t), self.grid.edge_tangents)
            rhs -= self.grid.cell_volume * j
        rate = self._edge_mass_inv.mult(rhs)
        rate[self._pec] = 0.0
        if self._driven.any():
            drive = self.boundary_drive(self.grid.edge_points[self._driven], t)
            rate[self._driven] = _project(drive, self.grid.edge_tangents[self._driven])
        if out is None:
            return rate
        out[:] = rate
        return out

    def advance_b(self, b: np.ndarray, increment: np.ndarray, fraction: float) -> None:
        b += fraction * increment

    def advance_e(self, e: np.ndarray, increment: np.ndarray, fraction: float) -> None:
        e[self._evolving] += fraction * increment[self._evolving]

    def sync(self) -> None:
        """Refreshes the per-field energies from the current `b` and `e`."""
        self.electric_energy = 0.5 * float(self.e @ self.edge_mass.mult(self.e))
        self.magnetic_energy = 0.5 * float(self.b @ self.face_mass.mult(self.b))

    # --- Diagnostics & setup ---

    def set_time(self, t: float) -> None:
        self.time = t

    def energy(self) -> float:
        """Total field energy 1/2 (e^T M_e e + b^T M_f b), summed over partitions."""
        return self.communicator.allreduce(self.electric_energy + self.magnetic_energy, "sum")

    def set_initial_e_field(self, field: VectorField) -> None:
        """Projects a vectorized E(x) onto edge tangents. PEC edges stay zero."""
        self.e[:] = _project(np.asarray(field(self.grid.edge_points)), self.grid.edge_tangents)
        self.e[self._pec] = 0.0
        self.sync()

    def set_initial_b_field(self, field: VectorField) -> None:
        """Projects a vectorized B(x) onto face normals."""
        self.b[:] = _project(np.asarray(field(self.grid.face_points)), self.grid.face_normals)
        self.sync()

    def maximum_time_step(self) -> float:
        """
        Leapfrog stability bound 2 / omega_max, where omega_max^2 is the largest
        eigenvalue of M_e^-1/2 C^T M_f C M_e^-1/2 restricted to free edges.
        Reduced with 'min' across partitions.
        """
        free = np.flatnonzero(self._free)
        if free.size == 0:
            raise ValueError("The grid has no free E dofs; refine it or remove PEC walls.")
        c_free = self.curl.to_scipy()[:, free]
        scale = sp.diags(1.0 / np.sqrt(self.edge_mass.diagonal[free]))
        stiffness = (scale @ c_free.T @ sp.diags(self.face_mass.diagonal) @ c_free @ scale).tocsr()

        if free.size <= _DENSE_SPECTRUM_LIMIT:
            lam_max = float(scipy.linalg.eigvalsh(stiffness.toarray())[-1])
        else:
            lam_max = float(splinalg.eigsh(stiffness, k=1, which="LA", return_eigenvectors=False)[0])
        if lam_max <= 0.0:
            raise ValueError("Curl operator has no positive spectrum on the free E dofs.")

        dt_max = 2.0 / np.sqrt(lam_max)
        logger.debug(f"omega_max = {np.sqrt(lam_max):.4e} rad/s, leapfrog dt_max = {dt_max:.4e} s.")
        return self.communicator.allreduce(float(dt_max), "min")

# src/fwsim_core/discretization/yee.py
"""
Geometry and discrete curl of a uniform Cartesian staggered (Yee) grid.

E lives on cell edges (tangential components), B on cell faces (normal
components). Dofs of each component block are ordered with x varying fastest,
then y, then z, which matches `kron(Az, kron(Ay, Ax))` operators.
"""
import logging
from typing import Sequence, Tuple

import numpy as np
import scipy.sparse as sp

from ..operators import SparseMatrix

logger = logging.getLogger(__name__)

WALLS: Tuple[str, ...] = ("x-", "x+", "y-", "y+", "z-", "z+")


def _difference(n: int, h: float) -> sp.csr_matrix:
    """1D forward difference, (n) cells x (n + 1) nodes, scaled by 1/h."""
    return sp.diags([-np.ones(n), np.ones(n)], [0, 1], shape=(n, n + 1), format="csr") / h


def _identity(n: int) -> sp.csr_matrix:
    return sp.identity(n, format="csr")


def _kron3(az, ay, ax) -> sp.csr_matrix:
    return sp.kron(az, sp.kron(ay, ax, format="csr"), format="csr")


class YeeGrid:
    """
    A box of `nx * ny * nz` cubic cells of edge `spacing`, anchored at `origin`.
    """

    def __init__(self, cells: Sequence[int], spacing: float, origin: Sequence[float] = (0.0, 0.0, 0.0)):
        if len(cells) != 3 or any(int(n) < 1 for n in cells):
            raise ValueError(f"YeeGrid requires three positive cell counts, got {cells}.")
        if not spacing > 0.0:
            raise ValueError(f"YeeGrid spacing must be positive, got {spacing}.")
        if len(origin) != 3:
            raise ValueError(f"YeeGrid origin must have three coordinates, got {origin}.")

        self.cells: Tuple[int, int, int] = tuple(int(n) for n in cells)
        self.spacing: float = float(spacing)
        self.origin: np.ndarray = np.asarray(origin, dtype=float)

        nx, ny, nz = self.cells
        # Staggering per component: 0.5 = cell centre along that axis, 0.0 = node.
        self._edge_layout = [
            ((nx, ny + 1, nz + 1), (0.5, 0.0, 0.0)),
            ((nx + 1, ny, nz + 1), (0.0, 0.5, 0.0)),
            ((nx + 1, ny + 1, nz), (0.0, 0.0, 0.5)),
        ]
        self._face_layout = [
            ((nx + 1, ny, nz), (0.0, 0.5, 0.5)),
            ((nx, ny + 1, nz), (0.5, 0.0, 0.5)),
            ((nx, ny, nz + 1), (0.5, 0.5, 0.0)),
        ]
        self.edge_points, self.edge_tangents = self._staggered(self._edge_layout)
        self.face_points, self.face_normals = self._staggered(self._face_layout)
        logger.debug(f"YeeGrid {self.cells} (h={self.spacing:g}): {self.num_edges} edges, {self.num_faces} faces.")

    def _staggered(self, layout) -> Tuple[np.ndarray, np.ndarray]:
        points, directions = [], []
        for axis, (counts, offsets) in enumerate(layout):
            coords = [
                self.origin[d] + (np.arange(counts[d]) + offsets[d]) * self.spacing
                for d in range(3)
            ]
            zz, yy, xx = np.meshgrid(coords[2], coords[1], coords[0], indexing="ij")
            block = np.column_stack([xx.ravel(), yy.ravel(), zz.ravel()])
            direction = np.zeros_like(block)
            direction[:, axis] = 1.0
            points.append(block)
            directions.append(direction)
        return np.vstack(points), np.vstack(directions)

    @property
    def num_edges(self) -> int:
        return self.edge_points.shape[0]

    @property
    def num_faces(self) -> int:
        return self.face_points.shape[0]

    @property
    def cell_volume(self) -> float:
        return self.spacing ** 3

    @property
    def upper_corner(self) -> np.ndarray:
        return self.origin + np.asarray(self.cells) * self.spacing

    def wall_edge_mask(self, wall: str) -> np.ndarray:
        """Edges lying in the given wall; these are exactly the wall's tangential E dofs."""
        if wall not in WALLS:
            raise ValueError(f"Unknown wall '{wall}'. Must be one of {WALLS}.")
        axis = "xyz".index(wall[0])
        bound = self.origin[axis] if wall[1] == "-" else self.upper_corner[axis]
        return np.isclose(self.edge_points[:, axis], bound, rtol=0.0, atol=1e-9 * self.spacing)

    def boundary_edge_mask(self) -> np.ndarray:
        mask = np.zeros(self.num_edges, dtype=bool)
        for wall in WALLS:
            mask |= self.wall_edge_mask(wall)
        return mask

    def curl(self) -> SparseMatrix:
        """The discrete curl, edges -> faces, as a finalized SparseMatrix."""
        nx, ny, nz = self.cells
        h = self.spacing
        D, eye = _difference, _identity

        dEz_dy = _kron3(eye(nz), D(ny, h), eye(nx + 1))
        dEy_dz = _kron3(D(nz, h), eye(ny), eye(nx + 1))
        dEx_dz = _kron3(D(nz, h), eye(ny + 1), eye(nx))
        dEz_dx = _kron3(eye(nz), eye(ny + 1), D(nx, h))
        dEy_dx = _kron3(eye(nz + 1), eye(ny), D(nx, h))
        dEx_dy = _kron3(eye(nz + 1), D(ny, h), eye(nx))

        curl = sp.bmat([
            [None, -dEy_dz, dEz_dy],
            [dEx_dz, None, -dEz_dx],
            [-dEx_dy, dEy_dx, None],
        ], format="csr")
        return SparseMatrix.from_scipy(curl, name="curl")

    def gradient(self) -> SparseMatrix:
        """The discrete gradient, nodes -> edges. `curl @ gradient` vanishes identically."""
        nx, ny, nz = self.cells
        h = self.spacing
        D, eye = _difference, _identity
        grad = sp.vstack([
            _kron3(eye(nz + 1), eye(ny + 1), D(nx, h)),
            _kron3(eye(nz + 1), D(ny, h), eye(nx + 1)),
            _kron3(D(nz, h), eye(ny + 1), eye(nx + 1)),
        ], format="csr")
        return SparseMatrix.from_scipy(grad, name="grad")

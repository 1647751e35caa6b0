# src/fwsim_core/operators/sparse.py
"""
Concrete operators backed by NumPy and SciPy.

- SparseMatrix: assembled in LIL format, frozen to CSR by `finalize()`. Provides
  LinearOperator, SparseStorage and Invertible (sparse LU).
- DiagonalOperator: a diagonal (lumped mass) operator with an exact inverse.
- ScaledOperator: `alpha * A` for any LinearOperator, used for the negative curl.
"""
import logging
from typing import Optional, Tuple

import numpy as np
import scipy.sparse as sp
import scipy.sparse.linalg as splinalg

from ..constants import ZERO_ROW_THRESHOLD
from .capabilities import Invertible, LinearOperator, RowView, SparseStorage, provides
from .exceptions import DimensionMismatchError, OperatorStateError, SingularOperatorError

logger = logging.getLogger(__name__)


class _OperatorBase:
    """Shape bookkeeping and output handling shared by the concrete operators."""

    def __init__(self, height: int, width: int, name: str):
        self._shape: Tuple[int, int] = (int(height), int(width))
        self.name: str = name

    @property
    def shape(self) -> Tuple[int, int]:
        return self._shape

    @property
    def height(self) -> int:
        return self._shape[0]

    @property
    def width(self) -> int:
        return self._shape[1]

    def _check_vector(self, vec: np.ndarray, size: int) -> None:
        if vec.ndim != 1 or vec.shape[0] != size:
            raise DimensionMismatchError(self.name, (size,), tuple(vec.shape))

    def _emit(self, result: np.ndarray, y: Optional[np.ndarray]) -> np.ndarray:
        if y is None:
            return result
        self._check_vector(y, result.shape[0])
        y[:] = result
        return y

    def _product(self, x: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def _product_transpose(self, x: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def mult(self, x: np.ndarray, y: Optional[np.ndarray] = None) -> np.ndarray:
        self._check_vector(x, self.width)
        return self._emit(self._product(x), y)

    def mult_transpose(self, x: np.ndarray, y: Optional[np.ndarray] = None) -> np.ndarray:
        self._check_vector(x, self.height)
        return self._emit(self._product_transpose(x), y)

    def add_mult(self, x: np.ndarray, y: np.ndarray, val: float = 1.0) -> np.ndarray:
        self._check_vector(x, self.width)
        self._check_vector(y, self.height)
        y += val * self._product(x)
        return y

    def add_mult_transpose(self, x: np.ndarray, y: np.ndarray, val: float = 1.0) -> np.ndarray:
        self._check_vector(x, self.height)
        self._check_vector(y, self.width)
        y += val * self._product_transpose(x)
        return y

    def __repr__(self):
        return f"{type(self).__name__}(name='{self.name}', shape={self.shape})"


@provides(LinearOperator, SparseStorage, Invertible)
class SparseMatrix(_OperatorBase):
    """
    A real sparse matrix with an explicit assembly / finalize lifecycle.

    Elements are inserted with `add_element` / `set_element` while the matrix is
    open. `finalize()` converts the storage to CSR with sorted, de-duplicated
    indices; from then on the matrix can be applied, inverted and inspected row
    by row, but no longer modified element-wise.
    """

    def __init__(self, height: int, width: Optional[int] = None, name: str = "A"):
        width = height if width is None else width
        super().__init__(height, width, name)
        self._lil: Optional[sp.lil_matrix] = sp.lil_matrix(self._shape, dtype=float)
        self._csr: Optional[sp.csr_matrix] = None
        # Bumped whenever finalized values change, so inverse views know to refactor.
        self._revision: int = 0

    @classmethod
    def from_scipy(cls, matrix: sp.spmatrix, name: str = "A") -> "SparseMatrix":
        """Wraps an already-assembled SciPy matrix and finalizes it."""
        instance = cls(matrix.shape[0], matrix.shape[1], name=name)
        instance._lil = None
        instance._csr = sp.csr_matrix(matrix, dtype=float)
        instance._canonicalize()
        logger.debug(f"SparseMatrix '{name}' wrapped from SciPy ({instance.shape}, nnz={instance.num_nonzeros()}).")
        return instance

    # --- Assembly ---

    @property
    def is_finalized(self) -> bool:
        return self._csr is not None

    def _require_open(self, op: str) -> None:
        if self.is_finalized:
            raise OperatorStateError(self.name, f"{op}() called after finalize().")

    def _require_finalized(self, op: str) -> None:
        if not self.is_finalized:
            raise OperatorStateError(self.name, f"{op}() called before finalize().")

    def add_element(self, row: int, col: int, value: float) -> None:
        self._require_open("add_element")
        self._lil[row, col] += value

    def set_element(self, row: int, col: int, value: float) -> None:
        self._require_open("set_element")
        self._lil[row, col] = value

    def finalize(self) -> None:
        """Freezes the sparsity pattern. Calling it twice is a no-op."""
        if self.is_finalized:
            return
        self._csr = self._lil.tocsr()
        self._lil = None
        self._canonicalize()
        logger.debug(f"SparseMatrix '{self.name}' finalized ({self.shape}, nnz={self.num_nonzeros()}).")

    def _canonicalize(self) -> None:
        self._csr.sum_duplicates()
        self._csr.sort_indices()

    # --- SparseStorage ---

    def num_nonzeros(self) -> int:
        if self.is_finalized:
            return int(self._csr.nnz)
        return int(self._lil.nnz)

    def get_row(self, row: int) -> RowView:
        """Returns read-only views of the column indices and values of `row`."""
        self._require_finalized("get_row")
        if not 0 <= row < self.height:
            raise IndexError(f"Row {row} out of range for matrix '{self.name}' with {self.height} rows.")
        start, end = self._csr.indptr[row], self._csr.indptr[row + 1]
        cols = self._csr.indices[start:end]
        values = self._csr.data[start:end]
        cols.flags.writeable = False
        values.flags.writeable = False
        return RowView(cols=cols, values=values, is_view=True)

    def eliminate_zero_rows(self, threshold: float = ZERO_ROW_THRESHOLD) -> int:
        """
        Places 1 on the diagonal of every row with l1-norm below `threshold`.

        Raises:
            OperatorStateError: if the matrix is not finalized, not square, or a
                                near-zero row has no diagonal entry in its pattern.
        """
        self._require_finalized("eliminate_zero_rows")
        if self.height != self.width:
            raise OperatorStateError(self.name, "eliminate_zero_rows() requires a square matrix.")

        indptr, indices, data = self._csr.indptr, self._csr.indices, self._csr.data
        row_l1 = np.asarray(abs(self._csr).sum(axis=1)).ravel()

        eliminated = 0
        for row in np.flatnonzero(row_l1 < threshold):
            start, end = indptr[row], indptr[row + 1]
            diag_pos = np.flatnonzero(indices[start:end] == row)
            if diag_pos.size == 0:
                raise OperatorStateError(
                    self.name,
                    f"Row {row} is nearly zero but its diagonal entry is outside the sparsity pattern.",
                )
            data[start:end] = 0.0
            data[start + diag_pos[0]] = 1.0
            eliminated += 1

        if eliminated:
            self._revision += 1
            logger.debug(f"Eliminated {eliminated} near-zero rows of '{self.name}'.")
        return eliminated

    # --- LinearOperator ---

    def _product(self, x: np.ndarray) -> np.ndarray:
        self._require_finalized("mult")
        return self._csr @ x

    def _product_transpose(self, x: np.ndarray) -> np.ndarray:
        self._require_finalized("mult_transpose")
        return self._csr.T @ x

    # --- Invertible ---

    def inverse(self) -> "SparseLUInverse":
        self._require_finalized("inverse")
        if self.height != self.width:
            raise OperatorStateError(self.name, "inverse() requires a square matrix.")
        return SparseLUInverse(self)

    def to_scipy(self) -> sp.csr_matrix:
        """The finalized CSR storage. Treat it as read-only."""
        self._require_finalized("to_scipy")
        return self._csr


@provides(LinearOperator)
class SparseLUInverse(_OperatorBase):
    """
    The inverse of a finalized `SparseMatrix`, applied through a sparse LU
    factorization. The factorization is computed lazily and recomputed if the
    underlying matrix was modified by `eliminate_zero_rows`.
    """

    def __init__(self, matrix: SparseMatrix):
        super().__init__(matrix.width, matrix.height, name=f"inv({matrix.name})")
        self._matrix = matrix
        self._lu: Optional[splinalg.SuperLU] = None
        self._factored_revision: int = -1

    def _factorization(self) -> splinalg.SuperLU:
        if self._lu is None or self._factored_revision != self._matrix._revision:
            logger.debug(f"Factorizing '{self._matrix.name}' ({self._matrix.shape})...")
            try:
                self._lu = splinalg.splu(self._matrix.to_scipy().tocsc())
            except RuntimeError as e:
                logger.error(f"LU factorization of '{self._matrix.name}' failed, matrix appears singular: {e}")
                raise SingularOperatorError(details=str(e), operator_name=self._matrix.name) from e
            self._factored_revision = self._matrix._revision
        return self._lu

    def _checked(self, solution: np.ndarray) -> np.ndarray:
        if not np.all(np.isfinite(solution)):
            logger.error("NaN or Inf detected in sparse solve.")
            raise SingularOperatorError(details="Sparse solve produced NaN/Inf values.", operator_name=self._matrix.name)
        return solution

    def _product(self, x: np.ndarray) -> np.ndarray:
        return self._checked(self._factorization().solve(np.asarray(x, dtype=float)))

    def _product_transpose(self, x: np.ndarray) -> np.ndarray:
        return self._checked(self._factorization().solve(np.asarray(x, dtype=float), trans='T'))


@provides(LinearOperator, Invertible)
class DiagonalOperator(_OperatorBase):
    """A square diagonal operator, e.g. a lumped material mass matrix."""

    def __init__(self, diagonal: np.ndarray, name: str = "D"):
        diagonal = np.array(diagonal, dtype=float)
        if diagonal.ndim != 1:
            raise ValueError("DiagonalOperator expects a 1D array of diagonal entries.")
        super().__init__(diagonal.shape[0], diagonal.shape[0], name)
        self._diagonal = diagonal
        self._diagonal.flags.writeable = False

    @property
    def diagonal(self) -> np.ndarray:
        return self._diagonal

    def _product(self, x: np.ndarray) -> np.ndarray:
        return self._diagonal * x

    _product_transpose = _product

    def inverse(self) -> "DiagonalInverse":
        return DiagonalInverse(self)


@provides(LinearOperator)
class DiagonalInverse(_OperatorBase):
    """Exact inverse view of a `DiagonalOperator`."""

    def __init__(self, operator: DiagonalOperator):
        super().__init__(operator.height, operator.width, name=f"inv({operator.name})")
        self._operator = operator
        if np.any(operator.diagonal == 0.0):
            zero_rows = np.flatnonzero(operator.diagonal == 0.0)
            raise SingularOperatorError(
                details=f"Diagonal has {zero_rows.size} zero entries (first at row {zero_rows[0]}).",
                operator_name=operator.name,
            )

    def _product(self, x: np.ndarray) -> np.ndarray:
        return x / self._operator.diagonal

    _product_transpose = _product


@provides(LinearOperator)
class ScaledOperator(_OperatorBase):
    """`alpha * A` for a wrapped operator `A`, which is held by reference."""

    def __init__(self, operator: LinearOperator, alpha: float, name: Optional[str] = None):
        super().__init__(operator.height, operator.width, name or f"{alpha:g}*{getattr(operator, 'name', 'A')}")
        self._operator = operator
        self.alpha = float(alpha)

    def _product(self, x: np.ndarray) -> np.ndarray:
        return self.alpha * self._operator.mult(x)

    def _product_transpose(self, x: np.ndarray) -> np.ndarray:
        return self.alpha * self._operator.mult_transpose(x)

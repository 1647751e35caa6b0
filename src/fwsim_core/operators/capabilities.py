# src/fwsim_core/operators/capabilities.py
"""
Defines the capability architecture of the operator algebra.

Instead of a deep Matrix/Solver/SparseMatrix class hierarchy, the algebra is
expressed as a small set of `typing.Protocol` capabilities. A concrete
discretization implements whichever capabilities it supports, and consumers
(the symplectic integrator, the reference Yee system) depend only on the
protocols, never on concrete classes.

Key elements:
- LinearOperator: apply, transpose-apply, accumulating variants and shape.
- Invertible: an operator that can hand out an inverse view.
- SparseStorage: assembled storage with row access, finalize and
  zero-row elimination.
- RowView: the (cols, values) pair returned by row access.
- provides: a class decorator recording which capabilities a class implements.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Tuple, Type, runtime_checkable

import numpy as np

logger = logging.getLogger(__name__)


@runtime_checkable
class LinearOperator(Protocol):
    """
    The minimal contract shared by every operator.

    CONTRACT:
    1.  **Purity:** `x` is never modified. Only the designated output `y` is written.
    2.  **Output allocation:** when `y` is None a new array is allocated and returned;
        otherwise `y` is overwritten in place and returned.
    3.  **Accumulation:** `add_mult(x, y, val)` is equivalent to `y += val * (A @ x)`
        within floating-point rounding.
    """

    @property
    def shape(self) -> Tuple[int, int]:
        ...

    @property
    def height(self) -> int:
        ...

    @property
    def width(self) -> int:
        ...

    def mult(self, x: np.ndarray, y: Optional[np.ndarray] = None) -> np.ndarray:
        """y = A x"""
        ...

    def mult_transpose(self, x: np.ndarray, y: Optional[np.ndarray] = None) -> np.ndarray:
        """y = A^T x"""
        ...

    def add_mult(self, x: np.ndarray, y: np.ndarray, val: float = 1.0) -> np.ndarray:
        """y = y + val * A x"""
        ...

    def add_mult_transpose(self, x: np.ndarray, y: np.ndarray, val: float = 1.0) -> np.ndarray:
        """y = y + val * A^T x"""
        ...


@runtime_checkable
class Invertible(Protocol):
    """
    Defines the capability of an operator to produce its (approximate) inverse.

    The returned object satisfies `LinearOperator`. It is a view bound to the
    original operator: it keeps a reference to it and must not outlive changes
    made to it.
    """

    def inverse(self) -> LinearOperator:
        ...


@dataclass(frozen=True)
class RowView:
    """
    Column indices and values of one sparse row.

    When `is_view` is True both arrays alias the matrix storage and are marked
    read-only; callers must copy before modifying them.
    """
    cols: np.ndarray
    values: np.ndarray
    is_view: bool


@runtime_checkable
class SparseStorage(Protocol):
    """
    Defines the capability of an operator backed by assembled sparse storage.
    `finalize()` must be called after the last insertion and before any apply,
    row access or inverse.
    """

    def num_nonzeros(self) -> int:
        ...

    def get_row(self, row: int) -> RowView:
        ...

    def finalize(self) -> None:
        ...

    def eliminate_zero_rows(self, threshold: float = ...) -> int:
        """
        Places 1 on the diagonal of every row whose l1-norm is below the threshold.
        Returns the number of rows that were eliminated.
        """
        ...


def provides(*capability_protocols: Type):
    """
    A class decorator recording the operator capabilities a class implements.

    The protocols are attached as `_implements_capabilities` and double as a
    sanity check: decorating a class that lacks a protocol member fails
    immediately at import time instead of at first use.
    """

    def decorator(cls: Type) -> Type:
        for protocol in capability_protocols:
            if not getattr(protocol, "_is_protocol", False):
                raise TypeError(
                    f"Decorator argument for @provides must be a capability Protocol, but got {protocol}."
                )
            missing = [
                name for name, member in vars(protocol).items()
                if not name.startswith("_")
                and (callable(member) or isinstance(member, property))
                and not hasattr(cls, name)
            ]
            if missing:
                raise TypeError(
                    f"Class '{cls.__name__}' claims capability '{protocol.__name__}' "
                    f"but does not define: {sorted(missing)}"
                )
        cls._implements_capabilities = tuple(capability_protocols)
        logger.debug(
            f"Class '{cls.__name__}' registered as providing "
            f"{[p.__name__ for p in capability_protocols]}."
        )
        return cls

    return decorator

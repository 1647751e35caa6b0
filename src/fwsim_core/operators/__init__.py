# src/fwsim_core/operators/__init__.py
"""
Exposes the public interface of the operator algebra.
"""
from .capabilities import Invertible, LinearOperator, RowView, SparseStorage, provides
from .exceptions import DimensionMismatchError, OperatorStateError, SingularOperatorError
from .sparse import (
    DiagonalInverse,
    DiagonalOperator,
    ScaledOperator,
    SparseLUInverse,
    SparseMatrix,
)

__all__ = [
    # Capabilities
    "LinearOperator", "Invertible", "SparseStorage", "RowView", "provides",
    # Concrete Operators
    "SparseMatrix", "SparseLUInverse", "DiagonalOperator", "DiagonalInverse", "ScaledOperator",
    # Exceptions
    "OperatorStateError", "DimensionMismatchError", "SingularOperatorError",
]

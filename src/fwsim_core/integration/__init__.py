# src/fwsim_core/integration/__init__.py
from .coefficients import COEFFICIENT_TABLES, SymplecticCoefficients, get_coefficients
from .field_system import FieldSystem
from .symplectic import SymplecticIntegrator
from .exceptions import IntegratorStateError, UnsupportedOrderError

__all__ = [
    "SymplecticIntegrator", "FieldSystem",
    "SymplecticCoefficients", "COEFFICIENT_TABLES", "get_coefficients",
    "IntegratorStateError", "UnsupportedOrderError",
]

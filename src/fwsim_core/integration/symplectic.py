# src/fwsim_core/integration/symplectic.py
"""
Defines the `SymplecticIntegrator`, the order-parameterized leapfrog-family
stepper for a (B, E) field pair coupled through a curl-type operator.
"""
import logging
from typing import Optional

import numpy as np

from ..operators import DimensionMismatchError, LinearOperator
from .coefficients import SymplecticCoefficients, get_coefficients
from .exceptions import IntegratorStateError
from .field_system import FieldSystem

logger = logging.getLogger(__name__)


class SymplecticIntegrator:
    """
    Advances (B, E) by one macro step `dt` as a composition of kick/drift stages.

    For every stage of the configured coefficient table:

    1.  **Kick:** if the stage's kick weight is nonzero, E advances by
        `kick * dt` along `field_system.e_rate(B, t_local)`. Sources and boundary
        terms therefore see the stage's local time.
    2.  **Drift:** if the stage's drift weight is nonzero, B advances by
        `drift * dt` along `coupling_operator @ E`.
    3.  The local time moves forward by `drift * dt`.

    The integrator holds the coupling operator and field system by reference and
    never owns them. It performs no stability checks.
    """

    def __init__(self, order: int = 1):
        self.coefficients: SymplecticCoefficients = get_coefficients(order)
        self._coupling: Optional[LinearOperator] = None
        self._system: Optional[FieldSystem] = None
        self._db: Optional[np.ndarray] = None
        logger.debug(
            f"SymplecticIntegrator created: order {order} ({self.coefficients.name}, "
            f"{self.coefficients.num_stages} stages)."
        )

    @property
    def order(self) -> int:
        return self.coefficients.order

    @property
    def is_initialized(self) -> bool:
        return self._coupling is not None

    def init(self, coupling_operator: LinearOperator, field_system: FieldSystem) -> None:
        """
        Binds the coupling operator (E-space to B-space) and the field system.

        Raises:
            IntegratorStateError: if called more than once.
            TypeError: if the arguments do not satisfy their protocols.
        """
        if self.is_initialized:
            raise IntegratorStateError("init() called on an already initialized integrator.")
        if not isinstance(coupling_operator, LinearOperator):
            raise TypeError(f"coupling_operator must satisfy LinearOperator, got '{type(coupling_operator).__name__}'.")
        if not isinstance(field_system, FieldSystem):
            raise TypeError(f"field_system must satisfy FieldSystem, got '{type(field_system).__name__}'.")

        self._coupling = coupling_operator
        self._system = field_system
        self._db = np.zeros(coupling_operator.height)
        logger.info(f"Symplectic integrator (order {self.order}) bound to coupling operator {coupling_operator.shape}.")

    def step(self, b: np.ndarray, e: np.ndarray, t: float, dt: float) -> float:
        """
        Advances `b` and `e` in place by one macro step.

        Args:
            b: Magnetic field dofs (length = coupling_operator.height).
            e: Electric field dofs (length = coupling_operator.width).
            t: Current simulation time.
            dt: Macro step size, assumed within the stability bound.

        Returns:
            The new simulation time, exactly `t + dt`.

        Raises:
            IntegratorStateError: if `init()` has not been called.
        """
        if not self.is_initialized:
            raise IntegratorStateError("step() called before init().")
        if b.shape != (self._coupling.height,):
            raise DimensionMismatchError("B field", (self._coupling.height,), tuple(b.shape))
        if e.shape != (self._coupling.width,):
            raise DimensionMismatchError("E field", (self._coupling.width,), tuple(e.shape))

        t_local = t
        for kick, drift in zip(self.coefficients.kick, self.coefficients.drift):
            if kick != 0.0:
                de = self._system.e_rate(b, t_local)
                self._system.advance_e(e, de, kick * dt)
            if drift != 0.0:
                self._coupling.mult(e, self._db)
                self._system.advance_b(b, self._db, drift * dt)
            t_local += drift * dt

        self._system.sync()
        return t + dt

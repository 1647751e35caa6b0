# src/fwsim_core/simulation/context.py
"""
Defines the `SimulationContext`, the immutable input of one engine run.
"""
from dataclasses import dataclass

from ..discretization import YeeMaxwellSystem
from .config import SimulationConfig


@dataclass(frozen=True)
class SimulationContext:
    """
    The configuration of a run together with the system it acts on.

    The context itself is frozen; the system inside it is the mutable field
    state the engine advances.
    """
    config: SimulationConfig
    system: YeeMaxwellSystem

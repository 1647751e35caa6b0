# src/fwsim_core/discretization/__init__.py
"""
Reference discretization: a uniform Cartesian Yee grid with PEC walls.
"""
from .communicator import Communicator, SerialCommunicator
from .yee import WALLS, YeeGrid
from .system import YeeMaxwellSystem

__all__ = ["Communicator", "SerialCommunicator", "WALLS", "YeeGrid", "YeeMaxwellSystem"]

# tests/conftest.py
import textwrap

import numpy as np
import pytest

from fwsim_core.discretization import YeeGrid, YeeMaxwellSystem
from fwsim_core.operators import DiagonalOperator, ScaledOperator


class HarmonicOscillator:
    """
    One-dof field system dB/dt = -omega E, dE/dt = omega B, with exact solution
    e = cos(omega t), b = -sin(omega t) for e(0) = 1, b(0) = 0.
    """

    def __init__(self, omega: float = 1.0):
        self.omega = omega
        self.coupling_operator = ScaledOperator(DiagonalOperator([omega]), -1.0)
        self.e_rate_times = []
        self.sync_calls = 0

    def e_rate(self, b, t, out=None):
        self.e_rate_times.append(t)
        rate = self.omega * b
        if out is None:
            return rate
        out[:] = rate
        return out

    def advance_b(self, b, increment, fraction):
        b += fraction * increment

    def advance_e(self, e, increment, fraction):
        e += fraction * increment

    def sync(self):
        self.sync_calls += 1


@pytest.fixture
def oscillator():
    return HarmonicOscillator(omega=2.0)


@pytest.fixture
def small_grid():
    return YeeGrid((4, 4, 4), 0.01)


@pytest.fixture
def pec_system(small_grid):
    """A closed, lossless vacuum cavity with zero initial fields."""
    return YeeMaxwellSystem(small_grid)


@pytest.fixture
def random_cavity(small_grid):
    """A PEC cavity seeded with a reproducible random E field on its interior edges."""
    system = YeeMaxwellSystem(small_grid)
    rng = np.random.default_rng(1234)
    system.set_initial_e_field(lambda points: rng.standard_normal(points.shape))
    return system


@pytest.fixture
def write_config(tmp_path):
    """Writes a YAML run configuration to a temporary file and returns its path."""
    def _write(content: str, name: str = "run.yaml"):
        path = tmp_path / name
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path
    return _write

# tests/test_sources.py
import math

import numpy as np
import pytest

from fwsim_core.constants import EPSILON0, MU0
from fwsim_core.sources import (
    CompositeSource,
    CurrentRingParams,
    DielectricSphereParams,
    MagneticShellParams,
    SourceDimensionError,
    SourceParameterError,
    VoltaicPileParams,
    current_ring,
    current_ring_field,
    dielectric_sphere,
    gaussian_drive_rate,
    magnetic_shell,
    permeability_profile,
    permittivity_profile,
    sinusoidal_drive_rate,
    voltaic_pile,
    voltaic_pile_field,
)

QUARTER_PERIOD = 0.25e-9  # sin(2*pi * 1 GHz * t) == 1


@pytest.fixture
def pile():
    return VoltaicPileParams.from_vector([0, 0, 0, 0, 0, 1, 0.5, 1.0, 1.0e9])


@pytest.fixture
def ring():
    return CurrentRingParams.from_vector([0, 0, 0, 0, 0, 1, 0.5, 1.0, 3.0, 1.0e9])


class TestParameterRecords:

    def test_empty_vector_disables_source(self):
        assert VoltaicPileParams.from_vector([]) is None
        assert CurrentRingParams.from_vector(()) is None
        assert DielectricSphereParams.from_vector([]) is None
        assert MagneticShellParams.from_vector([]) is None

    def test_layouts(self, pile, ring):
        assert pile.axis_end == (0.0, 0.0, 1.0)
        assert (pile.radius, pile.magnitude, pile.frequency) == (0.5, 1.0, 1.0e9)
        assert (ring.inner_radius, ring.outer_radius, ring.current) == (0.5, 1.0, 3.0)
        sphere = DielectricSphereParams.from_vector([1, 2, 3, 0.5, 4.0])
        assert sphere.center == (1.0, 2.0, 3.0) and sphere.relative_permittivity == 4.0
        shell = MagneticShellParams.from_vector([0, 0, 0, 0.2, 0.4, 10.0])
        assert (shell.inner_radius, shell.outer_radius, shell.relative_permeability) == (0.2, 0.4, 10.0)

    def test_two_dimensional_pile(self):
        pile_2d = VoltaicPileParams.from_vector([0, 0, 1, 0, 0.2, 2.0, 0.0], dim=2)
        assert pile_2d.dim == 2

    @pytest.mark.parametrize("factory, vector", [
        (VoltaicPileParams.from_vector, [0, 0, 0, 1]),
        (CurrentRingParams.from_vector, [0] * 9),
        (DielectricSphereParams.from_vector, [0, 0, 0, 1]),
        (MagneticShellParams.from_vector, [0, 0, 0, 1, 2, 3, 4]),
        (VoltaicPileParams.from_vector, ["a"] * 9),
    ])
    def test_bad_vectors(self, factory, vector):
        with pytest.raises(SourceParameterError):
            factory(vector)


class TestVoltaicPile:

    def test_zero_at_time_zero(self, pile):
        np.testing.assert_array_equal(voltaic_pile(pile, np.array([0.0, 0.0, 0.5]), 0.0), np.zeros(3))

    def test_axis_vector_at_quarter_period(self, pile):
        np.testing.assert_allclose(voltaic_pile(pile, np.array([0.1, 0.1, 0.5]), QUARTER_PERIOD), [0.0, 0.0, 1.0])

    def test_outside_is_zero(self, pile):
        points = np.array([[0.6, 0.0, 0.5], [0.0, 0.0, 1.2], [0.0, 0.0, -0.01]])
        np.testing.assert_array_equal(voltaic_pile_field(pile, points, QUARTER_PERIOD), np.zeros((3, 3)))

    def test_magnitude_scales_with_axis_length(self):
        long_pile = VoltaicPileParams.from_vector([0, 0, 0, 0, 0, 2, 0.5, 4.0, 1.0e9])
        np.testing.assert_allclose(voltaic_pile(long_pile, np.array([0, 0, 1.0]), QUARTER_PERIOD), [0.0, 0.0, 4.0])

    def test_zero_length_axis_is_inactive(self):
        degenerate = VoltaicPileParams.from_vector([1, 1, 1, 1, 1, 1, 0.5, 1.0, 1.0e9])
        np.testing.assert_array_equal(voltaic_pile(degenerate, np.array([1.0, 1.0, 1.0]), QUARTER_PERIOD), np.zeros(3))

    def test_dimension_mismatch(self, pile):
        with pytest.raises(SourceDimensionError):
            voltaic_pile(pile, np.array([0.0, 0.5]), 0.0)


class TestCurrentRing:

    def test_outer_boundary_is_inclusive(self, ring):
        j = current_ring(ring, np.array([1.0, 0.0, 0.5]), QUARTER_PERIOD)
        # current / (h * (rb - ra)) * |x_perp| along the azimuth
        np.testing.assert_allclose(j, [0.0, 6.0, 0.0])

    def test_inner_boundary_is_inclusive(self, ring):
        j = current_ring(ring, np.array([0.0, 0.5, 0.5]), QUARTER_PERIOD)
        np.testing.assert_allclose(j, [-3.0, 0.0, 0.0])

    @pytest.mark.parametrize("point", [[1.01, 0.0, 0.5], [0.49, 0.0, 0.5], [0.75, 0.0, -0.1], [0.75, 0.0, 1.1]])
    def test_zero_outside_annulus(self, ring, point):
        np.testing.assert_array_equal(current_ring(ring, np.array(point), QUARTER_PERIOD), np.zeros(3))

    def test_radii_order_does_not_matter(self, ring):
        swapped = CurrentRingParams.from_vector([0, 0, 0, 0, 0, 1, 1.0, 0.5, 3.0, 1.0e9])
        point = np.array([0.7, 0.2, 0.3])
        np.testing.assert_allclose(current_ring(swapped, point, QUARTER_PERIOD), current_ring(ring, point, QUARTER_PERIOD))

    def test_zero_thickness_is_inactive(self):
        thin = CurrentRingParams.from_vector([0, 0, 0, 0, 0, 1, 0.5, 0.5, 3.0, 1.0e9])
        np.testing.assert_array_equal(current_ring(thin, np.array([0.5, 0.0, 0.5]), QUARTER_PERIOD), np.zeros(3))

    def test_requires_three_dimensions(self, ring):
        with pytest.raises(SourceDimensionError) as excinfo:
            current_ring_field(ring, np.zeros((4, 2)), 0.0)
        assert excinfo.value.received_dim == 2


class TestCompositeSource:

    def test_inactive_composite_is_zero(self):
        source = CompositeSource()
        assert not source.is_active
        np.testing.assert_array_equal(source(np.ones(3), QUARTER_PERIOD), np.zeros(3))

    def test_single_generator_delegates(self, pile, ring):
        points = np.random.default_rng(3).uniform(-1, 1, size=(50, 3))
        np.testing.assert_array_equal(
            CompositeSource(voltaic_pile=pile).field(points, QUARTER_PERIOD),
            voltaic_pile_field(pile, points, QUARTER_PERIOD),
        )
        np.testing.assert_array_equal(
            CompositeSource(current_ring=ring).field(points, QUARTER_PERIOD),
            current_ring_field(ring, points, QUARTER_PERIOD),
        )

    def test_both_generators_add(self, pile, ring):
        points = np.random.default_rng(5).uniform(-1, 1, size=(200, 3))
        t = 0.1e-9
        expected = voltaic_pile_field(pile, points, t) + current_ring_field(ring, points, t)
        np.testing.assert_allclose(CompositeSource(pile, ring).field(points, t), expected)

    def test_evaluation_has_no_side_effects(self, pile, ring):
        source = CompositeSource(pile, ring)
        point = np.array([0.75, 0.0, 0.5])
        first = source(point, QUARTER_PERIOD)
        source(np.array([0.1, 0.1, 0.1]), QUARTER_PERIOD)
        np.testing.assert_array_equal(source(point, QUARTER_PERIOD), first)


class TestMaterials:

    def test_dielectric_sphere(self):
        sphere = DielectricSphereParams.from_vector([0, 0, 0, 1.0, 4.0])
        assert dielectric_sphere(sphere, np.array([0.0, 0.0, 1.0])) == pytest.approx(4.0 * EPSILON0)
        assert dielectric_sphere(sphere, np.array([0.0, 0.0, 1.1])) == pytest.approx(EPSILON0)

    def test_magnetic_shell(self):
        shell = MagneticShellParams.from_vector([0, 0, 0, 0.5, 1.0, 10.0])
        assert magnetic_shell(shell, np.array([0.75, 0.0, 0.0])) == pytest.approx(10.0 * MU0)
        assert magnetic_shell(shell, np.array([0.25, 0.0, 0.0])) == pytest.approx(MU0)
        assert magnetic_shell(shell, np.array([0.5, 0.0, 0.0])) == pytest.approx(10.0 * MU0)

    def test_profiles_default_to_vacuum(self):
        points = np.zeros((4, 3))
        np.testing.assert_allclose(permittivity_profile(None)(points), np.full(4, EPSILON0))
        np.testing.assert_allclose(permeability_profile(None)(points), np.full(4, MU0))


class TestBoundaryDrives:

    def test_sinusoidal_drive_is_z_polarized(self):
        rate = sinusoidal_drive_rate(np.zeros((2, 3)), 0.0, 1.0e9)
        np.testing.assert_allclose(rate[:, 2], 2.0 * math.pi * 1.0e9)
        np.testing.assert_array_equal(rate[:, :2], 0.0)

    def test_gaussian_drive_decays(self):
        early = gaussian_drive_rate(np.zeros((1, 3)), 0.0, 1.0e9)[0, 2]
        late = gaussian_drive_rate(np.zeros((1, 3)), 5.0e-9, 1.0e9)[0, 2]
        assert early == pytest.approx(2.0 * math.pi * 1.0e9)
        assert abs(late) < 1e-6 * abs(early)

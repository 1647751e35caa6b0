# tests/test_integrator.py
import math

import numpy as np
import pytest

from fwsim_core.integration import (
    COEFFICIENT_TABLES,
    IntegratorStateError,
    SymplecticIntegrator,
    UnsupportedOrderError,
    get_coefficients,
)
from fwsim_core.operators import DimensionMismatchError

ORDERS = [1, 2, 3, 4]


class TestCoefficientTables:

    @pytest.mark.parametrize("order", ORDERS)
    def test_weights_sum_to_one(self, order):
        coeffs = get_coefficients(order)
        assert math.fsum(coeffs.kick) == pytest.approx(1.0, abs=1e-12)
        assert math.fsum(coeffs.drift) == pytest.approx(1.0, abs=1e-12)
        assert len(coeffs.kick) == len(coeffs.drift) == coeffs.num_stages

    def test_leapfrog_table(self):
        coeffs = get_coefficients(1)
        assert coeffs.kick == (0.0, 1.0)
        assert coeffs.drift == (0.5, 0.5)

    def test_leapfrog_stability_limit_is_two(self):
        assert get_coefficients(1).stability_limit == pytest.approx(2.0, abs=1e-3)

    @pytest.mark.parametrize("order", ORDERS)
    def test_stability_limit_positive(self, order):
        assert get_coefficients(order).stability_limit > 0.5

    def test_tables_are_immutable(self):
        with pytest.raises(TypeError):
            COEFFICIENT_TABLES[5] = COEFFICIENT_TABLES[1]

    @pytest.mark.parametrize("order", [0, 5, -1, "2", None])
    def test_unsupported_order(self, order):
        with pytest.raises(UnsupportedOrderError) as excinfo:
            SymplecticIntegrator(order)
        assert "Unsupported Integration Order" in excinfo.value.get_diagnostic_report()


class TestIntegratorLifecycle:

    def test_step_before_init_raises(self):
        integrator = SymplecticIntegrator(1)
        with pytest.raises(IntegratorStateError, match="before init"):
            integrator.step(np.zeros(1), np.zeros(1), 0.0, 0.1)

    def test_double_init_raises(self, oscillator):
        integrator = SymplecticIntegrator(2)
        integrator.init(oscillator.coupling_operator, oscillator)
        with pytest.raises(IntegratorStateError, match="already initialized"):
            integrator.init(oscillator.coupling_operator, oscillator)

    def test_init_rejects_non_operator(self, oscillator):
        with pytest.raises(TypeError):
            SymplecticIntegrator(1).init(np.eye(1), oscillator)

    def test_init_rejects_non_field_system(self, oscillator):
        with pytest.raises(TypeError):
            SymplecticIntegrator(1).init(oscillator.coupling_operator, object())

    def test_step_rejects_wrong_shapes(self, oscillator):
        integrator = SymplecticIntegrator(1)
        integrator.init(oscillator.coupling_operator, oscillator)
        with pytest.raises(DimensionMismatchError):
            integrator.step(np.zeros(2), np.zeros(1), 0.0, 0.1)
        with pytest.raises(DimensionMismatchError):
            integrator.step(np.zeros(1), np.zeros(3), 0.0, 0.1)


class TestIntegratorStepping:

    @pytest.mark.parametrize("order", ORDERS)
    def test_time_advances_by_dt(self, order, oscillator):
        integrator = SymplecticIntegrator(order)
        integrator.init(oscillator.coupling_operator, oscillator)
        b, e = np.zeros(1), np.ones(1)
        t = 0.3
        for _ in range(7):
            t_new = integrator.step(b, e, t, 0.01)
            assert t_new == t + 0.01
            t = t_new
        assert oscillator.sync_calls == 7

    @pytest.mark.parametrize("order", ORDERS)
    def test_zero_state_stays_zero(self, order, oscillator):
        integrator = SymplecticIntegrator(order)
        integrator.init(oscillator.coupling_operator, oscillator)
        b, e = np.zeros(1), np.zeros(1)
        t = 0.0
        for _ in range(50):
            t = integrator.step(b, e, t, 0.05)
        assert np.all(b == 0.0) and np.all(e == 0.0)

    @pytest.mark.parametrize("order", ORDERS)
    def test_kicks_see_stage_local_time(self, order, oscillator):
        coeffs = get_coefficients(order)
        integrator = SymplecticIntegrator(order)
        integrator.init(oscillator.coupling_operator, oscillator)
        integrator.step(np.zeros(1), np.ones(1), 1.0, 0.1)

        expected, t_local = [], 1.0
        for kick, drift in zip(coeffs.kick, coeffs.drift):
            if kick != 0.0:
                expected.append(t_local)
            t_local += drift * 0.1
        np.testing.assert_allclose(oscillator.e_rate_times, expected, rtol=0, atol=1e-15)

    @pytest.mark.parametrize("order", ORDERS)
    def test_tracks_exact_oscillator_solution(self, order, oscillator):
        integrator = SymplecticIntegrator(order)
        integrator.init(oscillator.coupling_operator, oscillator)
        b, e = np.zeros(1), np.ones(1)
        t, dt = 0.0, 1.0e-3
        for _ in range(1000):
            t = integrator.step(b, e, t, dt)
        omega = oscillator.omega
        assert e[0] == pytest.approx(math.cos(omega * t), abs=1e-4)
        assert b[0] == pytest.approx(-math.sin(omega * t), abs=1e-4)

    @pytest.mark.parametrize("order, rate", [(1, 2), (2, 2), (3, 3), (4, 4)])
    def test_global_error_converges_at_table_order(self, order, rate, oscillator):
        def final_error(num_steps):
            integrator = SymplecticIntegrator(order)
            integrator.init(oscillator.coupling_operator, oscillator)
            b, e = np.zeros(1), np.ones(1)
            t, dt = 0.0, 0.5 / num_steps
            for _ in range(num_steps):
                t = integrator.step(b, e, t, dt)
            omega_t = oscillator.omega * t
            return math.hypot(e[0] - math.cos(omega_t), b[0] + math.sin(omega_t))

        observed = math.log2(final_error(20) / final_error(40))
        assert observed == pytest.approx(rate, abs=0.1)

    @pytest.mark.parametrize("order", ORDERS)
    def test_oscillator_energy_bounded(self, order, oscillator):
        integrator = SymplecticIntegrator(order)
        integrator.init(oscillator.coupling_operator, oscillator)
        b, e = np.zeros(1), np.ones(1)
        dt = 0.25 * get_coefficients(order).stability_limit / oscillator.omega
        t, energies = 0.0, []
        for _ in range(5000):
            t = integrator.step(b, e, t, dt)
            energies.append(0.5 * (b[0] ** 2 + e[0] ** 2))
        assert max(abs(en - 0.5) for en in energies) < 0.1


class TestCavityEnergy:
    """Energy of a closed, lossless Yee cavity over long runs."""

    @pytest.mark.parametrize("order", ORDERS)
    def test_zero_cavity_stays_zero(self, order, pec_system):
        integrator = SymplecticIntegrator(order)
        integrator.init(pec_system.coupling_operator, pec_system)
        dt = 0.5 * pec_system.maximum_time_step()
        t = 0.0
        for _ in range(20):
            t = integrator.step(pec_system.b, pec_system.e, t, dt)
        assert pec_system.energy() == 0.0
        assert t == pytest.approx(20 * dt)

    @pytest.mark.parametrize("order", ORDERS)
    def test_energy_bounded_over_long_run(self, order, random_cavity):
        system = random_cavity
        integrator = SymplecticIntegrator(order)
        integrator.init(system.coupling_operator, system)
        dt = 0.2 * system.maximum_time_step() * integrator.coefficients.stability_limit / 2.0
        e0 = system.energy()
        assert e0 > 0.0

        t, energies = 0.0, []
        for _ in range(1000):
            t = integrator.step(system.b, system.e, t, dt)
            energies.append(system.energy())
        drift = np.max(np.abs(np.asarray(energies) - e0)) / e0
        assert drift < 0.1

    def test_explicit_euler_drifts(self, random_cavity):
        """The same cavity under forward Euler gains energy without bound."""
        system = random_cavity
        dt = 0.2 * system.maximum_time_step()
        e0 = system.energy()
        b, e = system.b, system.e
        for step in range(1000):
            t = step * dt
            de = system.e_rate(b, t)
            db = system.coupling_operator.mult(e)
            system.advance_e(e, de, dt)
            system.advance_b(b, db, dt)
        system.sync()
        assert system.energy() > 2.0 * e0

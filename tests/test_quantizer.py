# tests/test_quantizer.py
import logging
import math

import pytest

from fwsim_core.timestep import (
    BudgetPolicy,
    StabilityBoundExceededError,
    TimeStepError,
    apply_iteration_budget,
    quantize_time_step,
)


def _round_counts():
    """Every 10^k and 5^i * 10^a the quantizer may choose."""
    return sorted({5 ** i * 10 ** a for i in range(6) for a in range(12)})


class TestQuantizeTimeStep:

    def test_reference_example(self):
        plan = quantize_time_step(40e-9, 4.1e-13)
        assert plan.num_steps == 100000
        assert plan.dt == pytest.approx(4e-13, rel=1e-12)
        assert plan.dt <= 4.1e-13
        assert not plan.truncated

    @pytest.mark.parametrize("ratio", [0.3, 1.7, 2.5, 3.2, 7.0, 12.3, 33.3, 260.0, 999.0, 1001.0, 97560.97])
    def test_step_count_is_minimal_round_count(self, ratio):
        duration = 1.0e-9
        dt_max = duration / ratio
        plan = quantize_time_step(duration, dt_max)
        expected = min(n for n in _round_counts() if duration / n <= dt_max)
        assert plan.num_steps == expected
        assert plan.dt == duration / plan.num_steps
        assert plan.is_stable

    @pytest.mark.parametrize("duration, dt_max", [(0.0, 1.0), (-1.0, 1.0), (1.0, 0.0), (math.inf, 1.0), (1.0, math.nan)])
    def test_rejects_invalid_inputs(self, duration, dt_max):
        with pytest.raises(TimeStepError):
            quantize_time_step(duration, dt_max)

    def test_overflowing_ratio_is_time_step_error(self):
        with pytest.raises(TimeStepError, match="overflows"):
            quantize_time_step(1.0e300, 1.0e-300)


class TestIterationBudget:

    def test_within_budget_is_unchanged(self):
        plan = quantize_time_step(1e-9, 2e-10)
        assert apply_iteration_budget(plan, 100) is plan

    def test_coarsen_warns_twice_when_unstable(self, caplog):
        plan = quantize_time_step(40e-9, 4.1e-13)
        with caplog.at_level(logging.WARNING):
            coarse = apply_iteration_budget(plan, 100)
        assert coarse.num_steps == 100
        assert coarse.dt == pytest.approx(4e-10)
        assert coarse.duration == plan.duration
        assert coarse.truncated and not coarse.is_stable
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 2
        assert "exceeds the iteration budget" in warnings[0].getMessage()
        assert "stability bound" in warnings[1].getMessage()

    def test_coarsen_warns_once_when_still_stable(self, caplog):
        plan = quantize_time_step(1e-9, 1e-9 / 240)
        assert plan.num_steps == 250
        with caplog.at_level(logging.WARNING):
            coarse = apply_iteration_budget(plan, 245)
        assert coarse.num_steps == 245
        assert coarse.is_stable
        assert sum(r.levelno == logging.WARNING for r in caplog.records) == 1

    def test_strict_raises_when_unstable(self):
        plan = quantize_time_step(40e-9, 4.1e-13)
        with pytest.raises(StabilityBoundExceededError) as excinfo:
            apply_iteration_budget(plan, 100, BudgetPolicy.STRICT)
        assert excinfo.value.max_steps == 100
        assert "Stability Bound Exceeded" in excinfo.value.get_diagnostic_report()

    def test_strict_allows_stable_truncation(self):
        plan = quantize_time_step(1e-9, 1e-9 / 240)
        strict = apply_iteration_budget(plan, 245, BudgetPolicy.STRICT)
        assert strict.num_steps == 245
        assert strict.truncated and strict.is_stable

    def test_shorten_keeps_step_size(self, caplog):
        plan = quantize_time_step(40e-9, 4.1e-13)
        with caplog.at_level(logging.WARNING):
            short = apply_iteration_budget(plan, 100, BudgetPolicy.SHORTEN)
        assert short.num_steps == 100
        assert short.dt == plan.dt
        assert short.duration == pytest.approx(100 * plan.dt)
        assert short.is_stable
        assert "duration reduced" in caplog.text

    @pytest.mark.parametrize("max_steps", [0, -5, 2.5])
    def test_invalid_budget(self, max_steps):
        plan = quantize_time_step(1e-9, 1e-11)
        with pytest.raises(TimeStepError):
            apply_iteration_budget(plan, max_steps)

"""Unit tests for the decay engine and the instantaneous-parts calculator."""

from __future__ import annotations

import itertools
from datetime import timedelta

import pytest

from conftest import make_inputs, overload_inputs

from barrel.domains.stress.domain_logic.stress_calculator import (
    acute_contribution,
    compute_parts,
    elapsed_periods,
    event_contribution,
)
from barrel.domains.stress.domain_logic.stress_models import (
    COMPONENT_FLOOR,
    DEFAULT_PARAMS,
    AcuteEvent,
    StressParams,
)


def _event(t0, magnitude=0.20, decay_periods=10, label="Death in family"):
    return AcuteEvent(label=label, magnitude=magnitude, occurred_at=t0, decay_periods=decay_periods)


# ===========================================================================
# Decay engine
# ===========================================================================

class TestAcuteDecay:
    def test_half_way_contributes_half(self, t0):
        event = _event(t0)
        assert acute_contribution([event], t0 + timedelta(seconds=5)) == pytest.approx(0.10)

    def test_expired_contributes_exactly_zero(self, t0):
        event = _event(t0)
        assert acute_contribution([event], t0 + timedelta(seconds=10)) == 0.0
        assert acute_contribution([event], t0 + timedelta(seconds=47)) == 0.0

    def test_linear_in_whole_seconds(self, t0):
        event = _event(t0, magnitude=0.3, decay_periods=6)
        for t in range(6):
            now = t0 + timedelta(seconds=t)
            assert event_contribution(event, now) == pytest.approx(0.3 * (1 - t / 6))

    def test_fractional_seconds_are_floored(self, t0):
        event = _event(t0)
        at_5 = event_contribution(event, t0 + timedelta(seconds=5))
        at_5_9 = event_contribution(event, t0 + timedelta(seconds=5.9))
        assert at_5 == at_5_9
        assert elapsed_periods(event, t0 + timedelta(seconds=5.9)) == 5

    def test_zero_decay_periods_falls_back_to_ten(self, t0):
        event = _event(t0, decay_periods=0)
        assert event_contribution(event, t0 + timedelta(seconds=5)) == pytest.approx(0.10)

    def test_events_sum(self, t0):
        events = [_event(t0, 0.2), _event(t0, -0.08, label="Major positive event")]
        now = t0 + timedelta(seconds=2)
        assert acute_contribution(events, now) == pytest.approx((0.2 - 0.08) * 0.8)

    def test_no_events_is_zero(self, t0):
        assert acute_contribution([], t0) == 0.0


# ===========================================================================
# Instantaneous parts
# ===========================================================================

class TestComputeParts:
    def test_neutral_profile(self, t0):
        # g = 0.25 -> baseline 0.15, sensitivity 1.075; trauma and daily floor
        parts = compute_parts(make_inputs(), now=t0)
        assert parts.genetics == pytest.approx(1.075 * 0.15)
        assert parts.trauma == COMPONENT_FLOOR
        assert parts.daily == COMPONENT_FLOOR
        assert parts.acute == 0.0
        assert parts.total == pytest.approx(0.16125 + 0.05 + 0.05)

    def test_total_is_sum_of_parts(self, t0):
        parts = compute_parts(overload_inputs(), jitter=0.13, now=t0)
        assert parts.total == pytest.approx(parts.genetics + parts.trauma + parts.daily + parts.acute)

    def test_floor_without_events(self, t0):
        for sens, adverse, rating in itertools.product(range(1, 6), range(5), range(1, 6)):
            daily = {"sleep_quality": rating, "job_security": 6 - rating}
            parts = compute_parts(make_inputs(sensitivity=sens, adverse_count=adverse, daily=daily), now=t0)
            assert parts.total >= 3 * COMPONENT_FLOOR
            assert min(parts.genetics, parts.trauma, parts.daily) >= COMPONENT_FLOOR

    def test_trauma_and_one_bad_factor_raise_daily(self, t0):
        calm = compute_parts(make_inputs(), now=t0)
        stressed = compute_parts(
            make_inputs(adverse_count=4, daily={"sleep_quality": 1}),
            now=t0,
        )
        assert stressed.details["daily_cap"] == pytest.approx(0.4)
        assert stressed.details["daily_amp"] == pytest.approx(1.3)
        # 0.35 * 1.3 * (1/8), scaled by sensitivity 1.075
        assert stressed.daily == pytest.approx(1.075 * 0.35 * 1.3 / 8)
        assert stressed.daily > calm.daily

    def test_trauma_component(self, t0):
        parts = compute_parts(make_inputs(adverse_count=4), now=t0)
        assert parts.trauma == pytest.approx(1.075 * 0.25)

    def test_healing_halves_trauma_and_removes_gating(self, t0):
        parts = compute_parts(make_inputs(adverse_count=4, healing=1.0), now=t0)
        assert parts.details["trauma_raw"] == pytest.approx(0.125)
        assert parts.details["daily_cap"] == pytest.approx(1.0)
        assert parts.details["daily_amp"] == pytest.approx(1.0)

    def test_good_days_floor_daily(self, t0):
        best = {name: 5 for name in ("sleep_quality", "diet_quality", "job_security")}
        parts = compute_parts(make_inputs(daily=best), now=t0)
        assert parts.details["daily_raw"] < 0
        assert parts.daily == COMPONENT_FLOOR

    def test_jitter_applies_after_floor(self, t0):
        parts = compute_parts(make_inputs(), jitter=-0.2, now=t0)
        assert parts.daily == pytest.approx(0.04)
        assert parts.daily < COMPONENT_FLOOR

    def test_jitter_only_touches_daily(self, t0):
        plain = compute_parts(overload_inputs(), now=t0)
        varied = compute_parts(overload_inputs(), jitter=0.1, now=t0)
        assert varied.genetics == plain.genetics
        assert varied.trauma == plain.trauma
        assert varied.daily == pytest.approx(plain.daily * 1.1)

    def test_acute_is_not_scaled_or_floored(self, t0):
        event = _event(t0, magnitude=0.20)
        parts = compute_parts(make_inputs(events=(event,)), now=t0 + timedelta(seconds=5))
        assert parts.acute == pytest.approx(0.10)

    def test_positive_event_can_lower_total(self, t0):
        good = _event(t0, magnitude=-0.08, label="Major positive event")
        plain = compute_parts(make_inputs(), now=t0)
        parts = compute_parts(make_inputs(events=(good,)), now=t0)
        assert parts.acute == pytest.approx(-0.08)
        assert parts.total < plain.total

    def test_total_is_not_clamped(self, t0):
        parts = compute_parts(overload_inputs(), now=t0)
        assert parts.total > 1.0

    def test_identical_inputs_give_identical_parts(self, t0):
        event = _event(t0)
        inputs = overload_inputs(events=(event,))
        now = t0 + timedelta(seconds=3)
        assert compute_parts(inputs, jitter=0.07, now=now) == compute_parts(inputs, jitter=0.07, now=now)

    def test_custom_params(self, t0):
        params = StressParams(base_min=0.2, base_max=0.2, sensitivity_gain=0.0)
        parts = compute_parts(make_inputs(), params, now=t0)
        assert parts.genetics == pytest.approx(0.2)
        assert params != DEFAULT_PARAMS

"""Deterministic stress decomposition: inputs -> StressParts.

``compute_parts`` is the main entry point. It is pure: the same inputs,
jitter and evaluation time always give the same parts. Jitter is supplied
by the caller; no randomness is drawn here.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import datetime, timezone

from barrel.domains.stress.domain_logic.score_reducers import (
    adverse_score,
    clamp01,
    daily_signed_values,
    gated_sum,
    genetic_score,
    lerp,
)
from barrel.domains.stress.domain_logic.stress_models import (
    COMPONENT_FLOOR,
    DEFAULT_DECAY_PERIODS,
    DEFAULT_PARAMS,
    AcuteEvent,
    StressInputs,
    StressParams,
    StressParts,
)


# ---------------------------------------------------------------------------
# Decay engine
# ---------------------------------------------------------------------------

def elapsed_periods(event: AcuteEvent, now: datetime) -> int:
    """Whole seconds elapsed since the event occurred."""
    return math.floor((now - event.occurred_at).total_seconds())


def event_contribution(event: AcuteEvent, now: datetime) -> float:
    """Linearly decayed magnitude of a single event, stepped per second."""
    decay_periods = event.decay_periods or DEFAULT_DECAY_PERIODS
    decay_factor = max(0.0, 1.0 - elapsed_periods(event, now) / decay_periods)
    return event.magnitude * decay_factor


def acute_contribution(events: Iterable[AcuteEvent], now: datetime | None = None) -> float:
    """Sum of decayed event magnitudes at ``now``.

    Expired events contribute exactly zero even if the caller has not
    pruned them yet.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    return sum((event_contribution(e, now) for e in events), 0.0)


# ---------------------------------------------------------------------------
# Instantaneous parts
# ---------------------------------------------------------------------------

def compute_parts(
    inputs: StressInputs,
    params: StressParams = DEFAULT_PARAMS,
    jitter: float = 0.0,
    *,
    now: datetime | None = None,
) -> StressParts:
    """Decompose current stress into genetics, trauma, daily and acute.

    Genetics, trauma and daily are scaled by genetic sensitivity and floored
    at 0.05. Jitter multiplies the floored daily component, so it can push
    it below the floor. Acute is neither scaled nor floored and can be
    negative. The total is not clamped.
    """
    g_score = genetic_score(inputs.genetics)
    baseline = lerp(params.base_min, params.base_max, g_score)
    sensitivity = 1 + params.sensitivity_gain * g_score

    a_score = adverse_score(inputs.adverse)
    unresolved = a_score * (1 - inputs.healing)
    trauma_raw = params.w_trauma * a_score * (1 - 0.5 * inputs.healing)

    cap = clamp01(1 - params.alpha_cap * unresolved)
    amp = 1 + params.beta_amp * unresolved
    daily_raw = gated_sum(daily_signed_values(inputs.daily), params.w_daily, cap, amp)

    acute = acute_contribution(inputs.acute_events, now)

    genetics = max(COMPONENT_FLOOR, sensitivity * baseline)
    trauma = max(COMPONENT_FLOOR, sensitivity * trauma_raw)
    daily = max(COMPONENT_FLOOR, sensitivity * daily_raw) * (1 + jitter)

    return StressParts(
        genetics=genetics,
        trauma=trauma,
        daily=daily,
        acute=acute,
        total=genetics + trauma + daily + acute,
        details={
            "genetic_score": g_score,
            "adverse_score": a_score,
            "sensitivity": sensitivity,
            "baseline": baseline,
            "trauma_raw": trauma_raw,
            "daily_raw": daily_raw,
            "daily_cap": cap,
            "daily_amp": amp,
            "jitter": jitter,
        },
    )

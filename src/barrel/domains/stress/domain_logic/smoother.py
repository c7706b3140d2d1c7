"""Temporal smoother: asymmetric exponential approach toward a target."""

from __future__ import annotations

from barrel.domains.stress.domain_logic.score_reducers import clamp01
from barrel.domains.stress.domain_logic.stress_models import (
    DEFAULT_PARAMS,
    OVERFLOW_LEVEL,
    STEP_SCALE,
    SmoothingState,
    StressParams,
)


def smoothing_rate(
    level: float,
    target: float,
    adverse_score: float,
    healing: float,
    params: StressParams = DEFAULT_PARAMS,
) -> float:
    """Rate for one step from ``level`` toward ``target``.

    Falling is slower with more unresolved adversity, and slower still
    above the overflow level.
    """
    if target > level:
        return params.eta_up
    eta = params.eta_down_base * (1 - 0.5 * adverse_score * (1 - healing))
    if level > OVERFLOW_LEVEL:
        eta *= params.overflow_slowdown
    return eta


def advance_smoother(
    state: SmoothingState,
    target: float,
    adverse_score: float,
    healing: float,
    params: StressParams = DEFAULT_PARAMS,
) -> SmoothingState:
    """Advance the displayed level one step and return the new state.

    The input state is left untouched; callers thread the returned state
    into the next call.
    """
    eta = smoothing_rate(state.level, target, adverse_score, healing, params)
    level = clamp01(state.level + eta * (target - state.level) * STEP_SCALE)
    return SmoothingState(level=level)

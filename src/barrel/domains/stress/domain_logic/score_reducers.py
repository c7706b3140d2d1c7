"""Score reducers: categorical inputs -> normalized scores.

Inputs are not range-checked here. Out-of-range ratings propagate
arithmetically; validation happens at the input boundary (see
``validation``).
"""

from __future__ import annotations

from collections.abc import Sequence

from barrel.domains.stress.domain_logic.stress_models import (
    INVERTED_DAILY_FACTORS,
    RATING_MAX,
    RATING_MIDPOINT,
    RATING_MIN,
    AdverseExperienceProfile,
    DailyFactors,
    GeneticProfile,
)


def clamp01(value: float) -> float:
    """Clamp a value to [0, 1]."""
    return max(0.0, min(1.0, value))


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


# ---------------------------------------------------------------------------
# Profile scores
# ---------------------------------------------------------------------------

def genetic_score(profile: GeneticProfile) -> float:
    """Genetic predisposition score in [0, 1].

    50% from the mean of the two family-history flags, 50% from the
    sensitivity rating mapped from 1-5 onto 0-1.
    """
    flag_mean = (int(bool(profile.family_anxiety)) + int(bool(profile.family_stress_illness))) / 2
    sensitivity = (profile.personal_sensitivity - RATING_MIN) / (RATING_MAX - RATING_MIN)
    return clamp01(0.5 * flag_mean + 0.5 * sensitivity)


def adverse_score(profile: AdverseExperienceProfile) -> float:
    """Fraction of adverse-experience flags present: exactly k/4."""
    flags = profile.flags()
    return sum(1 for flag in flags if flag) / len(flags)


# ---------------------------------------------------------------------------
# Daily factors
# ---------------------------------------------------------------------------

def to_signed(rating: float) -> float:
    """Map a 1-5 rating onto [-1, 1] around the midpoint."""
    return (rating - RATING_MIDPOINT) / 2


def invert_rating(rating: float) -> float:
    """Flip a "higher is worse" rating onto the "higher is better" scale."""
    return (RATING_MIN + RATING_MAX) - rating


def daily_signed_values(daily: DailyFactors) -> list[float]:
    """Signed contribution per factor, favourable ratings positive."""
    values: list[float] = []
    for name, rating in daily.ratings().items():
        if name in INVERTED_DAILY_FACTORS:
            rating = invert_rating(rating)
        values.append(to_signed(rating))
    return values


def gated_sum(values: Sequence[float], weight: float, cap: float, amp: float) -> float:
    """Combine signed contributions with asymmetric gating.

    Positive (favourable) entries are dampened by ``cap`` and negative ones
    amplified by ``amp``. Both means divide by the total number of entries,
    so zero-valued entries dilute each side.
    """
    if not values:
        return 0.0
    count = len(values)
    mean_pos = sum(v for v in values if v > 0) / count
    mean_neg = sum(v for v in values if v < 0) / count
    return weight * (-cap * mean_pos + amp * abs(mean_neg))

"""Documented starting inputs for a new or fully reset session."""

from __future__ import annotations

from barrel.domains.stress.domain_logic.stress_models import (
    AdverseExperienceProfile,
    DailyFactors,
    GeneticProfile,
    StressInputs,
)

INITIAL_GENETICS = GeneticProfile(
    family_anxiety=False,
    family_stress_illness=False,
    personal_sensitivity=2,
)

INITIAL_ADVERSE = AdverseExperienceProfile(
    emotional_abuse_neglect=True,
    physical_abuse_neglect=False,
    sexual_abuse=False,
    household_dysfunction=False,
)

INITIAL_HEALING = 0.0

# Worst case on every factor; financial stress is "higher is worse".
INITIAL_DAILY = DailyFactors(
    sleep_quality=1,
    diet_quality=1,
    exercise_frequency=1,
    medical_status=1,
    work_satisfaction=1,
    purpose_meaning=1,
    financial_stress=5,
    job_security=1,
)


def default_inputs() -> StressInputs:
    return StressInputs(
        genetics=INITIAL_GENETICS,
        adverse=INITIAL_ADVERSE,
        healing=INITIAL_HEALING,
        daily=INITIAL_DAILY,
        acute_events=(),
    )

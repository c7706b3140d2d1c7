"""Stress engine data models and domain constants."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


# ---------------------------------------------------------------------------
# Domain constants (used by score_reducers, stress_calculator and smoother)
# ---------------------------------------------------------------------------

# Evaluation order of the daily factors. Order does not change the gated sum
# but keeps the signed values stable for inspection.
DAILY_FACTOR_NAMES = [
    "sleep_quality",
    "diet_quality",
    "exercise_frequency",
    "medical_status",
    "work_satisfaction",
    "purpose_meaning",
    "financial_stress",
    "job_security",
]

# Factors where a higher rating means more stress; inverted before use.
INVERTED_DAILY_FACTORS = frozenset({"financial_stress"})

ADVERSE_FLAG_NAMES = [
    "emotional_abuse_neglect",
    "physical_abuse_neglect",
    "sexual_abuse",
    "household_dysfunction",
]

RATING_MIN = 1
RATING_MAX = 5
RATING_MIDPOINT = 3

COMPONENT_FLOOR = 0.05          # Nothing is ever truly zero stress
BASELINE_LEVEL = 0.2            # Smoothed level after a session reset
WINDOW_SIZE = 4                 # Samples kept by the meltdown detector
OVERFLOW_LEVEL = 0.8            # Above this, falling is slowed further
STEP_SCALE = 0.1                # Absolute granularity of one smoother step
MELTDOWN_THRESHOLD = 1.0
OVERSTRESSED_THRESHOLD = 0.90
JITTER_AMPLITUDE = 0.2          # Jitter is drawn from [-0.2, 0.2]
DEFAULT_DECAY_PERIODS = 10      # Seconds, used when an event carries 0


# ---------------------------------------------------------------------------
# Tunable parameters
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StressParams:
    """Immutable bundle of weights, caps and rates for the engine."""

    w_trauma: float = 0.25          # adverse experience -> trauma component
    w_daily: float = 0.35           # daily factor weight
    base_min: float = 0.10          # genetic baseline range
    base_max: float = 0.30
    sensitivity_gain: float = 0.30  # amplification by genetic sensitivity
    alpha_cap: float = 0.60         # trauma gating of favourable days
    beta_amp: float = 0.30          # trauma amplification of bad days
    eta_up: float = 0.40            # smoothing rate while rising
    eta_down_base: float = 0.18     # smoothing rate while falling
    overflow_slowdown: float = 0.60 # extra damping near saturation


DEFAULT_PARAMS = StressParams()


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GeneticProfile:
    """Hereditary predisposition and personal sensitivity (1-5)."""

    family_anxiety: bool = False
    family_stress_illness: bool = False
    personal_sensitivity: int = 3


@dataclass(frozen=True)
class AdverseExperienceProfile:
    """Early adversity categories."""

    emotional_abuse_neglect: bool = False
    physical_abuse_neglect: bool = False
    sexual_abuse: bool = False
    household_dysfunction: bool = False

    def flags(self) -> list[bool]:
        return [getattr(self, name) for name in ADVERSE_FLAG_NAMES]


@dataclass(frozen=True)
class DailyFactors:
    """Day-to-day ratings on a 1-5 scale.

    Every factor is "higher is better" except ``financial_stress``.
    """

    sleep_quality: int = 3
    diet_quality: int = 3
    exercise_frequency: int = 3
    medical_status: int = 3
    work_satisfaction: int = 3
    purpose_meaning: int = 3
    financial_stress: int = 3
    job_security: int = 3

    def ratings(self) -> dict[str, int]:
        """Return ratings keyed by factor name, in evaluation order."""
        return {name: getattr(self, name) for name in DAILY_FACTOR_NAMES}


@dataclass(frozen=True)
class AcuteEvent:
    """A transient life event that decays linearly to zero."""

    label: str
    magnitude: float
    occurred_at: datetime
    decay_periods: int = DEFAULT_DECAY_PERIODS   # seconds


@dataclass(frozen=True)
class StressInputs:
    """Everything the engine needs for one evaluation."""

    genetics: GeneticProfile = field(default_factory=GeneticProfile)
    adverse: AdverseExperienceProfile = field(default_factory=AdverseExperienceProfile)
    healing: float = 0.0            # 0-1: therapeutic mitigation of adversity
    daily: DailyFactors = field(default_factory=DailyFactors)
    acute_events: tuple[AcuteEvent, ...] = ()


# ---------------------------------------------------------------------------
# Result / state types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StressParts:
    """Decomposed instantaneous stress, recomputed on every evaluation."""

    genetics: float
    trauma: float
    daily: float
    acute: float
    total: float
    details: dict = field(default_factory=dict, compare=False)

    def as_dict(self) -> dict[str, float]:
        return {
            "genetics": self.genetics,
            "trauma": self.trauma,
            "daily": self.daily,
            "acute": self.acute,
            "total": self.total,
        }


@dataclass(frozen=True)
class SmoothingState:
    """The displayed (lagged) stress level, in [0, 1]."""

    level: float = BASELINE_LEVEL


def baseline_window() -> tuple[float, ...]:
    """Return a sample window filled with the baseline level."""
    return (BASELINE_LEVEL,) * WINDOW_SIZE

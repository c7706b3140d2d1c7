"""Shared test fixtures for the stress engine tests."""

from __future__ import annotations

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Test hermeticity
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in list(os.environ):
        if name.startswith("BARREL_"):
            monkeypatch.delenv(name)
    # Keep a developer's .env out of Settings()
    monkeypatch.chdir(tmp_path)

# Allow running tests without `pip install -e .` by making `src/` importable.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_DIR = _PROJECT_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from barrel.domains.stress.domain_logic.stress_models import (  # noqa: E402
    AdverseExperienceProfile,
    DailyFactors,
    GeneticProfile,
    StressInputs,
)

T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_inputs(
    *,
    family_anxiety: bool = False,
    family_stress_illness: bool = False,
    sensitivity: int = 3,
    adverse_count: int = 0,
    healing: float = 0.0,
    daily: dict[str, int] | None = None,
    events: tuple = (),
) -> StressInputs:
    """Neutral inputs unless overridden: no flags, every rating 3."""
    flags = [i < adverse_count for i in range(4)]
    return StressInputs(
        genetics=GeneticProfile(family_anxiety, family_stress_illness, sensitivity),
        adverse=AdverseExperienceProfile(*flags),
        healing=healing,
        daily=DailyFactors(**(daily or {})),
        acute_events=tuple(events),
    )


def overload_inputs(events: tuple = ()) -> StressInputs:
    """Every predisposition and adversity flag set, every daily factor at its worst."""
    worst = {
        "sleep_quality": 1,
        "diet_quality": 1,
        "exercise_frequency": 1,
        "medical_status": 1,
        "work_satisfaction": 1,
        "purpose_meaning": 1,
        "financial_stress": 5,
        "job_security": 1,
    }
    return make_inputs(
        family_anxiety=True,
        family_stress_illness=True,
        sensitivity=5,
        adverse_count=4,
        daily=worst,
        events=events,
    )


class FakeClock:
    """Manually advanced UTC clock for sessions."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def t0() -> datetime:
    return T0


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def neutral_inputs() -> StressInputs:
    return make_inputs()


@pytest.fixture
def session(clock):
    """A session on the documented default inputs with a fake clock."""
    from barrel.domains.stress.session import StressSession

    return StressSession(clock=clock)

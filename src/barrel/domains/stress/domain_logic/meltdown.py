"""Sliding-window meltdown detector.

The detector keeps the last four smoothed levels. Meltdown is entered when
their mean reaches 1.0 and is sticky: further samples are ignored until the
session is reset to ``initial_detector_state()``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from barrel.domains.stress.domain_logic.stress_models import (
    MELTDOWN_THRESHOLD,
    OVERSTRESSED_THRESHOLD,
    baseline_window,
)

logger = logging.getLogger(__name__)


class StressPhase(str, Enum):
    """Session phase as seen by the view layer."""

    NORMAL = "normal"
    OVERSTRESSED = "overstressed"   # advisory only, same rules as NORMAL
    MELTDOWN = "meltdown"           # terminal until reset


@dataclass(frozen=True)
class DetectorState:
    """Sample window (oldest first) plus the sticky meltdown flag."""

    window: tuple[float, ...] = field(default_factory=baseline_window)
    meltdown: bool = False


def initial_detector_state() -> DetectorState:
    return DetectorState()


def window_average(window: tuple[float, ...]) -> float:
    return sum(window) / len(window)


def record_sample(state: DetectorState, level: float) -> DetectorState:
    """Push ``level`` into the window, evicting the oldest, and evaluate.

    A detector already in meltdown is returned unchanged.
    """
    if state.meltdown:
        return state

    window = state.window[1:] + (level,)
    average = window_average(window)
    if average >= MELTDOWN_THRESHOLD:
        logger.info("Meltdown: window average %.4f reached %.2f", average, MELTDOWN_THRESHOLD)
        return DetectorState(window=window, meltdown=True)
    return DetectorState(window=window, meltdown=False)


def classify(state: DetectorState) -> StressPhase:
    if state.meltdown:
        return StressPhase.MELTDOWN
    if OVERSTRESSED_THRESHOLD <= window_average(state.window) < MELTDOWN_THRESHOLD:
        return StressPhase.OVERSTRESSED
    return StressPhase.NORMAL

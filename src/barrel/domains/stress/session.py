"""Stress session — the imperative shell around the pure engine.

A session owns the only mutable state: current inputs, the acute event
list, the smoothed level, the meltdown detector and the current jitter.
Two drivers advance it:

* ``advance_frame`` (continuous, once per animation frame) moves the
  smoothed level toward the instantaneous total.
* ``tick`` (discrete, nominally once per second) draws new jitter, prunes
  expired events and samples the smoothed level into the detector.

Both are no-ops while the session is in meltdown; only ``reset`` leaves it.

Usage::

    session = StressSession(default_inputs())
    rng = random.Random(7)
    session.advance_frame()
    session.tick(rng)
    if session.meltdown:
        session.reset()
"""

from __future__ import annotations

import logging
import random
import threading
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from barrel.domains.stress.connectors.defaults import default_inputs
from barrel.domains.stress.connectors.event_presets import make_event
from barrel.domains.stress.domain_logic.breakdown import compose_breakdown
from barrel.domains.stress.domain_logic.meltdown import (
    DetectorState,
    StressPhase,
    classify,
    initial_detector_state,
    record_sample,
    window_average,
)
from barrel.domains.stress.domain_logic.score_reducers import adverse_score
from barrel.domains.stress.domain_logic.smoother import advance_smoother
from barrel.domains.stress.domain_logic.stress_calculator import (
    compute_parts,
    elapsed_periods,
)
from barrel.domains.stress.domain_logic.stress_models import (
    DEFAULT_DECAY_PERIODS,
    DEFAULT_PARAMS,
    JITTER_AMPLITUDE,
    AcuteEvent,
    SmoothingState,
    StressInputs,
    StressParams,
    StressParts,
)
from barrel.domains.stress.domain_logic.validation import validate_event, validate_inputs

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def draw_jitter(rng: random.Random, amplitude: float = JITTER_AMPLITUDE) -> float:
    """Uniform jitter in [-amplitude, amplitude]."""
    return rng.uniform(-amplitude, amplitude)


def is_expired(event: AcuteEvent, now: datetime) -> bool:
    """True once the event has been around for its whole decay window."""
    decay_periods = event.decay_periods or DEFAULT_DECAY_PERIODS
    return (now - event.occurred_at).total_seconds() >= decay_periods


class StressSession:
    """Single-subject simulation state driven by frame and tick calls.

    All mutations take the session lock, so a reader on another thread
    never observes a half-applied update.
    """

    def __init__(
        self,
        inputs: StressInputs | None = None,
        params: StressParams = DEFAULT_PARAMS,
        *,
        clock: Callable[[], datetime] = _utcnow,
        jitter_amplitude: float = JITTER_AMPLITUDE,
    ) -> None:
        self._params = params
        self._clock = clock
        self._jitter_amplitude = jitter_amplitude
        self._lock = threading.RLock()
        self._inputs = validate_inputs(inputs if inputs is not None else default_inputs())
        self._smoothing = SmoothingState()
        self._detector = initial_detector_state()
        self._jitter = 0.0

    # ---------------------------------------------------------------
    # Read
    # ---------------------------------------------------------------

    @property
    def params(self) -> StressParams:
        return self._params

    @property
    def inputs(self) -> StressInputs:
        return self._inputs

    @property
    def events(self) -> tuple[AcuteEvent, ...]:
        return self._inputs.acute_events

    @property
    def level(self) -> float:
        return self._smoothing.level

    @property
    def window(self) -> tuple[float, ...]:
        return self._detector.window

    @property
    def detector(self) -> DetectorState:
        return self._detector

    @property
    def jitter(self) -> float:
        return self._jitter

    @property
    def phase(self) -> StressPhase:
        return classify(self._detector)

    @property
    def meltdown(self) -> bool:
        return self._detector.meltdown

    @property
    def overstressed(self) -> bool:
        return self.phase is StressPhase.OVERSTRESSED

    def current_parts(self, now: datetime | None = None) -> StressParts:
        """Instantaneous parts for the current inputs and jitter."""
        with self._lock:
            inputs, jitter = self._inputs, self._jitter
        return compute_parts(inputs, self._params, jitter, now=now or self._clock())

    def snapshot(self, now: datetime | None = None) -> dict[str, Any]:
        """Everything a view layer polls on each render frame."""
        now = now or self._clock()
        with self._lock:
            parts = self.current_parts(now)
            level = self.level
            return {
                "parts": parts.as_dict(),
                "level": level,
                "window": list(self.window),
                "window_average": window_average(self.window),
                "phase": self.phase.value,
                "meltdown": self.meltdown,
                "overstressed": self.overstressed,
                "jitter": self._jitter,
                "events": [
                    {
                        "label": e.label,
                        "magnitude": e.magnitude,
                        "elapsed_periods": elapsed_periods(e, now),
                        "decay_periods": e.decay_periods,
                    }
                    for e in self.events
                ],
                "breakdown": [
                    {"kind": s.kind, "label": s.label, "percentage": s.percentage, "height": s.height}
                    for s in compose_breakdown(parts, level)
                ],
            }

    # ---------------------------------------------------------------
    # Inputs
    # ---------------------------------------------------------------

    def update_inputs(self, **changes: Any) -> StressInputs:
        """Replace any of genetics, adverse, healing, daily or acute_events.

        Raises:
            InputValidationError: The resulting inputs are out of range.
        """
        with self._lock:
            if "acute_events" in changes:
                changes["acute_events"] = tuple(changes["acute_events"])
            candidate = validate_inputs(replace(self._inputs, **changes))
            self._inputs = candidate
            return candidate

    def add_event(self, event: AcuteEvent) -> AcuteEvent:
        validate_event(event)
        with self._lock:
            self._inputs = replace(self._inputs, acute_events=self._inputs.acute_events + (event,))
        logger.info("Acute event added: %s (%+.2f over %ds)", event.label, event.magnitude, event.decay_periods)
        return event

    def add_preset_event(self, label: str, now: datetime | None = None) -> AcuteEvent:
        """Add one of the preset life events, occurring now."""
        return self.add_event(make_event(label, now or self._clock()))

    def remove_event(self, index: int) -> AcuteEvent | None:
        with self._lock:
            events = self._inputs.acute_events
            if not 0 <= index < len(events):
                logger.warning("Ignoring removal of event %d: only %d events", index, len(events))
                return None
            removed = events[index]
            self._inputs = replace(self._inputs, acute_events=events[:index] + events[index + 1:])
        return removed

    def prune_expired_events(self, now: datetime | None = None) -> int:
        """Drop events whose decay window has elapsed. Returns the count."""
        now = now or self._clock()
        with self._lock:
            events = self._inputs.acute_events
            kept = tuple(e for e in events if not is_expired(e, now))
            self._inputs = replace(self._inputs, acute_events=kept)
        return len(events) - len(kept)

    # ---------------------------------------------------------------
    # Drivers
    # ---------------------------------------------------------------

    def advance_frame(self, now: datetime | None = None) -> float:
        """Continuous driver: one smoothing step toward the current total."""
        now = now or self._clock()
        with self._lock:
            if self._detector.meltdown:
                return self._smoothing.level
            parts = compute_parts(self._inputs, self._params, self._jitter, now=now)
            self._smoothing = advance_smoother(
                self._smoothing,
                parts.total,
                adverse_score(self._inputs.adverse),
                self._inputs.healing,
                self._params,
            )
            return self._smoothing.level

    def tick(self, rng: random.Random, now: datetime | None = None) -> StressPhase:
        """Discrete driver: prune events, new jitter, sample the level."""
        now = now or self._clock()
        with self._lock:
            if self._detector.meltdown:
                return StressPhase.MELTDOWN
            pruned = self.prune_expired_events(now)
            self._jitter = draw_jitter(rng, self._jitter_amplitude)
            self._detector = record_sample(self._detector, self._smoothing.level)
            phase = classify(self._detector)
        logger.debug(
            "Tick: level=%.4f avg=%.4f jitter=%+.4f pruned=%d phase=%s",
            self._smoothing.level,
            window_average(self._detector.window),
            self._jitter,
            pruned,
            phase.value,
        )
        return phase

    def reset(self, *, restore_inputs: bool = False) -> None:
        """Leave meltdown: baseline level and window, zero jitter.

        With ``restore_inputs`` the inputs also return to the documented
        defaults and all events are cleared.
        """
        with self._lock:
            self._smoothing = SmoothingState()
            self._detector = initial_detector_state()
            self._jitter = 0.0
            if restore_inputs:
                self._inputs = default_inputs()
        logger.info("Session reset (inputs restored: %s)", restore_inputs)

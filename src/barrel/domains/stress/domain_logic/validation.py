"""Boundary validation for engine inputs.

The numeric engine accepts anything and lets out-of-range values propagate.
Callers that collect inputs (the session, scenario files) run them through
``validate_inputs`` first and fail fast.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any

from barrel.domains.stress.domain_logic.stress_models import (
    ADVERSE_FLAG_NAMES,
    DAILY_FACTOR_NAMES,
    RATING_MAX,
    RATING_MIN,
    AcuteEvent,
    StressInputs,
)


class InputValidationError(ValueError):
    """One or more engine inputs are out of range."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


def _is_rating(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and RATING_MIN <= value <= RATING_MAX


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def event_errors(event: AcuteEvent, *, where: str = "event") -> list[str]:
    """Return problems with a single acute event (empty when valid)."""
    errors: list[str] = []
    if not _is_number(event.magnitude):
        errors.append(f"{where}: magnitude must be a finite number, got {event.magnitude!r}")
    occurred_at = event.occurred_at
    if not isinstance(occurred_at, datetime) or occurred_at.utcoffset() is None:
        errors.append(f"{where}: occurred_at must be a timezone-aware datetime, got {occurred_at!r}")
    periods = event.decay_periods
    if isinstance(periods, bool) or not isinstance(periods, int) or periods < 1:
        errors.append(f"{where}: decay_periods must be a positive integer, got {periods!r}")
    return errors


def collect_errors(inputs: StressInputs) -> list[str]:
    """Return every problem found in ``inputs`` (empty when valid)."""
    errors: list[str] = []

    genetics = inputs.genetics
    if not _is_rating(genetics.personal_sensitivity):
        errors.append(
            f"genetics.personal_sensitivity must be an integer {RATING_MIN}-{RATING_MAX}, "
            f"got {genetics.personal_sensitivity!r}"
        )
    for name in ("family_anxiety", "family_stress_illness"):
        if not isinstance(getattr(genetics, name), bool):
            errors.append(f"genetics.{name} must be a boolean")

    for name in ADVERSE_FLAG_NAMES:
        if not isinstance(getattr(inputs.adverse, name), bool):
            errors.append(f"adverse.{name} must be a boolean")

    if not _is_number(inputs.healing) or not 0.0 <= inputs.healing <= 1.0:
        errors.append(f"healing must be within [0, 1], got {inputs.healing!r}")

    for name in DAILY_FACTOR_NAMES:
        rating = getattr(inputs.daily, name)
        if not _is_rating(rating):
            errors.append(f"daily.{name} must be an integer {RATING_MIN}-{RATING_MAX}, got {rating!r}")

    for i, event in enumerate(inputs.acute_events):
        errors.extend(event_errors(event, where=f"acute_events[{i}] ({event.label})"))

    return errors


def validate_inputs(inputs: StressInputs) -> StressInputs:
    """Raise ``InputValidationError`` listing every problem, else return inputs."""
    errors = collect_errors(inputs)
    if errors:
        raise InputValidationError(errors)
    return inputs


def validate_event(event: AcuteEvent) -> AcuteEvent:
    errors = event_errors(event)
    if errors:
        raise InputValidationError(errors)
    return event

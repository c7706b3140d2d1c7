"""Preset life events and scheduled event descriptors."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from barrel.domains.stress.domain_logic.stress_models import (
    DEFAULT_DECAY_PERIODS,
    AcuteEvent,
)


@dataclass(frozen=True)
class EventPreset:
    label: str
    magnitude: float
    decay_periods: int = DEFAULT_DECAY_PERIODS


PRESETS = [
    EventPreset("Job loss", 0.15),
    EventPreset("Death in family", 0.20),
    EventPreset("Medical emergency", 0.15),
    EventPreset("Breakup", 0.10),
    EventPreset("Financial crisis", 0.10),
    EventPreset("Major positive event", -0.08),
]

_PRESETS_BY_LABEL = {p.label.lower(): p for p in PRESETS}


def list_presets() -> list[EventPreset]:
    return list(PRESETS)


def get_preset(label: str) -> EventPreset:
    """Look up a preset by label (case-insensitive).

    Raises:
        KeyError: No preset has that label.
    """
    try:
        return _PRESETS_BY_LABEL[label.lower().strip()]
    except KeyError:
        raise KeyError(f"Unknown event preset: {label!r}") from None


def make_event(label: str, now: datetime) -> AcuteEvent:
    """Create an acute event from a preset, occurring at ``now``."""
    preset = get_preset(label)
    return AcuteEvent(
        label=preset.label,
        magnitude=preset.magnitude,
        occurred_at=now,
        decay_periods=preset.decay_periods,
    )


@dataclass(frozen=True)
class ScheduledEvent:
    """An event to inject ``offset_s`` seconds after a run starts."""

    offset_s: float
    label: str
    magnitude: float
    decay_periods: int = DEFAULT_DECAY_PERIODS

    def materialize(self, start: datetime) -> AcuteEvent:
        return AcuteEvent(
            label=self.label,
            magnitude=self.magnitude,
            occurred_at=start + timedelta(seconds=self.offset_s),
            decay_periods=self.decay_periods,
        )

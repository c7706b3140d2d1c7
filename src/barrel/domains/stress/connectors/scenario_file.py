"""Scenario file provider — reads stress inputs from a YAML file.

A scenario overrides any subset of the documented defaults and may
schedule events by preset name or with explicit values::

    name: rough_week
    genetics:
      family_anxiety: true
      personal_sensitivity: 4
    adverse_experiences:
      household_dysfunction: true
    healing: 0.25
    daily:
      sleep_quality: 2
      financial_stress: 4
    events:
      - preset: Job loss
        at: 3
      - label: Promotion
        magnitude: -0.1
        decay_periods: 15
        at: 8
"""

from __future__ import annotations

import logging
import math
from dataclasses import fields, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml

from barrel.domains.stress.connectors.defaults import default_inputs
from barrel.domains.stress.connectors.event_presets import ScheduledEvent, get_preset
from barrel.domains.stress.domain_logic.stress_models import (
    DEFAULT_DECAY_PERIODS,
    StressInputs,
)
from barrel.domains.stress.domain_logic.validation import (
    InputValidationError,
    event_errors,
    validate_inputs,
)

logger = logging.getLogger(__name__)

# Scenarios shipped with the package live under src/barrel/domains/stress/scenarios/
BUNDLED_SCENARIO_DIR = Path(__file__).resolve().parent.parent / "scenarios"

_SECTIONS = {
    "genetics": "genetics",
    "adverse_experiences": "adverse",
    "daily": "daily",
}


class ScenarioLoadError(Exception):
    """Scenario file is missing, malformed or holds invalid inputs."""


def _override(section: str, current: Any, data: Any) -> Any:
    if data is None:
        return current
    if not isinstance(data, dict):
        raise ScenarioLoadError(f"Section '{section}' must be a mapping")
    known = {f.name for f in fields(current)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ScenarioLoadError(f"Unknown keys in '{section}': {', '.join(unknown)}")
    return replace(current, **data)


def _parse_event(index: int, entry: Any) -> ScheduledEvent:
    if not isinstance(entry, dict):
        raise ScenarioLoadError(f"events[{index}] must be a mapping")

    offset = entry.get("at", 0)
    valid_offset = isinstance(offset, (int, float)) and not isinstance(offset, bool)
    if not valid_offset or not math.isfinite(offset) or offset < 0:
        raise ScenarioLoadError(f"events[{index}]: 'at' must be a non-negative number of seconds")

    if "preset" in entry:
        try:
            preset = get_preset(str(entry["preset"]))
        except KeyError as exc:
            raise ScenarioLoadError(f"events[{index}]: {exc.args[0]}") from exc
        label = preset.label
        magnitude = entry.get("magnitude", preset.magnitude)
        decay_periods = entry.get("decay_periods", preset.decay_periods)
    else:
        if "magnitude" not in entry:
            raise ScenarioLoadError(f"events[{index}]: needs either 'preset' or 'magnitude'")
        label = str(entry.get("label", f"event {index}"))
        magnitude = entry["magnitude"]
        decay_periods = entry.get("decay_periods", DEFAULT_DECAY_PERIODS)

    scheduled = ScheduledEvent(
        offset_s=float(offset),
        label=label,
        magnitude=magnitude,
        decay_periods=decay_periods,
    )
    errors = event_errors(scheduled.materialize(datetime.now(timezone.utc)), where=f"events[{index}]")
    if errors:
        raise ScenarioLoadError("; ".join(errors))
    return scheduled


def bundled_scenarios() -> dict[str, Path]:
    """Map bundled scenario names to their files."""
    return {path.stem: path for path in sorted(BUNDLED_SCENARIO_DIR.glob("*.yaml"))}


def resolve_scenario_path(value: str | Path) -> Path:
    """Accept a file path or the name of a bundled scenario."""
    path = Path(value).expanduser()
    if path.is_file():
        return path
    bundled = bundled_scenarios().get(str(value))
    if bundled is not None:
        return bundled
    raise ScenarioLoadError(f"Scenario file not found: {path}")


def load_scenario_file(path: str | Path) -> tuple[StressInputs, list[ScheduledEvent], dict[str, Any]]:
    """Parse a scenario YAML file.

    Returns:
        (validated inputs, scheduled events sorted by offset, metadata)
    """
    path = resolve_scenario_path(path)

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ScenarioLoadError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ScenarioLoadError(f"Scenario {path} must be a mapping at the top level")

    inputs = default_inputs()
    changes: dict[str, Any] = {}
    for section, attr in _SECTIONS.items():
        changes[attr] = _override(section, getattr(inputs, attr), data.get(section))
    if "healing" in data:
        changes["healing"] = data["healing"]
    inputs = replace(inputs, **changes)

    try:
        validate_inputs(inputs)
    except InputValidationError as exc:
        raise ScenarioLoadError(f"Invalid inputs in {path}: {exc}") from exc

    events = sorted(
        (_parse_event(i, entry) for i, entry in enumerate(data.get("events") or [])),
        key=lambda e: e.offset_s,
    )
    metadata = {
        "name": str(data.get("name", path.stem)),
        "description": str(data.get("description", "")).strip(),
    }
    return inputs, events, metadata


class ScenarioFileProvider:
    """StressInputProvider backed by a YAML scenario file.

    The file is read once, on construction.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = resolve_scenario_path(path)
        self._inputs, self._events, self._metadata = load_scenario_file(self._path)
        logger.info(
            "Loaded scenario '%s' from %s (%d scheduled events)",
            self._metadata["name"],
            self._path,
            len(self._events),
        )

    def get_inputs(self) -> StressInputs:
        return self._inputs

    def get_scheduled_events(self) -> list[ScheduledEvent]:
        return list(self._events)

    @property
    def data_source(self) -> str:
        return "scenario"

    @property
    def name(self) -> str:
        return self._metadata["name"]

    def get_provenance(self) -> dict[str, str]:
        note = self._metadata["description"] or f"Scenario loaded from {self._path.name}."
        return {
            "data_source": self.data_source,
            "scenario": self.name,
            "data_source_note": note,
        }

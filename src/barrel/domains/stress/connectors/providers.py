"""Concrete StressInputProvider implementations."""

from __future__ import annotations

from barrel.domains.stress.connectors.defaults import default_inputs
from barrel.domains.stress.connectors.event_presets import ScheduledEvent
from barrel.domains.stress.domain_logic.stress_models import StressInputs


class DefaultInputProvider:
    """Uses the documented starting inputs. Always available."""

    def get_inputs(self) -> StressInputs:
        return default_inputs()

    def get_scheduled_events(self) -> list[ScheduledEvent]:
        return []

    @property
    def data_source(self) -> str:
        return "defaults"

    def get_provenance(self) -> dict[str, str]:
        return {
            "data_source": self.data_source,
            "data_source_note": "Using the documented starting inputs.",
        }

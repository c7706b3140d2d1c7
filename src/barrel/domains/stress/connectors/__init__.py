"""Input connectors — where the engine's inputs come from."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from barrel.domains.stress.connectors.event_presets import ScheduledEvent
from barrel.domains.stress.domain_logic.stress_models import StressInputs


@runtime_checkable
class StressInputProvider(Protocol):
    """Abstract interface for supplying stress inputs to a session.

    The session asks for inputs without knowing whether they come from a
    form, a scenario file or the documented defaults.
    """

    def get_inputs(self) -> StressInputs:
        """Profiles, healing and daily ratings (no acute events)."""
        ...

    def get_scheduled_events(self) -> list[ScheduledEvent]:
        """Events to inject at fixed offsets from the start of a run."""
        ...

    @property
    def data_source(self) -> str:
        """Label for the input source: 'defaults' or 'scenario'."""
        ...

    def get_provenance(self) -> dict[str, str]:
        """Return provenance metadata suitable for run summaries."""
        ...

"""Headless simulation entry point — ``python -m barrel.core.runner.main``."""

from __future__ import annotations

import asyncio
import json
import logging
import random
from typing import Any

from barrel.core.config.settings import Settings, get_settings
from barrel.core.runtime.drivers import run_simulation
from barrel.domains.stress.connectors import StressInputProvider
from barrel.domains.stress.connectors.providers import DefaultInputProvider
from barrel.domains.stress.connectors.scenario_file import ScenarioFileProvider
from barrel.domains.stress.session import StressSession

logger = logging.getLogger(__name__)


def create_provider(settings: Settings) -> StressInputProvider:
    """Scenario file when one is configured, documented defaults otherwise."""
    if settings.scenario_path:
        return ScenarioFileProvider(settings.scenario_path)
    logger.info("No scenario configured; using default inputs")
    return DefaultInputProvider()


def create_session(settings: Settings, provider: StressInputProvider) -> StressSession:
    return StressSession(
        provider.get_inputs(),
        settings.to_params(),
        jitter_amplitude=settings.jitter_amplitude,
    )


async def simulate(settings: Settings) -> dict[str, Any]:
    """Build a session from settings and run it for ``run_seconds``."""
    provider = create_provider(settings)
    session = create_session(settings, provider)
    summary = await run_simulation(
        session,
        duration_s=settings.run_seconds,
        frame_rate_hz=settings.frame_rate_hz,
        tick_period_s=settings.tick_period_s,
        rng=random.Random(settings.random_seed),
        scheduled_events=provider.get_scheduled_events(),
    )
    summary["provenance"] = provider.get_provenance()
    return summary


def run() -> None:
    """Run one headless simulation and print its summary as JSON."""
    settings = get_settings()
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    logger.info(
        "Starting simulation: %.1fs at %.0f fps, tick every %.2fs",
        settings.run_seconds,
        settings.frame_rate_hz,
        settings.tick_period_s,
    )
    summary = asyncio.run(simulate(settings))
    logger.info(
        "Simulation finished: phase=%s level=%.4f ticks=%d",
        summary["phase"],
        summary["final_level"],
        summary["ticks"],
    )
    print(json.dumps(summary, indent=2))


if __name__ == "__main__":
    run()
